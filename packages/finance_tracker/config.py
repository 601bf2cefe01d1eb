"""Runtime settings for ``finance_tracker``.

Settings are read from the process environment. The CLI loads a local
``.env`` (python-dotenv, non-overriding) before building them, so values from
the shell always win over the file.

Variables
---------
- ``DATABASE_URL``: SQLAlchemy URL of the application database (required).
- ``SECRET_KEY``: key used by Flask to sign the session cookie.
- ``FT_DEFAULT_PER_PAGE``: transactions per page when ``per_page`` is absent.
- ``FT_MAX_PER_PAGE``: upper bound applied to a client supplied ``per_page``.
- ``FINANCE_TRACKER_LOG_LEVEL``: package log level (see ``logging_setup``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEV_SECRET_KEY = "dev-key-change-me"
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str
    secret_key: str = DEV_SECRET_KEY
    default_per_page: int = DEFAULT_PER_PAGE
    max_per_page: int = MAX_PER_PAGE
    log_level: str | None = None

    def __post_init__(self) -> None:
        if not self.database_url:
            raise ValueError("database_url must be non-empty")
        if self.default_per_page > self.max_per_page:
            raise ValueError(
                f"default_per_page ({self.default_per_page}) exceeds "
                f"max_per_page ({self.max_per_page})"
            )

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        database_url: str | None = None,
    ) -> Settings:
        """Build settings from ``env`` (defaults to ``os.environ``).

        ``database_url`` overrides ``DATABASE_URL`` when given.
        """

        env = os.environ if env is None else env
        url = database_url or env.get("DATABASE_URL")
        if not url:
            raise RuntimeError("DATABASE_URL is not set; cannot configure finance_tracker")
        return cls(
            database_url=url,
            secret_key=env.get("SECRET_KEY") or DEV_SECRET_KEY,
            default_per_page=_env_int(env, "FT_DEFAULT_PER_PAGE", DEFAULT_PER_PAGE),
            max_per_page=_env_int(env, "FT_MAX_PER_PAGE", MAX_PER_PAGE),
            log_level=env.get("FINANCE_TRACKER_LOG_LEVEL") or None,
        )


__all__ = ["Settings", "DEFAULT_PER_PAGE", "MAX_PER_PAGE"]
