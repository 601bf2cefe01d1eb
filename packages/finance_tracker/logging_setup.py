"""Logging for the ``finance_tracker`` package.

Entrypoints (``finance_tracker.cli`` and ``finance_tracker.web.create_app``)
call :func:`configure_logging` once; every other module only asks for a
logger through :func:`get_logger` and never attaches handlers of its own.
Until configuration runs, the package logger carries a ``NullHandler`` so that
importing the package as a library stays silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PKG_LOGGER_NAME = "finance_tracker"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured_handler: logging.Handler | None = None


def parse_level(level: int | str | None) -> int:
    """Resolve ``level`` (int, name or numeric string) to a logging level.

    ``None`` falls back to ``FINANCE_TRACKER_LOG_LEVEL`` and then ``INFO``.
    Unknown names resolve to ``INFO``.
    """

    if isinstance(level, int):
        return level
    if level is None:
        level = os.getenv("FINANCE_TRACKER_LOG_LEVEL")
        if not level:
            return logging.INFO
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Logger:
    """Attach a single ``StreamHandler`` to the package logger.

    Repeated calls are no-ops apart from adjusting the level, so the app
    factory can run many times in one process (tests) without duplicating
    output.
    """

    global _configured_handler
    logger = logging.getLogger(PKG_LOGGER_NAME)
    resolved = parse_level(level)

    if _configured_handler is None:
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(handler)
        # Avoid double emission via the root logger.
        logger.propagate = False
        _configured_handler = handler

    _configured_handler.setLevel(resolved)
    logger.setLevel(resolved)
    return logger


def reset_logging() -> None:
    """Detach the configured handler and restore library defaults."""

    global _configured_handler
    logger = logging.getLogger(PKG_LOGGER_NAME)
    if _configured_handler is not None:
        logger.removeHandler(_configured_handler)
        _configured_handler = None
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with a silent package default."""

    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if _configured_handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "parse_level",
    "reset_logging",
]
