"""Process-wide SQLAlchemy engine and session helpers.

One engine serves the whole process and is bound to the first database URL
it sees (explicit argument, else ``DATABASE_URL``). Asking for a different
URL afterwards is an error until :func:`dispose_engine` releases the binding;
the test suite does that between tests.

Usage
-----
from db.client import session_scope

with session_scope(database_url=url) as s:
    s.execute(...)
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


@dataclass(slots=True)
class _Binding:
    url: str
    engine: Engine
    sessions: sessionmaker[Session]


_binding: _Binding | None = None


def _resolve_url(override: str | None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot initialize database client")
    return url


def _sqlite_foreign_keys_on(dbapi_conn, _record) -> None:  # pragma: no cover - driver hook
    # Without this SQLite ignores ON DELETE actions and FK checks.
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def _bind(url: str) -> _Binding:
    engine = create_engine(url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_foreign_keys_on)
    return _Binding(
        url=url,
        engine=engine,
        sessions=sessionmaker(bind=engine, expire_on_commit=False, class_=Session),
    )


def _current(database_url: str | None) -> _Binding:
    global _binding
    url = _resolve_url(database_url)
    if _binding is None:
        _binding = _bind(url)
    elif url != _binding.url:
        raise RuntimeError(
            "database client is bound to a different DATABASE_URL; "
            "call dispose_engine() before switching"
        )
    return _binding


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the shared engine, creating it on first use."""

    return _current(database_url).engine


def dispose_engine() -> None:
    """Close pooled connections and forget the bound URL."""

    global _binding
    if _binding is not None:
        _binding.engine.dispose()
    _binding = None


def get_session(*, database_url: str | None = None) -> Session:
    """Return a new session on the shared engine; the caller closes it."""

    return _current(database_url).sessions()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Commit on success, roll back on any exception, always close."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "get_engine",
    "dispose_engine",
    "get_session",
    "session_scope",
]
