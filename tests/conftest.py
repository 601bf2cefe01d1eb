"""Pytest configuration for test isolation.

``db.client`` keeps one process-wide engine bound to a single database URL,
and ``finance_tracker.logging_setup`` configures the package logger once per
process. Each test gets its own file-backed SQLite database under ``tmp_path``,
so an autouse fixture disposes the shared engine and resets logging after every
test to keep tests hermetic.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from db.client import dispose_engine, session_scope
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.orm import Session

from finance_tracker.config import Settings
from finance_tracker.logging_setup import reset_logging
from finance_tracker.web import create_app
from tests.helpers.db import bootstrap_sqlite_db, seed_user


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "DATABASE_URL",
        "SECRET_KEY",
        "FT_DEFAULT_PER_PAGE",
        "FT_MAX_PER_PAGE",
        "FINANCE_TRACKER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    dispose_engine()
    yield
    dispose_engine()
    reset_logging()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "finance-tracker.db")


@pytest.fixture
def session(db_url: str) -> Iterator[Session]:
    with session_scope(database_url=db_url) as s:
        yield s


@pytest.fixture
def user_id(db_url: str) -> int:
    return seed_user(db_url)


@pytest.fixture
def app(db_url: str) -> Flask:
    flask_app = create_app(Settings(database_url=db_url, secret_key="test-secret"))
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def login(client: FlaskClient) -> Callable[[int], FlaskClient]:
    """Put ``user_id`` in the session the way Flask-Login's ``login_user`` does."""

    def _login(uid: int) -> FlaskClient:
        with client.session_transaction() as sess:
            sess["_user_id"] = str(uid)
            sess["_fresh"] = True
        return client

    return _login


@pytest.fixture
def auth_client(login: Callable[[int], FlaskClient], user_id: int) -> FlaskClient:
    return login(user_id)
