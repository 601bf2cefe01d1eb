"""Small request/response helpers shared by the blueprints."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from db.client import session_scope
from flask import current_app, get_flashed_messages, request
from sqlalchemy.orm import Session

from ..config import Settings


def current_settings() -> Settings:
    return current_app.config["FT_SETTINGS"]


@contextmanager
def db_session() -> Iterator[Session]:
    """One transactional session per request handler."""

    with session_scope(database_url=current_settings().database_url) as session:
        yield session


def request_payload() -> Mapping[str, Any]:
    """Write fields from a JSON object body or from form data."""

    if request.is_json:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}
    return request.form.to_dict()


def wants_json() -> bool:
    """API clients (JSON bodies) get payloads instead of redirects."""

    return request.is_json


def pending_notices() -> list[dict[str, str]]:
    return [
        {"type": category, "message": message}
        for category, message in get_flashed_messages(with_categories=True)
    ]
