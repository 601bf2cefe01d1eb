"""Session authentication seam.

Logging users in is handled by an external collaborator that stores the user
id in the Flask session (Flask-Login's ``login_user``). This module only
resolves that id back to a user and guards the resource blueprints: every
route needs an authenticated user whose email address is verified.
"""

from __future__ import annotations

from dataclasses import dataclass

from db.client import session_scope
from db.models.finance import User
from flask import jsonify
from flask_login import LoginManager, UserMixin, current_user

from ..logging_setup import get_logger
from ..models import is_storable_id
from .utils import current_settings

logger = get_logger("finance_tracker.web.auth")

login_manager = LoginManager()


@dataclass(frozen=True)
class AuthUser(UserMixin):
    """Detached snapshot of the acting user for the current request."""

    id: int
    name: str
    email: str
    verified: bool

    @classmethod
    def from_row(cls, row: User) -> AuthUser:
        return cls(id=row.id, name=row.name, email=row.email, verified=row.is_verified)


@login_manager.user_loader
def load_user(user_id: str) -> AuthUser | None:
    try:
        uid = int(user_id)
    except (TypeError, ValueError):
        return None
    if not is_storable_id(uid):
        return None
    with session_scope(database_url=current_settings().database_url) as session:
        row = session.get(User, uid)
        return AuthUser.from_row(row) if row is not None else None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"message": "Unauthenticated."}), 401


def require_verified_user():
    """``before_request`` hook for blueprints that need a verified session."""

    if not current_user.is_authenticated:
        return login_manager.unauthorized()
    if not current_user.verified:
        logger.info("rejecting unverified user: id=%s", current_user.id)
        return jsonify({"message": "Your email address is not verified."}), 403
    return None


__all__ = ["AuthUser", "login_manager", "load_user", "require_verified_user"]
