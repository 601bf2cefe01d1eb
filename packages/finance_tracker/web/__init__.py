"""Flask application factory for ``finance_tracker``.

The app exposes resourceful JSON routes for ``/categories`` and
``/transactions``. Domain errors map to HTTP as follows:

- :class:`~finance_tracker.errors.ValidationError` -> 422 with per-field
  ``errors``;
- :class:`~finance_tracker.errors.NotFoundError` (and unknown routes) -> 404;
- unauthenticated -> 401, unverified -> 403 (see :mod:`.auth`).

Storage failures are left to Flask's generic 500 handling; the per-request
``session_scope`` has already rolled back by then.
"""

from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..config import Settings
from ..errors import NotFoundError, ValidationError
from ..logging_setup import configure_logging, get_logger
from . import categories, transactions
from .auth import login_manager

logger = get_logger("finance_tracker.web")


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_failed(exc: ValidationError):
        return jsonify({"message": exc.message, "errors": exc.errors}), 422

    @app.errorhandler(NotFoundError)
    def _not_found(exc: NotFoundError):
        logger.debug("not found: %s", exc)
        return jsonify({"message": f"No {exc.resource} found for id {exc.identifier}."}), 404

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        if exc.code is not None and exc.code < 400:
            return exc  # routing redirects pass through untouched
        return jsonify({"message": exc.description}), exc.code or 500


def create_app(settings: Settings | None = None) -> Flask:
    """Build the Flask app.

    Parameters
    ----------
    settings:
        Explicit settings; when omitted they are read with
        :meth:`Settings.from_env`.
    """

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=settings.secret_key, FT_SETTINGS=settings)

    login_manager.init_app(app)
    app.register_blueprint(categories.bp)
    app.register_blueprint(transactions.bp)
    _register_error_handlers(app)

    logger.info("finance_tracker app created")
    return app


__all__ = ["create_app"]
