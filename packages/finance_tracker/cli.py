# ruff: noqa: I001
"""CLI for the ``finance_tracker`` package.

A Typer console for local operation: create the schema, add a user, and run
the development server. Environment variables (notably ``DATABASE_URL`` and
``SECRET_KEY``) are loaded from a local ``.env`` using ``python-dotenv``
before any command runs; values already exported in the shell win.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path

import typer
from dotenv import load_dotenv

from .logging_setup import configure_logging, get_logger

logger = get_logger("finance_tracker.cli")

LOCAL_DATABASE_URL = "sqlite+pysqlite:///finance_tracker.db"

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Personal finance tracker: manage the local database and run the web app. "
        "Loads DATABASE_URL and SECRET_KEY from a local .env before running."
    ),
)

DATABASE_URL_OPTION = typer.Option(
    None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
)


def _resolve_database_url(database_url: str | None) -> str:
    return database_url or os.getenv("DATABASE_URL") or LOCAL_DATABASE_URL


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Package log level (default: FINANCE_TRACKER_LOG_LEVEL or INFO).",
    ),
) -> None:
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


@app.command("init-db")
def init_db_cmd(database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Create all tables from the ORM metadata (use Alembic for managed databases)."""

    # Deferred imports to keep CLI startup fast
    from db import metadata
    from db.client import get_engine

    url = _resolve_database_url(database_url)
    metadata.create_all(bind=get_engine(database_url=url))
    logger.info("schema created: tables=%s", sorted(metadata.tables))
    typer.echo(f"Initialized database schema ({len(metadata.tables)} tables).")


@app.command("create-user")
def create_user_cmd(
    name: str = typer.Option(..., "--name", help="Display name."),
    email: str = typer.Option(..., "--email", help="Unique email address."),
    verified: bool = typer.Option(
        False, "--verified/--unverified", help="Mark the email address as verified."
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Insert a user row so a session can act on its behalf."""

    from db.client import session_scope
    from db.models.finance import User
    from sqlalchemy import func, select

    name_n = " ".join(name.split())
    email_n = email.strip().lower()
    if not name_n or "@" not in email_n:
        typer.echo("Error: --name must be non-empty and --email must be an address.", err=True)
        raise typer.Exit(1)

    url = _resolve_database_url(database_url)
    with session_scope(database_url=url) as session:
        existing = session.execute(
            select(User.id).where(func.lower(User.email) == email_n)
        ).scalar_one_or_none()
        if existing is not None:
            typer.echo(
                f"Error: a user with email {email_n!r} already exists (id={existing}).", err=True
            )
            raise typer.Exit(1)
        row = User(
            name=name_n,
            email=email_n,
            email_verified_at=datetime.now(UTC) if verified else None,
        )
        session.add(row)
        session.flush()
        user_id = row.id

    logger.info("user created: id=%s verified=%s", user_id, verified)
    typer.echo(f"Created user {user_id} <{email_n}>.")


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(5000, help="Port to listen on."),
    debug: bool = typer.Option(False, help="Enable the Flask debugger and reloader."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Run the Flask development server."""

    from .config import Settings
    from .web import create_app

    settings = Settings.from_env(database_url=_resolve_database_url(database_url))
    create_app(settings).run(host=host, port=port, debug=debug)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
