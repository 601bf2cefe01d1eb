"""Category service operations.

Server-side validated CRUD over the ``categories`` table. Callers own the
transaction scope: every function takes an open SQLAlchemy ``Session`` and
only flushes, so the surrounding ``session_scope`` decides commit/rollback.

Exports
-------
- ``list_categories(...)``: the full set, ordered by name (no paging).
- ``create_category(...)`` / ``update_category(...)``: validated writes;
  update replaces all editable fields.
- ``get_category(...)`` / ``delete_category(...)``: lookup and hard delete.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from db.models.finance import Category, Transaction
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from .errors import NotFoundError, ValidationError
from .logging_setup import get_logger
from .models import CategoryInput, CategoryView, is_storable_id
from .validation import validate_category_input

logger = get_logger("finance_tracker.categories")


def _load(session: Session, category_id: int) -> Category:
    row = session.get(Category, category_id) if is_storable_id(category_id) else None
    if row is None:
        raise NotFoundError("category", category_id)
    return row


def _validated(data: Mapping[str, Any]) -> CategoryInput:
    parsed, errors = validate_category_input(data)
    if errors or parsed is None:
        raise ValidationError(errors)
    return parsed


def list_categories(session: Session) -> list[CategoryView]:
    rows = session.execute(select(Category).order_by(Category.name, Category.id)).scalars().all()
    return [CategoryView.from_row(r) for r in rows]


def get_category(session: Session, category_id: int) -> CategoryView:
    return CategoryView.from_row(_load(session, category_id))


def create_category(session: Session, data: Mapping[str, Any]) -> CategoryView:
    """Validate ``data`` and insert a new category.

    Raises
    ------
    ValidationError
        When ``name``/``type`` are missing or too long.
    """

    payload = _validated(data)
    row = Category(name=payload.name, description=payload.description, type=payload.type)
    session.add(row)
    session.flush()  # assign id and server defaults
    session.refresh(row)
    logger.info("category created: id=%s name=%r", row.id, row.name)
    return CategoryView.from_row(row)


def update_category(session: Session, category_id: int, data: Mapping[str, Any]) -> CategoryView:
    """Replace the editable fields of an existing category.

    Lookup happens first, so an unknown id reports ``NotFoundError`` even when
    ``data`` is also invalid.
    """

    row = _load(session, category_id)
    payload = _validated(data)
    row.name = payload.name
    row.description = payload.description
    row.type = payload.type
    session.flush()
    session.refresh(row)
    logger.info("category updated: id=%s", row.id)
    return CategoryView.from_row(row)


def delete_category(session: Session, category_id: int) -> None:
    """Hard-delete a category; its transactions keep living uncategorized."""

    row = _load(session, category_id)
    # Mirrors the FK's ON DELETE SET NULL for stores that do not enforce it.
    detached = session.execute(
        update(Transaction)
        .where(Transaction.category_id == row.id)
        .values(category_id=None)
        .execution_options(synchronize_session=False)
    ).rowcount
    session.delete(row)
    session.flush()
    logger.info("category deleted: id=%s detached_transactions=%s", category_id, detached)


__all__ = [
    "list_categories",
    "get_category",
    "create_category",
    "update_category",
    "delete_category",
]
