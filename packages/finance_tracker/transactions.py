"""Transaction service operations (create/show/update/delete).

The acting user is an explicit ``actor_id`` argument rather than ambient
request state. ``user_id`` is assigned from it on create and is never taken
from the input mapping nor changed on update.

Like :mod:`finance_tracker.categories`, functions only ``flush``; the caller's
``session_scope`` commits or rolls back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from db.models.finance import Transaction
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from .errors import NotFoundError, ValidationError
from .logging_setup import get_logger
from .models import TransactionInput, TransactionView, is_storable_id
from .validation import validate_transaction_input

logger = get_logger("finance_tracker.transactions")


def _load(session: Session, transaction_id: int, *, fresh: bool = False) -> Transaction:
    if not is_storable_id(transaction_id):
        raise NotFoundError("transaction", transaction_id)
    stmt = (
        select(Transaction)
        .options(joinedload(Transaction.user), joinedload(Transaction.category))
        .where(Transaction.id == transaction_id)
    )
    if fresh:
        # Re-read after a flush so server defaults and a changed category land.
        stmt = stmt.execution_options(populate_existing=True)
    row = session.execute(stmt).scalars().first()
    if row is None:
        raise NotFoundError("transaction", transaction_id)
    return row


def _validated(session: Session, data: Mapping[str, Any]) -> TransactionInput:
    parsed, errors = validate_transaction_input(session, data)
    if errors or parsed is None:
        raise ValidationError(errors)
    return parsed


def _apply(row: Transaction, payload: TransactionInput) -> None:
    row.category_id = payload.category_id
    row.description = payload.description
    row.amount = payload.amount
    row.date = payload.date


def get_transaction(session: Session, transaction_id: int) -> TransactionView:
    return TransactionView.from_row(_load(session, transaction_id))


def create_transaction(
    session: Session, *, actor_id: int, data: Mapping[str, Any]
) -> TransactionView:
    """Validate ``data`` and store a new transaction owned by ``actor_id``.

    Parameters
    ----------
    session:
        Open session; the caller owns commit/rollback.
    actor_id:
        Id of the authenticated user. Any ``user_id`` key in ``data`` is
        ignored.
    data:
        Raw request fields: ``category_id``, ``description``, ``amount``,
        ``date``.

    Raises
    ------
    ValidationError
        With per-field messages; nothing is written.
    """

    payload = _validated(session, data)
    row = Transaction(user_id=actor_id)
    _apply(row, payload)
    session.add(row)
    session.flush()
    row = _load(session, row.id, fresh=True)
    logger.info(
        "transaction created: id=%s user_id=%s amount=%s", row.id, row.user_id, row.amount
    )
    return TransactionView.from_row(row)


def update_transaction(
    session: Session,
    *,
    actor_id: int,
    transaction_id: int,
    data: Mapping[str, Any],
) -> TransactionView:
    """Replace category/description/amount/date of an existing transaction.

    ``NotFoundError`` is checked before validation. The owner (``user_id``)
    stays as created regardless of who edits.
    """

    row = _load(session, transaction_id)
    payload = _validated(session, data)
    _apply(row, payload)
    session.flush()
    row = _load(session, row.id, fresh=True)
    logger.info("transaction updated: id=%s by user_id=%s", row.id, actor_id)
    return TransactionView.from_row(row)


def delete_transaction(session: Session, transaction_id: int) -> None:
    row = _load(session, transaction_id)
    session.delete(row)
    session.flush()
    logger.info("transaction deleted: id=%s", transaction_id)


__all__ = [
    "get_transaction",
    "create_transaction",
    "update_transaction",
    "delete_transaction",
]
