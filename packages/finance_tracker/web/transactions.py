"""Resourceful ``/transactions`` routes."""

from __future__ import annotations

from flask import Blueprint, flash, jsonify, redirect, request, url_for
from flask_login import current_user

from ..categories import list_categories
from ..query import TransactionFilters, list_transactions
from ..transactions import (
    create_transaction,
    delete_transaction,
    get_transaction,
    update_transaction,
)
from .auth import require_verified_user
from .utils import current_settings, db_session, pending_notices, request_payload, wants_json

bp = Blueprint("transactions", __name__, url_prefix="/transactions")
bp.before_request(require_verified_user)


def _back_to_index(message: str):
    flash(message, "success")
    return redirect(url_for("transactions.index"), code=303)


@bp.get("")
def index():
    settings = current_settings()
    filters = TransactionFilters.from_params(
        request.args,
        default_per_page=settings.default_per_page,
        max_per_page=settings.max_per_page,
    )
    with db_session() as session:
        page = list_transactions(session, filters)
        categories = list_categories(session)
    return jsonify(
        {
            "transactions": page.to_dict(),
            "categories": [c.to_dict() for c in categories],
            "filters": page.filters,
            "flash": pending_notices(),
        }
    )


@bp.post("")
def store():
    with db_session() as session:
        tx = create_transaction(session, actor_id=current_user.id, data=request_payload())
    if wants_json():
        body = {"message": "Transaction created successfully.", "transaction": tx.to_dict()}
        return jsonify(body), 201
    return _back_to_index("Transaction created successfully.")


@bp.get("/<int:transaction_id>")
def show(transaction_id: int):
    with db_session() as session:
        tx = get_transaction(session, transaction_id)
    return jsonify({"transaction": tx.to_dict(), "flash": pending_notices()})


@bp.route("/<int:transaction_id>", methods=["PUT", "PATCH"])
def update(transaction_id: int):
    with db_session() as session:
        tx = update_transaction(
            session,
            actor_id=current_user.id,
            transaction_id=transaction_id,
            data=request_payload(),
        )
    if wants_json():
        return jsonify(
            {"message": "Transaction updated successfully.", "transaction": tx.to_dict()}
        )
    return _back_to_index("Transaction updated successfully.")


@bp.delete("/<int:transaction_id>")
def destroy(transaction_id: int):
    with db_session() as session:
        delete_transaction(session, transaction_id)
    if wants_json():
        return jsonify({"message": "Transaction deleted successfully."})
    return _back_to_index("Transaction deleted successfully.")
