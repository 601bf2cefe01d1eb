"""Resourceful ``/categories`` routes. Same shape as transactions, no filtering."""

from __future__ import annotations

from flask import Blueprint, flash, jsonify, redirect, url_for

from ..categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)
from .auth import require_verified_user
from .utils import db_session, pending_notices, request_payload, wants_json

bp = Blueprint("categories", __name__, url_prefix="/categories")
bp.before_request(require_verified_user)


def _back_to_index(message: str):
    flash(message, "success")
    return redirect(url_for("categories.index"), code=303)


@bp.get("")
def index():
    with db_session() as session:
        categories = list_categories(session)
    return jsonify({"categories": [c.to_dict() for c in categories], "flash": pending_notices()})


@bp.post("")
def store():
    with db_session() as session:
        category = create_category(session, request_payload())
    if wants_json():
        body = {"message": "Category created successfully.", "category": category.to_dict()}
        return jsonify(body), 201
    return _back_to_index("Category created successfully.")


@bp.get("/<int:category_id>")
def show(category_id: int):
    with db_session() as session:
        category = get_category(session, category_id)
    return jsonify({"category": category.to_dict(), "flash": pending_notices()})


@bp.route("/<int:category_id>", methods=["PUT", "PATCH"])
def update(category_id: int):
    with db_session() as session:
        category = update_category(session, category_id, request_payload())
    if wants_json():
        return jsonify(
            {"message": "Category updated successfully.", "category": category.to_dict()}
        )
    return _back_to_index("Category updated successfully.")


@bp.delete("/<int:category_id>")
def destroy(category_id: int):
    with db_session() as session:
        delete_category(session, category_id)
    if wants_json():
        return jsonify({"message": "Category deleted successfully."})
    return _back_to_index("Category deleted successfully.")
