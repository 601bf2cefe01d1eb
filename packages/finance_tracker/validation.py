"""Standalone validation for write operations.

Each write operation has one validation function that returns the parsed input
model (or ``None``) together with a ``field -> messages`` mapping. Services
raise :class:`finance_tracker.errors.ValidationError` from that mapping; the
functions themselves never raise for bad input.

Request conventions applied before model parsing:

- keys outside the editable field set (notably ``user_id``) are dropped;
- ``None`` and blank strings count as "not provided", so a blank required
  field reports "is required" and a blank optional field becomes ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pydantic
from db.models.finance import Category
from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import CategoryInput, TransactionInput

logger = get_logger("finance_tracker.validation")

type FieldErrors = dict[str, list[str]]

_INT = TypeAdapter(int)

TRANSACTION_FIELDS: tuple[str, ...] = ("category_id", "description", "amount", "date")
CATEGORY_FIELDS: tuple[str, ...] = ("name", "description", "type")


def _present_fields(data: Mapping[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for name in fields:
        value = data.get(name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[name] = value
    return cleaned


def _label(field: str) -> str:
    return field.replace("_", " ")


def _message_for(error: Mapping[str, Any]) -> str:
    """Translate one pydantic error into a user-facing sentence."""

    loc = error.get("loc") or ("input",)
    label = _label(str(loc[0]))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if loc[0] == "category_id" or kind.startswith("int_"):
        # Malformed or out-of-range references cannot name a stored row.
        return f"The selected {label} is invalid."
    if kind in ("missing", "string_too_short"):
        return f"The {label} field is required."
    if kind == "string_too_long":
        return f"The {label} field must not be greater than {ctx.get('max_length')} characters."
    if kind == "string_type":
        return f"The {label} field must be a string."
    if kind == "greater_than_equal":
        return f"The {label} field must be at least {ctx.get('ge')}."
    if kind in ("decimal_parsing", "decimal_type", "finite_number"):
        return f"The {label} field must be a number."
    if kind == "decimal_max_places":
        return (
            f"The {label} field must not have more than "
            f"{ctx.get('decimal_places')} decimal places."
        )
    if kind in ("decimal_max_digits", "decimal_whole_digits"):
        return f"The {label} field is too large."
    if kind.startswith("date_"):
        return f"The {label} field must be a valid date."
    return f"The {label} field is invalid: {error.get('msg', kind)}."


def _collect(exc: pydantic.ValidationError) -> FieldErrors:
    errors: FieldErrors = {}
    for err in exc.errors():
        loc = err.get("loc") or ("input",)
        errors.setdefault(str(loc[0]), []).append(_message_for(err))
    return errors


def validate_transaction_input(
    session: Session, data: Mapping[str, Any]
) -> tuple[TransactionInput | None, FieldErrors]:
    """Validate the editable transaction fields in ``data``.

    Rules: ``category_id`` optional and, when given, must reference an existing
    category; ``description`` required, at most 255 characters; ``amount``
    required, numeric, at least 0.01 with at most two decimals; ``date``
    required calendar date.
    """

    cleaned = _present_fields(data, TRANSACTION_FIELDS)
    parsed: TransactionInput | None = None
    errors: FieldErrors = {}
    try:
        parsed = TransactionInput.model_validate(cleaned)
    except pydantic.ValidationError as exc:
        errors = _collect(exc)

    # Existence check also runs when sibling fields failed, so the caller sees
    # every problem in one round trip.
    if "category_id" in cleaned and "category_id" not in errors:
        category_id = parsed.category_id if parsed is not None else _INT.validate_python(
            cleaned["category_id"]
        )
        if session.get(Category, category_id) is None:
            errors["category_id"] = [f"The selected {_label('category_id')} is invalid."]
            parsed = None

    if errors:
        logger.debug("transaction input rejected: fields=%s", sorted(errors))
        return None, errors
    return parsed, {}


def validate_category_input(data: Mapping[str, Any]) -> tuple[CategoryInput | None, FieldErrors]:
    """Validate category fields: ``name`` and ``type`` required, ``description`` optional."""

    cleaned = _present_fields(data, CATEGORY_FIELDS)
    try:
        return CategoryInput.model_validate(cleaned), {}
    except pydantic.ValidationError as exc:
        errors = _collect(exc)
        logger.debug("category input rejected: fields=%s", sorted(errors))
        return None, errors


__all__ = [
    "FieldErrors",
    "TRANSACTION_FIELDS",
    "CATEGORY_FIELDS",
    "validate_transaction_input",
    "validate_category_input",
]
