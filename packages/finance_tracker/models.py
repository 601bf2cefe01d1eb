"""Input models and read-models for ``finance_tracker``.

Two families live here:

- **Input models** (pydantic): the editable fields accepted by the write
  operations. They describe *shape and range* only; checks that need the
  database (e.g. "category exists") live in :mod:`finance_tracker.validation`.
- **Read-models** (frozen dataclasses): denormalized views handed back by the
  services. They are detached from the SQLAlchemy session, so the web layer
  can serialize them after the session scope has closed.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from db.models.finance import Category, Transaction, User
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

MIN_AMOUNT = Decimal("0.01")
DESCRIPTION_MAX_LENGTH = 255
NAME_MAX_LENGTH = 255
# Primary keys are INTEGER columns; Postgres caps those at 32 bits.
MAX_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    """Whether ``value`` lies in the key range (1 through ``MAX_ID``)."""

    return 1 <= value <= MAX_ID


# ---------------------------------------------------------------------------
# Write inputs
# ---------------------------------------------------------------------------


class TransactionInput(BaseModel):
    """Editable transaction fields. ``user_id`` is never part of the input."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    category_id: int | None = Field(default=None, ge=1, le=MAX_ID)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    # Numeric(10, 2): at most eight integer digits and two fractional ones.
    amount: Decimal = Field(ge=MIN_AMOUNT, max_digits=10, decimal_places=2)
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def _reject_numeric_dates(cls, value: Any) -> Any:
        # Lax mode would read a number as a Unix timestamp.
        if isinstance(value, (bool, int, float, Decimal)):
            raise PydanticCustomError("date_type", "Input should be a valid date")
        return value


class CategoryInput(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = None
    type: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)


# ---------------------------------------------------------------------------
# Read-models
# ---------------------------------------------------------------------------


def _iso(value: dt.date | dt.datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True, slots=True)
class UserSummary:
    id: int
    name: str
    email: str

    @classmethod
    def from_row(cls, row: User) -> UserSummary:
        return cls(id=row.id, name=row.name, email=row.email)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True, slots=True)
class CategoryView:
    id: int
    name: str
    description: str | None
    type: str
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_row(cls, row: Category) -> CategoryView:
        return cls(
            id=row.id,
            name=row.name,
            description=row.description,
            type=row.type,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True, slots=True)
class TransactionView:
    """A transaction with its owner and category embedded."""

    id: int
    user_id: int
    category_id: int | None
    description: str
    amount: Decimal
    date: dt.date
    user: UserSummary
    category: CategoryView | None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_row(cls, row: Transaction) -> TransactionView:
        """Build from an ORM row whose ``user``/``category`` are already loaded."""

        return cls(
            id=row.id,
            user_id=row.user_id,
            category_id=row.category_id,
            description=row.description,
            amount=Decimal(row.amount).quantize(MIN_AMOUNT),
            date=row.date,
            user=UserSummary.from_row(row.user),
            category=CategoryView.from_row(row.category) if row.category is not None else None,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "description": self.description,
            # Two-decimal string keeps money exact across JSON clients.
            "amount": f"{self.amount:.2f}",
            "date": self.date.isoformat(),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "user": self.user.to_dict(),
            "category": self.category.to_dict() if self.category is not None else None,
        }


@dataclass(frozen=True, slots=True)
class TransactionPage:
    """One page of transactions plus pagination metadata and echoed filters."""

    items: tuple[TransactionView, ...]
    total: int
    per_page: int
    current_page: int
    last_page: int
    filters: dict[str, Any] = field(default_factory=dict)

    @property
    def from_index(self) -> int | None:
        """1-based position of the first item on this page (``None`` when empty)."""

        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def to_index(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [tx.to_dict() for tx in self.items],
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
            "from": self.from_index,
            "to": self.to_index,
        }


__all__ = [
    "MIN_AMOUNT",
    "DESCRIPTION_MAX_LENGTH",
    "NAME_MAX_LENGTH",
    "MAX_ID",
    "is_storable_id",
    "TransactionInput",
    "CategoryInput",
    "UserSummary",
    "CategoryView",
    "TransactionView",
    "TransactionPage",
]
