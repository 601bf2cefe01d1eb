"""Filtered, sorted, paginated listing of transactions.

The listing is driven by a :class:`TransactionFilters` value parsed
from free-form request parameters. Parsing is forgiving: absent, blank or
malformed values fall back to "no filter" or to the documented default rather
than failing the request. The sort column is always resolved through
``SORT_COLUMNS``; client input never reaches ``ORDER BY`` directly.

Query shape
-----------
``transactions`` JOIN ``users`` LEFT OUTER JOIN ``categories``, with the
joined rows populating ``Transaction.user``/``Transaction.category`` so each
page is read in one statement (plus one ``COUNT``).
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from db.models.finance import Category, Transaction, User
from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session, contains_eager

from .config import DEFAULT_PER_PAGE, MAX_PER_PAGE
from .logging_setup import get_logger
from .models import TransactionPage, TransactionView

logger = get_logger("finance_tracker.query")

type SortColumn = Literal["date", "description", "amount"]
type SortDirection = Literal["asc", "desc"]

SORT_COLUMNS: dict[str, Any] = {
    "date": Transaction.date,
    "description": Transaction.description,
    "amount": Transaction.amount,
}
DEFAULT_SORT: SortColumn = "date"
DEFAULT_DIRECTION: SortDirection = "desc"


def _clean_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _parse_date(value: Any) -> dt.date | None:
    s = _clean_str(value)
    if s is None:
        return None
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        logger.debug("ignoring unparseable date filter: %r", s)
        return None


def _parse_int(value: Any, default: int) -> int:
    s = _clean_str(value)
    if s is None:
        return default
    try:
        return int(s)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class TransactionFilters:
    """Normalized listing parameters.

    Attributes
    ----------
    search:
        Substring matched against the description OR the category name.
    date_from / date_to:
        Inclusive calendar-date bounds.
    sort / direction:
        Allow-listed sort column and direction.
    per_page / page:
        Page size and 1-based page number.
    """

    search: str | None = None
    date_from: dt.date | None = None
    date_to: dt.date | None = None
    sort: SortColumn = DEFAULT_SORT
    direction: SortDirection = DEFAULT_DIRECTION
    per_page: int = DEFAULT_PER_PAGE
    page: int = 1

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ) -> TransactionFilters:
        """Parse request parameters; unknown ``sort`` values fall back to ``date``."""

        sort_raw = (_clean_str(params.get("sort")) or DEFAULT_SORT).lower()
        if sort_raw not in SORT_COLUMNS:
            logger.debug("unsupported sort column %r; using %r", sort_raw, DEFAULT_SORT)
            sort_raw = DEFAULT_SORT

        direction_raw = (_clean_str(params.get("direction")) or DEFAULT_DIRECTION).lower()
        if direction_raw not in ("asc", "desc"):
            direction_raw = DEFAULT_DIRECTION

        per_page = _parse_int(params.get("per_page"), default_per_page)
        per_page = max(1, min(per_page, max_per_page))

        return cls(
            search=_clean_str(params.get("search")),
            date_from=_parse_date(params.get("date_from")),
            date_to=_parse_date(params.get("date_to")),
            sort=sort_raw,  # type: ignore[arg-type]
            direction=direction_raw,  # type: ignore[arg-type]
            per_page=per_page,
            page=max(1, _parse_int(params.get("page"), 1)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Echo of the effective filters for client-side state restoration."""

        return {
            "search": self.search,
            "date_from": self.date_from.isoformat() if self.date_from else None,
            "date_to": self.date_to.isoformat() if self.date_to else None,
            "sort": self.sort,
            "direction": self.direction,
            "per_page": self.per_page,
        }


def _filtered(filters: TransactionFilters) -> Select[tuple[Transaction]]:
    stmt = (
        select(Transaction)
        .join(Transaction.user)
        .outerjoin(Transaction.category)
    )
    if filters.search:
        # One OR group so it ANDs cleanly with the date bounds below.
        stmt = stmt.where(
            or_(
                Transaction.description.icontains(filters.search, autoescape=True),
                Category.name.icontains(filters.search, autoescape=True),
            )
        )
    if filters.date_from is not None:
        stmt = stmt.where(Transaction.date >= filters.date_from)
    if filters.date_to is not None:
        stmt = stmt.where(Transaction.date <= filters.date_to)
    return stmt


def build_transaction_query(filters: TransactionFilters) -> Select[tuple[Transaction]]:
    """Return the ordered, paginated SELECT for ``filters``.

    Rows tie-break on ``id`` in the same direction so pages do not overlap
    when many transactions share a sort value.
    """

    column = SORT_COLUMNS[filters.sort]
    if filters.direction == "asc":
        ordering = (column.asc(), Transaction.id.asc())
    else:
        ordering = (column.desc(), Transaction.id.desc())

    return (
        _filtered(filters)
        .options(contains_eager(Transaction.user), contains_eager(Transaction.category))
        .order_by(*ordering)
        .limit(filters.per_page)
        .offset((filters.page - 1) * filters.per_page)
    )


def count_transactions(session: Session, filters: TransactionFilters) -> int:
    sub = _filtered(filters).subquery()
    return session.execute(select(func.count()).select_from(sub)).scalar_one()


def list_transactions(session: Session, filters: TransactionFilters) -> TransactionPage:
    """Return one page of transactions with user and category attached.

    A ``page`` beyond the last one yields no items; the metadata still reports
    the real ``total`` and ``last_page``.
    """

    total = count_transactions(session, filters)
    last_page = max(1, math.ceil(total / filters.per_page))
    # Pages past the end never reach OFFSET, which has a bounded integer type.
    rows: Sequence[Transaction] = ()
    if filters.page <= last_page:
        rows = session.execute(build_transaction_query(filters)).unique().scalars().all()
    return TransactionPage(
        items=tuple(TransactionView.from_row(r) for r in rows),
        total=total,
        per_page=filters.per_page,
        current_page=filters.page,
        last_page=last_page,
        filters=filters.to_dict(),
    )


__all__ = [
    "SORT_COLUMNS",
    "TransactionFilters",
    "build_transaction_query",
    "count_transactions",
    "list_transactions",
]
