from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from db.client import session_scope

from finance_tracker.query import TransactionFilters, build_transaction_query, list_transactions
from tests.helpers.db import seed_category, seed_transaction, seed_user

# ---- Parameter parsing -------------------------------------------------------


def test_defaults_when_params_absent():
    f = TransactionFilters.from_params({})
    assert f == TransactionFilters(
        search=None,
        date_from=None,
        date_to=None,
        sort="date",
        direction="desc",
        per_page=10,
        page=1,
    )


def test_blank_params_impose_no_filter():
    f = TransactionFilters.from_params({"search": "  ", "date_from": "", "date_to": ""})
    assert f.search is None
    assert f.date_from is None and f.date_to is None


@pytest.mark.parametrize("sort", ["id", "user_id; DROP TABLE transactions", "created_at", ""])
def test_unknown_sort_falls_back_to_date(sort: str):
    assert TransactionFilters.from_params({"sort": sort}).sort == "date"


def test_sort_and_direction_are_case_insensitive():
    f = TransactionFilters.from_params({"sort": "Amount", "direction": "ASC"})
    assert (f.sort, f.direction) == ("amount", "asc")


def test_unknown_direction_falls_back_to_desc():
    assert TransactionFilters.from_params({"direction": "sideways"}).direction == "desc"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("5", 5), ("0", 1), ("-3", 1), ("1000", 100), ("abc", 10), (None, 10)],
)
def test_per_page_is_clamped(raw, expected):
    assert TransactionFilters.from_params({"per_page": raw}).per_page == expected


def test_per_page_respects_configured_bounds():
    f = TransactionFilters.from_params({}, default_per_page=25, max_per_page=50)
    assert f.per_page == 25
    f = TransactionFilters.from_params({"per_page": "75"}, default_per_page=25, max_per_page=50)
    assert f.per_page == 50


def test_page_is_at_least_one():
    assert TransactionFilters.from_params({"page": "0"}).page == 1
    assert TransactionFilters.from_params({"page": "3"}).page == 3


def test_unparseable_dates_are_ignored():
    f = TransactionFilters.from_params({"date_from": "01/02/2024", "date_to": "2024-01-31"})
    assert f.date_from is None
    assert f.date_to == date(2024, 1, 31)


def test_filters_echo():
    f = TransactionFilters.from_params(
        {"search": "rent", "date_from": "2024-01-01", "sort": "amount", "per_page": "5"}
    )
    assert f.to_dict() == {
        "search": "rent",
        "date_from": "2024-01-01",
        "date_to": None,
        "sort": "amount",
        "direction": "desc",
        "per_page": 5,
    }


def test_order_by_only_uses_allow_listed_columns():
    f = TransactionFilters.from_params({"sort": "description", "direction": "asc"})
    sql = str(build_transaction_query(f))
    assert "ORDER BY transactions.description ASC, transactions.id ASC" in sql


# ---- Listing against the database --------------------------------------------


@pytest.fixture
def ledger(db_url: str) -> dict[str, int]:
    """A small mixed ledger: two users, two categories, seven transactions."""

    ada = seed_user(db_url)
    bob = seed_user(db_url, name="Bob", email="bob@example.com")
    groceries = seed_category(db_url, name="Groceries")
    travel = seed_category(db_url, name="Travel", type="expense")

    rows = [
        (ada, "Farmers market", "12.40", date(2024, 1, 3), groceries),
        (ada, "Weekly GROCERIES run", "85.00", date(2024, 1, 10), None),
        (bob, "Train ticket", "23.10", date(2024, 1, 31), travel),
        (bob, "Hotel", "240.00", date(2024, 2, 1), travel),
        (ada, "Salary", "3000.00", date(2023, 12, 31), None),
        (ada, "Discount 100%_off voucher", "1.00", date(2024, 1, 15), None),
        (bob, "Bakery", "6.75", date(2024, 1, 20), groceries),
    ]
    ids = {}
    for owner, desc, amount, on, cat in rows:
        ids[desc] = seed_transaction(
            db_url, user_id=owner, description=desc, amount=amount, on=on, category_id=cat
        )
    return ids


def _list(db_url: str, **params):
    with session_scope(database_url=db_url) as s:
        return list_transactions(s, TransactionFilters.from_params(params))


def test_default_listing_is_newest_first(db_url: str, ledger):
    page = _list(db_url)
    dates = [tx.date for tx in page.items]
    assert dates == sorted(dates, reverse=True)
    assert page.total == 7
    assert page.items[0].description == "Hotel"


def test_search_matches_description_or_category_name(db_url: str, ledger):
    page = _list(db_url, search="groceries")
    got = {tx.description for tx in page.items}
    # "Weekly GROCERIES run" by description (case-insensitive), the other two
    # through their category's name.
    assert got == {"Weekly GROCERIES run", "Farmers market", "Bakery"}
    assert page.total == 3


def test_search_treats_wildcards_literally(db_url: str, ledger):
    page = _list(db_url, search="100%_")
    assert [tx.description for tx in page.items] == ["Discount 100%_off voucher"]


def test_date_range_is_inclusive(db_url: str, ledger):
    page = _list(db_url, date_from="2024-01-01", date_to="2024-01-31", per_page="50")
    got = {tx.date for tx in page.items}
    assert got and all(date(2024, 1, 1) <= d <= date(2024, 1, 31) for d in got)
    assert date(2024, 1, 31) in got  # upper bound included
    assert page.total == 5


def test_search_and_dates_combine_with_and(db_url: str, ledger):
    page = _list(db_url, search="travel", date_to="2024-01-31")
    assert [tx.description for tx in page.items] == ["Train ticket"]


def test_sort_by_amount_ascending(db_url: str, ledger):
    page = _list(db_url, sort="amount", direction="asc", per_page="100")
    amounts = [tx.amount for tx in page.items]
    assert amounts == sorted(amounts)
    assert amounts[0] == Decimal("1.00")


def test_sort_by_description_descending(db_url: str, ledger):
    page = _list(db_url, sort="description", direction="desc")
    descriptions = [tx.description for tx in page.items]
    assert descriptions == sorted(descriptions, reverse=True)


def test_pagination_metadata(db_url: str, ledger):
    first = _list(db_url, per_page="5")
    assert len(first.items) == 5
    assert (first.total, first.per_page, first.current_page, first.last_page) == (7, 5, 1, 2)
    assert (first.from_index, first.to_index) == (1, 5)

    second = _list(db_url, per_page="5", page="2")
    assert len(second.items) == 2
    assert (second.from_index, second.to_index) == (6, 7)
    assert not {t.id for t in first.items} & {t.id for t in second.items}


def test_page_past_the_end_is_empty(db_url: str, ledger):
    page = _list(db_url, per_page="5", page="9")
    assert page.items == ()
    assert (page.total, page.last_page, page.current_page) == (7, 2, 9)
    assert page.to_dict()["from"] is None


def test_items_embed_user_and_category(db_url: str, ledger):
    page = _list(db_url, search="train")
    (tx,) = page.items
    assert tx.user.name == "Bob"
    assert tx.category is not None and tx.category.name == "Travel"
    body = page.to_dict()
    assert body["data"][0]["user"]["email"] == "bob@example.com"
    assert body["data"][0]["amount"] == "23.10"


def test_huge_page_number_is_empty_not_an_error(db_url: str, ledger):
    page = _list(db_url, page="99999999999999999999")
    assert page.items == ()
    assert (page.total, page.last_page) == (7, 1)
    assert page.current_page == 99999999999999999999


def test_empty_store_reports_single_page(db_url: str):
    page = _list(db_url)
    assert page.items == ()
    assert (page.total, page.last_page) == (0, 1)
