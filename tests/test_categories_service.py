from __future__ import annotations

from datetime import date

import pytest
from db.client import session_scope
from db.models.finance import Category, Transaction

from finance_tracker.categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)
from finance_tracker.errors import NotFoundError, ValidationError
from tests.helpers.db import count_rows, seed_category, seed_transaction


def test_create_and_show(db_url: str):
    with session_scope(database_url=db_url) as s:
        created = create_category(
            s, {"name": "Salary", "type": "income", "description": "Monthly pay"}
        )

    with session_scope(database_url=db_url) as s:
        shown = get_category(s, created.id)

    assert shown.name == "Salary"
    assert shown.type == "income"
    assert shown.description == "Monthly pay"
    assert shown.to_dict()["created_at"] is not None


def test_list_returns_full_set_sorted_by_name(db_url: str):
    for name in ("Travel", "Groceries", "Rent"):
        seed_category(db_url, name=name)

    with session_scope(database_url=db_url) as s:
        names = [c.name for c in list_categories(s)]

    assert names == ["Groceries", "Rent", "Travel"]


def test_create_rejects_missing_fields(db_url: str):
    with pytest.raises(ValidationError) as excinfo:
        with session_scope(database_url=db_url) as s:
            create_category(s, {"name": ""})

    assert set(excinfo.value.errors) == {"name", "type"}
    assert excinfo.value.message == "The name field is required. (and 1 more error)"
    assert count_rows(db_url, Category) == 0


def test_update_replaces_all_fields(db_url: str):
    cid = seed_category(db_url, name="Eating out", description="Restaurants")

    with session_scope(database_url=db_url) as s:
        updated = update_category(s, cid, {"name": "Dining", "type": "expense"})

    assert updated.name == "Dining"
    # Full replacement: an omitted optional field is cleared.
    assert updated.description is None


def test_delete_detaches_transactions(db_url: str, user_id: int):
    cid = seed_category(db_url, name="Hobbies")
    tid = seed_transaction(
        db_url,
        user_id=user_id,
        description="Paint",
        amount="14.00",
        on=date(2024, 6, 1),
        category_id=cid,
    )

    with session_scope(database_url=db_url) as s:
        delete_category(s, cid)

    with session_scope(database_url=db_url) as s:
        assert s.get(Category, cid) is None
        tx = s.get(Transaction, tid)
        assert tx is not None
        assert tx.category_id is None


@pytest.mark.parametrize("action", ["get", "update", "delete"])
def test_unknown_category_is_not_found(db_url: str, action: str):
    seed_category(db_url, name="Existing")
    with pytest.raises(NotFoundError):
        with session_scope(database_url=db_url) as s:
            if action == "get":
                get_category(s, 404)
            elif action == "update":
                update_category(s, 404, {"name": "X", "type": "expense"})
            else:
                delete_category(s, 404)
    assert count_rows(db_url, Category) == 1


def test_ids_beyond_the_key_range_are_not_found(db_url: str):
    with pytest.raises(NotFoundError) as excinfo:
        with session_scope(database_url=db_url) as s:
            get_category(s, 2**63)
    assert excinfo.value.resource == "category"
