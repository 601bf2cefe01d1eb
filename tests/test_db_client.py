from __future__ import annotations

from pathlib import Path

import pytest
from db.client import dispose_engine, get_engine, session_scope
from db.models.finance import Category
from sqlalchemy import text as sql_text

from tests.helpers.db import count_rows


def test_engine_is_bound_to_one_url_until_disposed(db_url: str, tmp_path: Path):
    other = f"sqlite+pysqlite:///{tmp_path / 'other.db'}"
    assert get_engine(database_url=db_url) is get_engine(database_url=db_url)

    with pytest.raises(RuntimeError, match="different DATABASE_URL"):
        get_engine(database_url=other)

    dispose_engine()
    assert str(get_engine(database_url=other).url) == other


def test_missing_url_is_an_error():
    with pytest.raises(RuntimeError, match="DATABASE_URL is not set"):
        get_engine()


def test_session_scope_rolls_back_on_error(db_url: str):
    with pytest.raises(RuntimeError, match="abort"):
        with session_scope(database_url=db_url) as s:
            s.add(Category(name="Temp", type="expense"))
            s.flush()
            raise RuntimeError("abort")
    assert count_rows(db_url, Category) == 0


def test_sqlite_connections_enforce_foreign_keys(db_url: str):
    with session_scope(database_url=db_url) as s:
        assert s.execute(sql_text("PRAGMA foreign_keys")).scalar_one() == 1
