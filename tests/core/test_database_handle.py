"""Tests for the database handle lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from sql_playground.core.database import DatabaseHandle
from sql_playground.core.errors import QueryError
from sql_playground.core.seed import expected_row_counts
from sql_playground.integrations.sqlite_engine import SQLiteEngine


@dataclass
class _TrackingEngine(SQLiteEngine):
    opened: list[Any] = field(default_factory=list)
    closed: list[Any] = field(default_factory=list)

    def open_instance(self):  # type: ignore[override]
        instance = super().open_instance()
        self.opened.append(instance)
        return instance

    def close_instance(self, instance) -> None:  # type: ignore[override]
        self.closed.append(instance)
        super().close_instance(instance)


def _count(handle: DatabaseHandle, table: str) -> int:
    return handle.execute(f"SELECT COUNT(*) FROM {table};")[0].values()[0][0]


def test_create_database_seeds_teaching_dataset() -> None:
    handle = DatabaseHandle(engine=SQLiteEngine())
    handle.create_database()

    for table, expected in expected_row_counts().items():
        assert _count(handle, table) == expected

    indexes = handle.execute("SELECT name FROM sqlite_master WHERE type='index' AND name NOT LIKE 'sqlite_%';")
    assert indexes[0].values() == [["idx_orders_customer_id"]]
    handle.close()


def test_count_query_after_create() -> None:
    handle = DatabaseHandle(engine=SQLiteEngine())
    handle.create_database()

    batch = handle.execute("SELECT COUNT(*) AS n FROM employees;")

    assert len(batch) == 1
    assert batch[0].columns == ("n",)
    assert batch[0].values() == [[5]]


def test_create_releases_previous_instance_first() -> None:
    engine = _TrackingEngine()
    handle = DatabaseHandle(engine=engine)

    first = handle.create_database()
    second = handle.reset()

    assert engine.opened == [first, second]
    assert engine.closed == [first]
    assert handle.instance is second


def test_reset_discards_session_changes() -> None:
    handle = DatabaseHandle(engine=SQLiteEngine())
    handle.create_database()
    handle.execute("CREATE TABLE scratch(a); DELETE FROM employees; DROP TABLE orders;")

    handle.reset()

    assert _count(handle, "employees") == 5
    assert _count(handle, "orders") == 5
    with pytest.raises(QueryError):
        handle.execute("SELECT * FROM scratch;")


def test_seed_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    handle = DatabaseHandle(engine=SQLiteEngine(), seed_script="CREATE TABLE a(x); SELEKT; CREATE TABLE b(y);")

    with caplog.at_level(logging.ERROR):
        handle.create_database()

    assert handle.is_open
    assert handle.execute("SELECT name FROM sqlite_master WHERE type='table';")[0].values() == [["a"]]
    assert any("Seeding failed" in record.message for record in caplog.records)


def test_close_is_idempotent() -> None:
    engine = _TrackingEngine()
    handle = DatabaseHandle(engine=engine)

    handle.close()
    handle.create_database()
    handle.close()
    handle.close()

    assert len(engine.closed) == 1
    assert not handle.is_open


def test_execute_without_instance_raises_query_error() -> None:
    handle = DatabaseHandle(engine=SQLiteEngine())

    with pytest.raises(QueryError):
        handle.execute("SELECT 1;")
