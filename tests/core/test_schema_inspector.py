"""Tests for catalog introspection."""

from __future__ import annotations

import pytest

from sql_playground.core.database import DatabaseHandle
from sql_playground.core.schema import ColumnDescription, SchemaInspector, sanitize_identifier
from sql_playground.integrations.sqlite_engine import SQLiteEngine


@pytest.fixture()
def inspector() -> SchemaInspector:
    handle = DatabaseHandle(engine=SQLiteEngine())
    handle.create_database()
    yield SchemaInspector(handle)
    handle.close()


def test_sanitize_identifier_keeps_word_characters() -> None:
    assert sanitize_identifier("orders") == "orders"
    assert sanitize_identifier("my table;--") == "mytable"
    assert sanitize_identifier("'); DROP TABLE x") == "DROPTABLEx"


def test_list_user_tables_is_alphabetical(inspector: SchemaInspector) -> None:
    assert inspector.list_user_tables() == ["customers", "departments", "employees", "orders"]


def test_created_and_dropped_tables_are_tracked(inspector: SchemaInspector) -> None:
    inspector.database.execute("CREATE TABLE z(a int);")
    assert inspector.list_user_tables() == ["customers", "departments", "employees", "orders", "z"]

    inspector.database.execute("DROP TABLE z;")
    assert "z" not in inspector.list_user_tables()


def test_describe_table_lists_columns_in_order(inspector: SchemaInspector) -> None:
    columns = inspector.describe_table("departments")

    assert columns == [
        ColumnDescription(name="id", declared_type="INTEGER"),
        ColumnDescription(name="name", declared_type="TEXT"),
    ]


def test_describe_table_sanitizes_names(inspector: SchemaInspector) -> None:
    assert [column.name for column in inspector.describe_table("cust'omers;")] == ["id", "name", "city"]


def test_describe_missing_table_is_empty(inspector: SchemaInspector) -> None:
    assert inspector.describe_table("nope") == []
    assert inspector.describe_table("';--") == []


def test_summarize_includes_declared_types(inspector: SchemaInspector) -> None:
    summary = {table.name: table.describe_columns() for table in inspector.summarize()}

    assert summary["orders"] == "id INTEGER, customer_id INTEGER, amount REAL, order_date TEXT"
