"""Catalog introspection for user tables."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from sql_playground.core.database import DatabaseHandle
from sql_playground.core.errors import QueryError

LOGGER = logging.getLogger(__name__)

_IDENTIFIER_STRIP_RE = re.compile(r"[^A-Za-z0-9_]")

LIST_TABLES_SQL = (
    "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
)


def sanitize_identifier(name: str) -> str:
    """Drop every character outside ``[A-Za-z0-9_]``."""

    return _IDENTIFIER_STRIP_RE.sub("", name)


@dataclass(frozen=True, slots=True)
class ColumnDescription:
    name: str
    declared_type: str


@dataclass(frozen=True, slots=True)
class TableSummary:
    name: str
    columns: tuple[ColumnDescription, ...]

    def describe_columns(self) -> str:
        return ", ".join(f"{column.name} {column.declared_type}" for column in self.columns)


@dataclass(slots=True)
class SchemaInspector:
    """Reads table and column metadata from the live database."""

    database: DatabaseHandle

    def list_user_tables(self) -> list[str]:
        batch = self.database.execute(LIST_TABLES_SQL)
        if not batch:
            return []
        return [str(row[0]) for row in batch[0].values()]

    def describe_table(self, name: str) -> list[ColumnDescription]:
        safe_name = sanitize_identifier(name)
        if not safe_name:
            return []
        try:
            batch = self.database.execute(f"PRAGMA table_info({safe_name});")
        except QueryError:
            LOGGER.debug("Could not describe table %s", safe_name, exc_info=True)
            return []
        if not batch:
            return []
        # table_info rows: cid, name, type, notnull, dflt_value, pk
        return [
            ColumnDescription(name=str(row[1]), declared_type=str(row[2] or ""))
            for row in batch[0].values()
        ]

    def summarize(self) -> list[TableSummary]:
        return [
            TableSummary(name=table, columns=tuple(self.describe_table(table)))
            for table in self.list_user_tables()
        ]
