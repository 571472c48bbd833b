"""SQLite binding for the playground's embedded engine boundary.

The engine exposes three calls the session engine relies on:

    open_instance()               -> a fresh, empty in-memory database
    execute_batch(instance, text) -> one ResultSet per row-producing statement
    close_instance(instance)

`execute_batch` splits the submitted text into complete statements with
`sqlite3.complete_statement`, so semicolons inside string literals, comments
and trigger bodies do not break a statement apart. Statements run in order in
autocommit mode; the first failure stops the batch and earlier statements stay
applied. Statements that produce no rows (DDL, DML, or a SELECT matching
nothing) contribute no ResultSet.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Iterator

from sql_playground.core.errors import QueryError
from sql_playground.core.results import ResultSet, StatementBatch

LOGGER = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"--[^\n]*|/\*.*?(?:\*/|$)", flags=re.DOTALL)


def split_statements(text: str) -> Iterator[str]:
    """Yield each complete statement in *text*, skipping empty fragments."""

    start = 0
    for position, char in enumerate(text):
        if char != ";":
            continue
        candidate = text[start : position + 1]
        if sqlite3.complete_statement(candidate):
            start = position + 1
            if not _is_blank(candidate):
                yield candidate.strip()
    tail = text[start:]
    if not _is_blank(tail):
        yield tail.strip()


def _is_blank(fragment: str) -> bool:
    stripped = _COMMENT_RE.sub("", fragment)
    return not stripped.replace(";", "").strip()


@dataclass(slots=True)
class SQLiteEngine:
    """Opens, runs and closes in-process SQLite databases."""

    def open_instance(self) -> sqlite3.Connection:
        LOGGER.debug("Opening in-memory SQLite instance")
        return sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)

    def execute_batch(self, instance: sqlite3.Connection, text: str) -> StatementBatch:
        results: StatementBatch = []
        for index, statement in enumerate(split_statements(text), start=1):
            try:
                cursor = instance.execute(statement)
                rows = cursor.fetchall() if cursor.description is not None else []
            except (sqlite3.Error, sqlite3.Warning) as exc:
                raise QueryError(str(exc), statement=statement, index=index) from exc
            if rows:
                columns = [description[0] for description in cursor.description]
                results.append(ResultSet.from_raw(columns, rows))
        return results

    def close_instance(self, instance: sqlite3.Connection) -> None:
        LOGGER.debug("Closing SQLite instance")
        instance.close()
