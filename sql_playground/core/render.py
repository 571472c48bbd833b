"""Display-agnostic rendering of statement results.

`render` turns a batch of result sets into a `RenderModel`: an ordered list of
table and message blocks whose text is already neutralised against markup
injection. Presentation adapters (web, terminal) only ever draw these blocks.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from sql_playground.core.results import CellValue, ResultSet
from sql_playground.core.schema import TableSummary

BlockKind = Literal["table", "message"]
Severity = Literal["ok", "error", "neutral"]

NO_ROWS_MESSAGE = "Statement executed. No rows returned."
NOTHING_TO_RUN_MESSAGE = "Type a SQL statement to run."
RESET_MESSAGE = "Database reset."
NO_TABLES_MESSAGE = "No user tables found."
SHARED_MESSAGE = "Share link updated in the address bar."
SCHEMA_TITLE = "Schema"


def escape_markup(value: Any) -> str:
    return html.escape(str(value), quote=True)


def display_text(cell: CellValue) -> str:
    """Return the escaped display form of a single cell."""

    return escape_markup(cell.display())


@dataclass(frozen=True, slots=True)
class TablePayload:
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "columns": list(self.columns),
            "rows": [list(row) for row in self.rows],
            "title": self.title,
        }


@dataclass(frozen=True, slots=True)
class RenderBlock:
    kind: BlockKind
    severity: Severity = "neutral"
    text: str | None = None
    table: TablePayload | None = None
    expires_at: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "severity": self.severity,
            "text": self.text,
            "table": self.table.to_dict() if self.table is not None else None,
            "expires_at": self.expires_at,
        }


@dataclass(slots=True)
class RenderModel:
    blocks: list[RenderBlock] = field(default_factory=list)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def tables(self) -> list[TablePayload]:
        return [block.table for block in self.blocks if block.table is not None]

    def active(self, now: float) -> "RenderModel":
        """Return a copy without transient blocks that expired before *now*."""

        return RenderModel(
            [block for block in self.blocks if block.expires_at is None or block.expires_at > now]
        )

    def to_dict(self) -> dict[str, Any]:
        return {"blocks": [block.to_dict() for block in self.blocks]}


def message(text: str, severity: Severity = "neutral", *, expires_at: float | None = None) -> RenderBlock:
    """Build a message block; *text* is escaped here."""

    return RenderBlock(kind="message", severity=severity, text=escape_markup(text), expires_at=expires_at)


def table_block(result: ResultSet, title: str | None = None) -> RenderBlock:
    payload = TablePayload(
        columns=tuple(escape_markup(column) for column in result.columns),
        rows=tuple(tuple(display_text(cell) for cell in row) for row in result.rows),
        title=escape_markup(title) if title is not None else None,
    )
    return RenderBlock(kind="table", table=payload)


def render(batch: Sequence[ResultSet], info_message: str | None = None) -> RenderModel:
    """Render *batch*, optionally announcing *info_message* as a success."""

    model = RenderModel()
    if info_message:
        model.blocks.append(message(info_message, "ok"))

    if not batch:
        if not info_message:
            model.blocks.append(message(NO_ROWS_MESSAGE))
        return model

    numbered = len(batch) > 1
    for position, result in enumerate(batch, start=1):
        if numbered:
            model.blocks.append(message(f"Result set {position}"))
        model.blocks.append(table_block(result))
    return model


def render_error(error_text: str) -> RenderModel:
    return RenderModel([message(error_text, "error")])


def render_schema(tables: Sequence[TableSummary]) -> RenderModel:
    """Render a schema summary: one row per table with its parenthesised columns."""

    if not tables:
        return RenderModel([message(NO_TABLES_MESSAGE)])
    payload = TablePayload(
        columns=("table", "columns"),
        rows=tuple(
            (escape_markup(table.name), escape_markup(f"({table.describe_columns()})"))
            for table in tables
        ),
        title=SCHEMA_TITLE,
    )
    return RenderModel([RenderBlock(kind="table", table=payload)])
