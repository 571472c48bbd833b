"""Result sets returned by batch execution and their typed cell values.

Cells are modelled as a closed set of variants so renderers can dispatch on
the concrete type instead of guessing from a bare Python value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class NullValue:
    def display(self) -> str:
        return ""


@dataclass(frozen=True, slots=True)
class IntegerValue:
    value: int

    def display(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class RealValue:
    value: float

    def display(self) -> str:
        number = self.value
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if number.is_integer() and abs(number) < 1e21:
            return str(int(number))
        return repr(number)


@dataclass(frozen=True, slots=True)
class TextValue:
    value: str

    def display(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class BinaryValue:
    value: bytes

    def display(self) -> str:
        return ",".join(str(byte) for byte in self.value)


CellValue = Union[NullValue, IntegerValue, RealValue, TextValue, BinaryValue]

NULL = NullValue()


def to_cell(raw: Any) -> CellValue:
    """Wrap a scalar produced by the engine in its cell variant."""

    if raw is None:
        return NULL
    if isinstance(raw, bool):
        return IntegerValue(int(raw))
    if isinstance(raw, int):
        return IntegerValue(raw)
    if isinstance(raw, float):
        return RealValue(raw)
    if isinstance(raw, str):
        return TextValue(raw)
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return BinaryValue(bytes(raw))
    raise TypeError(f"Unsupported cell value of type {type(raw).__name__}")


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Columns and rows produced by one statement.

    Column names may repeat; every row has exactly ``len(columns)`` cells.
    """

    columns: tuple[str, ...]
    rows: tuple[tuple[CellValue, ...], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        width = len(self.columns)
        for position, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {position} has {len(row)} cells but the result set has {width} columns"
                )

    @classmethod
    def from_raw(cls, columns: list[str] | tuple[str, ...], rows: list[Any]) -> "ResultSet":
        return cls(
            columns=tuple(str(column) for column in columns),
            rows=tuple(tuple(to_cell(value) for value in row) for row in rows),
        )

    def values(self) -> list[list[Any]]:
        """Return the rows as plain Python values (handy for assertions and JSON)."""

        return [[getattr(cell, "value", None) for cell in row] for row in self.rows]


StatementBatch = list[ResultSet]
