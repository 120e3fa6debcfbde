"""Column type inference for uploaded tables.

Rows are plain mappings of column name to a scalar (string or number). A column
is treated as numeric when most of its leading values are numbers or parse as
numbers. This is a sampling heuristic: a column whose first rows are atypical
can be misclassified, and nothing corrects it afterwards.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Final

NUMERIC_SAMPLE_SIZE: Final[int] = 5

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INFINITY_RE = re.compile(r"^[+-]?Infinity$")
_RADIX_RE = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")

Row = Mapping[str, object]


@dataclass(frozen=True, slots=True)
class ColumnProfile:
    """Summary of a single column used by preview tables.

    Args:
        name: Column name.
        numeric: Whether the column is inferred numeric.
        filled: Number of rows that carry a value for the column.
    """

    name: str
    numeric: bool
    filled: int


def parse_number(value: object) -> float | None:
    """Parse a cell value as a number.

    Args:
        value: Raw cell value (number, string, or missing).

    Returns:
        The numeric value, or None when the value is not numeric. Blank strings,
        NaN and missing values are not numeric.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if _DECIMAL_RE.match(text):
        return float(text)
    if _INFINITY_RE.match(text):
        return float("-inf") if text.startswith("-") else float("inf")
    if _RADIX_RE.match(text):
        return float(int(text, 0))
    return None


def coerce_number(value: object) -> float:
    """Return `value` as a number, falling back to zero when it is not numeric."""

    number = parse_number(value)
    return 0.0 if number is None else number


def is_numeric_column(
    rows: Sequence[Row],
    column: str,
    *,
    sample_size: int = NUMERIC_SAMPLE_SIZE,
) -> bool:
    """Infer whether a column holds numeric data.

    Args:
        rows: Table rows in their original order.
        column: Column name to classify.
        sample_size: Maximum number of leading rows to inspect.

    Returns:
        True when more than half of the sampled values are numeric. An empty
        table has no numeric columns.
    """

    sample = rows[: max(sample_size, 0)]
    if not sample:
        return False
    numeric_count = sum(1 for row in sample if parse_number(row.get(column)) is not None)
    return numeric_count / len(sample) > 0.5


def numeric_columns(rows: Sequence[Row], columns: Iterable[str]) -> list[str]:
    """Return the numeric columns of a table, in column order."""

    return [column for column in columns if is_numeric_column(rows, column)]


def column_profile(rows: Sequence[Row], columns: Iterable[str]) -> tuple[ColumnProfile, ...]:
    """Profile every column for display.

    Args:
        rows: Table rows.
        columns: Column names in display order.

    Returns:
        One ColumnProfile per column, in the given order.
    """

    profiles: list[ColumnProfile] = []
    for column in columns:
        filled = sum(1 for row in rows if row.get(column) not in (None, ""))
        profiles.append(
            ColumnProfile(name=column, numeric=is_numeric_column(rows, column), filled=filled)
        )
    return tuple(profiles)
