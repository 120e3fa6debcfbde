"""Pure analysis helpers for ChartDesk.

This package contains deterministic computations over in-memory tables. It must
not import Django or perform any database I/O.
"""

from .columns import coerce_number, is_numeric_column, numeric_columns, parse_number

__all__ = ["coerce_number", "is_numeric_column", "numeric_columns", "parse_number"]
