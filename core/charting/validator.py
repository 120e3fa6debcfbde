"""Validation for ChartConfig values against a dataset."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from .schema import CHART_KINDS, ChartConfig


@dataclass(frozen=True, slots=True)
class ChartConfigValidationResult:
    """Validation result for a ChartConfig.

    Args:
        is_valid: True when no errors exist.
        errors: Fatal validation errors.
        warnings: Non-fatal warnings intended for UI display.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_chart_config(
    config: ChartConfig,
    *,
    columns: Sequence[str],
    numeric_columns: Collection[str],
) -> ChartConfigValidationResult:
    """Validate a ChartConfig against the columns of a dataset.

    Args:
        config: ChartConfig to validate.
        columns: All dataset columns.
        numeric_columns: Columns inferred as numeric.

    Returns:
        ChartConfigValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    if config.kind not in CHART_KINDS:
        errors.append(f"Unknown chart type: {config.kind!r}.")

    if not config.x_axis:
        errors.append("Select an X-axis column.")
    elif config.x_axis not in columns:
        errors.append(f"Unknown X-axis column: {config.x_axis!r}.")

    if not config.y_axis:
        errors.append("Select a Y-axis column.")
    elif config.y_axis not in columns:
        errors.append(f"Unknown Y-axis column: {config.y_axis!r}.")
    elif config.y_axis not in numeric_columns:
        warnings.append(f"Column {config.y_axis!r} does not look numeric; non-numeric values are plotted as 0.")

    if config.kind == "scatter" and config.x_axis in columns and config.x_axis not in numeric_columns:
        warnings.append(f"Column {config.x_axis!r} does not look numeric; scatter x values are plotted as 0.")

    return ChartConfigValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
