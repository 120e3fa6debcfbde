"""Chart.js rendering for dataset-backed ChartConfig values.

Every call builds a complete Chart.js payload from scratch. Nothing is cached
or diffed, and the input rows are only read.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Final

from analysis.columns import coerce_number, numeric_columns as infer_numeric_columns

from .schema import RADIAL_KINDS, ChartConfig, ChartData, ChartDataset, ChartSpec, RenderedChart
from .validator import validate_chart_config

COLOR_PALETTE: Final[tuple[str, ...]] = (
    "rgba(59, 130, 246, 0.7)",
    "rgba(16, 185, 129, 0.7)",
    "rgba(245, 158, 11, 0.7)",
    "rgba(239, 68, 68, 0.7)",
    "rgba(139, 92, 246, 0.7)",
)
TITLE_FONT_SIZE: Final[int] = 18


def render_chart(
    *,
    config: ChartConfig,
    rows: Sequence[Mapping[str, object]],
    columns: Sequence[str],
    numeric_columns: Sequence[str] | None = None,
) -> RenderedChart:
    """Render a ChartConfig into a Chart.js payload.

    Args:
        config: ChartConfig to render.
        rows: Dataset rows.
        columns: Dataset columns.
        numeric_columns: Precomputed numeric columns; inferred when omitted.

    Returns:
        RenderedChart carrying the payload, or an error when the config is invalid.
    """

    if numeric_columns is None:
        numeric_columns = infer_numeric_columns(rows, columns)
    validation = validate_chart_config(config, columns=columns, numeric_columns=numeric_columns)
    if not validation.is_valid:
        return RenderedChart(config=config, spec=None, error=validation.errors[0], warnings=validation.warnings)

    return RenderedChart(config=config, spec=build_chart_spec(config, rows), warnings=validation.warnings)


def build_chart_spec(config: ChartConfig, rows: Sequence[Mapping[str, object]]) -> ChartSpec:
    """Build the Chart.js payload for an already validated ChartConfig.

    Args:
        config: Validated ChartConfig.
        rows: Dataset rows.

    Returns:
        ChartSpec suitable for `new Chart(ctx, spec)`.
    """

    labels = [_label(row.get(config.x_axis)) for row in rows]
    values = [_plot_value(row.get(config.y_axis)) for row in rows]

    data: ChartData
    if config.kind in RADIAL_KINDS:
        data = {"labels": labels, "datasets": [_radial_dataset(config, labels=labels, values=values)]}
    elif config.kind == "scatter":
        data = {"datasets": [_scatter_dataset(config, rows)]}
    else:
        data = {"labels": labels, "datasets": [_cartesian_dataset(config, values=values)]}

    return {
        "type": "line" if config.kind == "area" else config.kind,
        "data": data,
        "options": _options(config),
    }


def border_color(color: str) -> str:
    """Return the opaque border variant of a palette color."""

    return color.replace("0.7", "1")


def _plot_value(value: object) -> float:
    """Return a finite plot value; non-numeric and infinite values plot as 0."""

    number = coerce_number(value)
    return number if math.isfinite(number) else 0.0


def _label(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _radial_dataset(config: ChartConfig, *, labels: list[str], values: list[float]) -> ChartDataset:
    colors = [COLOR_PALETTE[idx % len(COLOR_PALETTE)] for idx in range(len(labels))]
    return {
        "label": config.y_axis,
        "data": values,
        "backgroundColor": colors,
        "borderColor": [border_color(color) for color in colors],
        "borderWidth": 1,
    }


def _scatter_dataset(config: ChartConfig, rows: Sequence[Mapping[str, object]]) -> ChartDataset:
    points = [
        {"x": _plot_value(row.get(config.x_axis)), "y": _plot_value(row.get(config.y_axis))}
        for row in rows
    ]
    return {
        "label": f"{config.x_axis} vs {config.y_axis}",
        "data": points,  # type: ignore[typeddict-item]
        "backgroundColor": COLOR_PALETTE[0],
        "borderColor": border_color(COLOR_PALETTE[0]),
        "borderWidth": 1,
    }


def _cartesian_dataset(config: ChartConfig, *, values: list[float]) -> ChartDataset:
    return {
        "label": config.y_axis,
        "data": values,
        "backgroundColor": COLOR_PALETTE[0],
        "borderColor": border_color(COLOR_PALETTE[0]),
        "borderWidth": 1,
        "fill": config.kind == "area",
    }


def _options(config: ChartConfig) -> dict[str, object]:
    options: dict[str, object] = {
        "responsive": True,
        "maintainAspectRatio": False,
        "plugins": {
            "title": {"display": True, "text": config.title, "font": {"size": TITLE_FONT_SIZE}},
            "legend": {"position": "bottom"},
        },
    }
    if config.kind not in RADIAL_KINDS:
        options["scales"] = {
            "x": {"title": {"display": True, "text": config.x_axis}},
            "y": {"title": {"display": True, "text": config.y_axis}, "beginAtZero": True},
        }
    return options
