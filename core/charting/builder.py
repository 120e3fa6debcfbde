"""Chart configuration builder.

Turns raw selections (possibly empty) into a ChartConfig, falling back to the
dataset defaults for anything the user has not chosen yet.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .schema import CHART_KINDS, DEFAULT_CHART_KIND, DEFAULT_CHART_TITLE, ChartConfig, ChartKind

_WHITESPACE_RE = re.compile(r"\s+")


def default_axes(columns: Sequence[str]) -> tuple[str, str]:
    """Return the default (x, y) axes for a dataset.

    Args:
        columns: Dataset columns in order.

    Returns:
        The first and second column when at least two exist; otherwise two empty
        strings (no chart is drawn until both axes are selected).
    """

    if len(columns) >= 2:
        return str(columns[0]), str(columns[1])
    return "", ""


def build_chart_config(
    *,
    columns: Sequence[str],
    kind: str | None = None,
    x_axis: str | None = None,
    y_axis: str | None = None,
    title: str | None = None,
) -> ChartConfig:
    """Build a ChartConfig from user selections.

    Args:
        columns: Columns of the selected dataset.
        kind: Requested chart kind; unknown or empty values use the default kind.
        x_axis: Selected category axis, or empty to use the default.
        y_axis: Selected value axis, or empty to use the default.
        title: Chart title, or blank to use the default title.

    Returns:
        A ChartConfig ready for validation and rendering.
    """

    default_x, default_y = default_axes(columns)
    chart_kind: ChartKind = kind if kind in CHART_KINDS else DEFAULT_CHART_KIND  # type: ignore[assignment]
    return ChartConfig(
        kind=chart_kind,
        x_axis=(x_axis or "").strip() or default_x,
        y_axis=(y_axis or "").strip() or default_y,
        title=(title or "").strip() or DEFAULT_CHART_TITLE,
    )


def download_filename(title: str) -> str:
    """Return the PNG filename used when downloading a chart."""

    return f"{_WHITESPACE_RE.sub('_', title)}.png"
