"""Schema types for chart configuration and Chart.js payloads.

A ChartConfig is the full set of user choices for one chart. The rendered
Chart.js payload is always derived from a ChartConfig plus the dataset rows, and
is rebuilt from scratch whenever any input changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal, TypedDict, get_args

ChartKind = Literal["bar", "line", "pie", "doughnut", "scatter", "area"]

CHART_KINDS: Final[tuple[ChartKind, ...]] = get_args(ChartKind)
CHART_KIND_LABELS: Final[dict[str, str]] = {
    "bar": "Bar Chart",
    "line": "Line Chart",
    "pie": "Pie Chart",
    "doughnut": "Doughnut Chart",
    "scatter": "Scatter Chart",
    "area": "Area Chart",
}
RADIAL_KINDS: Final[frozenset[str]] = frozenset({"pie", "doughnut"})

DEFAULT_CHART_KIND: Final[ChartKind] = "bar"
DEFAULT_CHART_TITLE: Final[str] = "Data Visualization"


@dataclass(frozen=True, slots=True)
class ChartConfig:
    """User-selected chart parameters.

    Args:
        kind: Visual chart kind.
        x_axis: Category axis column (x values for scatter charts).
        y_axis: Value axis column.
        title: Chart title shown above the plot and used for the download name.
    """

    kind: ChartKind
    x_axis: str
    y_axis: str
    title: str = DEFAULT_CHART_TITLE


class ScatterPoint(TypedDict):
    """One point of a scatter dataset."""

    x: float
    y: float


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload."""

    label: str
    data: list[float] | list[ScatterPoint]
    backgroundColor: str | list[str]
    borderColor: str | list[str]
    borderWidth: int
    fill: bool


class ChartData(TypedDict, total=False):
    """Chart.js `data` payload (labels are omitted for scatter charts)."""

    labels: list[str]
    datasets: list[ChartDataset]


class ChartSpec(TypedDict):
    """A complete Chart.js constructor argument."""

    type: str
    data: ChartData
    options: dict[str, object]


@dataclass(frozen=True, slots=True)
class RenderedChart:
    """A chart produced from a ChartConfig.

    Args:
        config: ChartConfig the chart was derived from.
        spec: Chart.js payload, or None when the config could not be rendered.
        error: User-facing reason when `spec` is None.
        warnings: Non-fatal notes to show next to the chart.
    """

    config: ChartConfig
    spec: ChartSpec | None
    error: str | None = None
    warnings: tuple[str, ...] = ()
