"""Unit tests for Chart.js payload rendering."""

from __future__ import annotations

import copy

import pytest

from core.charting.render import COLOR_PALETTE, border_color, render_chart
from core.charting.schema import ChartConfig

pytestmark = pytest.mark.unit

COLUMNS = ["Month", "Revenue", "Units"]
ROWS = [
    {"Month": "Jan", "Revenue": 100, "Units": "4"},
    {"Month": "Feb", "Revenue": "250.5", "Units": 6},
    {"Month": "Mar", "Revenue": "n/a", "Units": 8},
    {"Month": "Apr", "Units": 2},
    {"Month": "May", "Revenue": 75, "Units": 1},
    {"Month": "Jun", "Revenue": 300, "Units": 9},
]


def _render(kind: str, *, x: str = "Month", y: str = "Revenue", title: str = "Sales"):
    config = ChartConfig(kind=kind, x_axis=x, y_axis=y, title=title)  # type: ignore[arg-type]
    return render_chart(config=config, rows=ROWS, columns=COLUMNS)


def test_bar_chart_maps_labels_and_values() -> None:
    """Labels come from the x column; non-numeric or missing values plot as 0."""

    rendered = _render("bar")
    assert rendered.error is None
    spec = rendered.spec
    assert spec is not None
    assert spec["type"] == "bar"
    assert spec["data"]["labels"] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    dataset = spec["data"]["datasets"][0]
    assert dataset["label"] == "Revenue"
    assert dataset["data"] == [100.0, 250.5, 0.0, 0.0, 75.0, 300.0]
    assert dataset["backgroundColor"] == "rgba(59, 130, 246, 0.7)"
    assert dataset["borderColor"] == "rgba(59, 130, 246, 1)"
    assert dataset["borderWidth"] == 1
    assert dataset["fill"] is False


def test_area_chart_is_a_filled_line_chart() -> None:
    """Area charts render as Chart.js line charts with fill enabled."""

    spec = _render("area").spec
    assert spec is not None
    assert spec["type"] == "line"
    assert spec["data"]["datasets"][0]["fill"] is True


def test_line_chart_is_not_filled() -> None:
    """Plain line charts do not fill below the line."""

    spec = _render("line").spec
    assert spec is not None
    assert spec["type"] == "line"
    assert spec["data"]["datasets"][0]["fill"] is False


@pytest.mark.parametrize("kind", ["pie", "doughnut"])
def test_radial_charts_cycle_palette_and_drop_scales(kind: str) -> None:
    """Pie and doughnut charts color each slice from the palette and have no axes."""

    spec = _render(kind).spec
    assert spec is not None
    assert spec["type"] == kind
    dataset = spec["data"]["datasets"][0]
    assert dataset["backgroundColor"] == [COLOR_PALETTE[i % 5] for i in range(6)]
    assert dataset["backgroundColor"][5] == COLOR_PALETTE[0]
    assert dataset["borderColor"] == [border_color(color) for color in dataset["backgroundColor"]]
    assert "scales" not in spec["options"]


def test_scatter_chart_uses_point_pairs_without_labels() -> None:
    """Scatter charts plot {x, y} pairs and omit the labels array."""

    spec = _render("scatter", x="Units", y="Revenue").spec
    assert spec is not None
    assert spec["type"] == "scatter"
    assert "labels" not in spec["data"]
    dataset = spec["data"]["datasets"][0]
    assert dataset["label"] == "Units vs Revenue"
    assert dataset["data"][:2] == [{"x": 4.0, "y": 100.0}, {"x": 6.0, "y": 250.5}]


def test_options_carry_title_legend_and_axis_titles() -> None:
    """Options include the chart title, bottom legend and titled axes."""

    options = _render("bar", title="Quarterly Revenue").spec["options"]  # type: ignore[index]
    assert options["responsive"] is True
    assert options["maintainAspectRatio"] is False
    assert options["plugins"]["title"] == {"display": True, "text": "Quarterly Revenue", "font": {"size": 18}}
    assert options["plugins"]["legend"] == {"position": "bottom"}
    assert options["scales"]["x"]["title"]["text"] == "Month"
    assert options["scales"]["y"]["title"]["text"] == "Revenue"
    assert options["scales"]["y"]["beginAtZero"] is True


def test_switching_kind_rebuilds_without_touching_rows() -> None:
    """Re-rendering with a new kind produces a fresh spec and leaves rows unchanged."""

    snapshot = copy.deepcopy(ROWS)
    bar = _render("bar").spec
    pie = _render("pie").spec
    assert bar is not None and pie is not None
    assert bar["data"]["datasets"][0]["data"] == pie["data"]["datasets"][0]["data"]
    assert bar["data"]["datasets"][0] is not pie["data"]["datasets"][0]
    assert ROWS == snapshot


def test_unknown_axis_returns_error_instead_of_spec() -> None:
    """Invalid configs render no spec and report the first error."""

    rendered = _render("bar", y="Profit")
    assert rendered.spec is None
    assert rendered.error == "Unknown Y-axis column: 'Profit'."


def test_non_numeric_value_axis_renders_with_warning() -> None:
    """A value axis that is not inferred numeric still renders, with a warning."""

    rendered = _render("bar", y="Month")
    assert rendered.spec is not None
    assert rendered.spec["data"]["datasets"][0]["data"] == [0.0] * 6
    assert any("does not look numeric" in warning for warning in rendered.warnings)


def test_infinite_values_plot_as_zero() -> None:
    """Infinite numbers are not representable in JSON payloads and plot as 0."""

    config = ChartConfig(kind="bar", x_axis="k", y_axis="v")
    rendered = render_chart(config=config, rows=[{"k": "a", "v": "Infinity"}, {"k": "b", "v": 2}], columns=["k", "v"])
    assert rendered.spec is not None
    assert rendered.spec["data"]["datasets"][0]["data"] == [0.0, 2.0]
