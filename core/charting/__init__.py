"""Chart configuration and rendering helpers.

Charts are described by a `ChartConfig` (kind, axes, title) and rendered into a
Chart.js payload by `render_chart`. This package contains the schema, builder,
validation, and rendering utilities used by the visualization views.
"""
