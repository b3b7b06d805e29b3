"""Chart rendering for histogram and scatter data.

This module turns builder output into Plotly figures:
- Histograms with mean/median/std marker series
- Scatter plots with reference lines on both axes
- A per-session renderer that keeps one live chart of each kind

All plots are generated using Plotly for interactivity.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import plotly.graph_objects as go

from csv_insight.visualization.histogram import HistogramData
from csv_insight.visualization.options import ChartOptions, HistogramOptions, ScatterOptions
from csv_insight.visualization.scatter import Axis, ScatterData

logger = logging.getLogger(__name__)

BAR_COLOR = "rgba(54, 162, 235, 0.5)"
BAR_LINE_COLOR = "rgba(54, 162, 235, 1)"
MARKER_COLORS = {
    "Mean": "rgba(255, 0, 0, 0.7)",
    "Median": "rgba(0, 200, 0, 0.7)",
    "Std": "rgba(255, 165, 0, 0.7)",
}


class ChartKind(str, Enum):
    """Kinds of chart a renderer owns."""

    HISTOGRAM = "histogram"
    SCATTER = "scatter"


@dataclass
class PlotResult:
    """Result from a plot generation function.

    Attributes:
        figure: Plotly figure object
        title: Plot title
        description: Description of what the plot shows
        data_summary: Summary of data used
    """

    figure: go.Figure
    title: str
    description: str
    data_summary: dict[str, Any]

    def to_html(self, include_plotlyjs: bool = True) -> str:
        """Convert figure to HTML string.

        Args:
            include_plotlyjs: Include Plotly.js library in HTML

        Returns:
            HTML string
        """
        return self.figure.to_html(
            include_plotlyjs="cdn" if include_plotlyjs else False,
            full_html=False,
        )

    def to_json(self) -> str:
        """Convert figure to JSON for frontend rendering."""
        return self.figure.to_json()


class ChartInstance:
    """A live chart and the figure backing it."""

    def __init__(self, kind: ChartKind, result: PlotResult):
        self.kind = kind
        self.result = result
        self.destroyed = False

    @property
    def figure(self) -> go.Figure:
        return self.result.figure

    def destroy(self) -> None:
        """Release the figure's traces and layout. Safe to call twice."""
        if self.destroyed:
            return
        self.result.figure.data = []
        self.result.figure.layout = go.Layout()
        self.destroyed = True


def _marker_color(label: str) -> str:
    for key, color in MARKER_COLORS.items():
        if key in label:
            return color
    return "rgba(128, 128, 128, 0.7)"


def _axis_type(requested_log: bool, values: list[float], axis_name: str) -> str:
    """Resolve the axis type, falling back to linear for non-positive data."""
    if not requested_log:
        return "linear"
    if values and min(values) <= 0:
        logger.warning(
            f"Log scale requested for {axis_name} axis with non-positive values; using linear"
        )
        return "linear"
    return "log"


def _apply_axes(
    fig: go.Figure,
    options: ChartOptions,
    x_title: str,
    y_title: str,
    x_values: list[float],
    y_values: list[float],
) -> None:
    # axis options are rebuilt from the options on every call
    fig.update_xaxes(
        title_text=x_title,
        type=_axis_type(options.log_x, x_values, "x"),
        showgrid=options.show_grid,
    )
    fig.update_yaxes(
        title_text=y_title,
        type=_axis_type(options.log_y, y_values, "y"),
        showgrid=options.show_grid,
    )


def _add_empty_annotation(fig: go.Figure, message: str) -> None:
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        showarrow=False,
    )


def create_histogram(
    data: HistogramData,
    options: HistogramOptions | None = None,
    title: str | None = None,
) -> PlotResult:
    """Create a histogram figure from binned data.

    Args:
        data: Output of the histogram builder
        options: Display options (grid, log axes)
        title: Plot title (auto-generated if None)

    Returns:
        PlotResult with histogram figure
    """
    if options is None:
        options = HistogramOptions()
    if title is None:
        title = f"Distribution of {data.column}"

    fig = go.Figure()

    if data.is_empty:
        _add_empty_annotation(fig, f"No numeric values in {data.column}")
    else:
        width = data.bins[0].width
        if width > 0:
            display_width = width
            centers = [b.start + width / 2 for b in data.bins]
        else:
            # constant column: one unit-wide bar at the value
            display_width = 1.0
            centers = [data.bins[0].start]

        counts = data.counts[: len(centers)]
        fig.add_trace(go.Bar(
            x=centers,
            y=counts,
            width=[display_width] * len(centers),
            text=data.labels[: len(centers)],
            textposition="none",
            hovertemplate="%{text}: %{y}<extra></extra>",
            name=f"Distribution of {data.column}",
            marker=dict(color=BAR_COLOR, line=dict(color=BAR_LINE_COLOR, width=1)),
        ))

        for overlay in data.overlays:
            fig.add_trace(go.Scatter(
                x=centers,
                y=list(overlay.values[: len(centers)]),
                mode="lines",
                name=overlay.label,
                line=dict(color=_marker_color(overlay.label), dash="dash", width=2),
            ))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        template="plotly_white",
        bargap=0.05,
        legend=dict(orientation="h", yanchor="bottom", y=1.02),
    )
    lower_edges = [b.start for b in data.bins]
    # empty bins are simply not drawn on a log axis
    nonzero_counts = [c for c in data.counts if c > 0]
    _apply_axes(fig, options, data.column, "Frequency", lower_edges, nonzero_counts)

    summary = {
        "column": data.column,
        "count": data.total,
        "bins": len(data.bins),
        "mean": data.mean if math.isfinite(data.mean) else None,
        "median": data.median if math.isfinite(data.median) else None,
        "std": data.std_dev if math.isfinite(data.std_dev) else None,
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Histogram of {data.column} distribution.",
        data_summary=summary,
    )


def create_scatter_plot(
    data: ScatterData,
    options: ScatterOptions | None = None,
    title: str | None = None,
) -> PlotResult:
    """Create a scatter figure from paired points.

    Args:
        data: Output of the scatter builder
        options: Display options (grid, log axes)
        title: Plot title

    Returns:
        PlotResult with scatter plot
    """
    if options is None:
        options = ScatterOptions()
    if title is None:
        title = f"{data.y_column} vs {data.x_column}"

    fig = go.Figure()

    if data.is_empty:
        _add_empty_annotation(fig, "No numeric value pairs to plot")
    else:
        fig.add_trace(go.Scatter(
            x=data.xs,
            y=data.ys,
            mode="markers",
            name="Data Points",
            marker=dict(size=6, color=BAR_COLOR, line=dict(color=BAR_LINE_COLOR, width=1)),
        ))

        for line in data.lines:
            (x0, y0), (x1, y1) = line.points
            fig.add_trace(go.Scatter(
                x=[x0, x1],
                y=[y0, y1],
                mode="lines",
                name=line.label,
                line=dict(color=_marker_color(line.label), dash="dash", width=2),
            ))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        template="plotly_white",
        hovermode="closest",
        legend=dict(orientation="h", yanchor="bottom", y=1.02),
    )
    _apply_axes(fig, options, data.x_column, data.y_column, data.xs, data.ys)

    summary = {
        "x_column": data.x_column,
        "y_column": data.y_column,
        "n_points": len(data.points),
        "reference_lines": [line.label for line in data.lines],
        "x_lines": sum(1 for line in data.lines if line.axis == Axis.X),
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Scatter plot of {data.y_column} vs {data.x_column}.",
        data_summary=summary,
    )


ChartData = Union[HistogramData, ScatterData]


class ChartRenderer:
    """Owns at most one live histogram and one live scatter chart.

    Rendering a kind destroys the previous instance of that kind before the
    new figure is built.

    Example:
        >>> renderer = ChartRenderer()
        >>> result = renderer.render(ChartKind.HISTOGRAM, build_histogram([1, 2, 3]))
        >>> renderer.current(ChartKind.HISTOGRAM).figure is result.figure
        True
    """

    def __init__(self) -> None:
        self._instances: dict[ChartKind, ChartInstance] = {}
        self.destroyed_count = 0

    def current(self, kind: ChartKind) -> ChartInstance | None:
        return self._instances.get(ChartKind(kind))

    def dispose(self, kind: ChartKind) -> bool:
        """Destroy the live chart of a kind. Returns True if one existed."""
        instance = self._instances.pop(ChartKind(kind), None)
        if instance is None:
            return False
        instance.destroy()
        self.destroyed_count += 1
        logger.debug(f"Destroyed {instance.kind.value} chart")
        return True

    def dispose_all(self) -> None:
        for kind in list(self._instances):
            self.dispose(kind)

    def render(
        self,
        kind: ChartKind,
        data: ChartData,
        options: ChartOptions | None = None,
    ) -> PlotResult:
        """Replace the chart of the given kind with a fresh figure.

        Args:
            kind: Which chart to draw
            data: HistogramData for histograms, ScatterData for scatter plots
            options: Display options read for this redraw only

        Returns:
            PlotResult of the new live chart

        Raises:
            TypeError: If the data does not match the chart kind
        """
        kind = ChartKind(kind)
        if kind == ChartKind.HISTOGRAM and not isinstance(data, HistogramData):
            raise TypeError("Histogram charts need HistogramData")
        if kind == ChartKind.SCATTER and not isinstance(data, ScatterData):
            raise TypeError("Scatter charts need ScatterData")

        self.dispose(kind)

        if kind == ChartKind.HISTOGRAM:
            result = create_histogram(data, HistogramOptions(**_option_values(options)))
        else:
            result = create_scatter_plot(data, ScatterOptions(**_option_values(options)))

        self._instances[kind] = ChartInstance(kind, result)
        return result


def _option_values(options: ChartOptions | None) -> dict[str, Any]:
    return options.model_dump() if options is not None else {}
