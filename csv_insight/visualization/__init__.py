"""Visualization tools for CSV Insight.

This module contains:
- Histogram binning with statistic markers
- Scatter plots with reference lines
- Summary cards and data preview
- Interactive Plotly rendering
"""

from csv_insight.visualization.cards import SortOrder, SummaryCard, build_cards
from csv_insight.visualization.charts import (
    ChartKind,
    ChartRenderer,
    PlotResult,
    create_histogram,
    create_scatter_plot,
)
from csv_insight.visualization.histogram import HistogramData, build_histogram
from csv_insight.visualization.options import HistogramOptions, ScatterOptions
from csv_insight.visualization.scatter import ScatterData, build_scatter

__all__ = [
    "ChartKind",
    "ChartRenderer",
    "PlotResult",
    "create_histogram",
    "create_scatter_plot",
    "HistogramData",
    "HistogramOptions",
    "build_histogram",
    "ScatterData",
    "ScatterOptions",
    "build_scatter",
    "SortOrder",
    "SummaryCard",
    "build_cards",
]
