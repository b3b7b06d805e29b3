"""Immutable display options passed to the chart builders."""

from pydantic import BaseModel, ConfigDict, Field


class ChartOptions(BaseModel):
    """Display options for a chart, fixed for a single redraw."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    show_mean: bool = Field(default=False, description="Overlay the mean")
    show_median: bool = Field(default=False, description="Overlay the median")
    show_std: bool = Field(default=False, description="Overlay mean ± one standard deviation")
    show_grid: bool = Field(default=True, description="Show gridlines")
    log_x: bool = Field(default=False, description="Logarithmic x-axis")
    log_y: bool = Field(default=False, description="Logarithmic y-axis")


class HistogramOptions(ChartOptions):
    """Display options for a histogram."""


class ScatterOptions(ChartOptions):
    """Display options for a scatter plot."""
