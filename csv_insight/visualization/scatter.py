"""Scatter plot data for a pair of numeric columns.

Points keep the source row order. Reference lines mark the mean, median and
mean ± one standard deviation of each axis, spanning the observed range of
the other axis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from csv_insight.analysis.statistics import compute_mean, compute_median, compute_std_dev
from csv_insight.core.dataset import Dataset, is_missing, parse_number
from csv_insight.visualization.options import ScatterOptions


class Axis(str, Enum):
    """Axis a reference line marks a statistic of."""

    X = "x"
    Y = "y"


@dataclass(frozen=True)
class ReferenceLine:
    """A two-point reference segment.

    For an X line the segment is vertical at ``position`` from ``start`` to
    ``end`` on the y-axis; for a Y line it is horizontal.
    """

    label: str
    axis: Axis
    position: float
    start: float
    end: float

    @property
    def points(self) -> tuple[tuple[float, float], tuple[float, float]]:
        if self.axis == Axis.X:
            return (self.position, self.start), (self.position, self.end)
        return (self.start, self.position), (self.end, self.position)


@dataclass
class ScatterData:
    """Paired points and reference lines ready for rendering."""

    x_column: str
    y_column: str
    points: list[tuple[float, float]] = field(default_factory=list)
    lines: list[ReferenceLine] = field(default_factory=list)

    @property
    def xs(self) -> list[float]:
        return [p[0] for p in self.points]

    @property
    def ys(self) -> list[float]:
        return [p[1] for p in self.points]

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "x_column": self.x_column,
            "y_column": self.y_column,
            "points": [{"x": x, "y": y} for x, y in self.points],
            "lines": [
                {"label": line.label, "points": [list(p) for p in line.points]}
                for line in self.lines
            ],
        }


def _axis_lines(
    axis: Axis,
    values: list[float],
    span: tuple[float, float],
    options: ScatterOptions,
) -> list[ReferenceLine]:
    name = axis.value.upper()
    mean = compute_mean(values)
    std_dev = compute_std_dev(values)
    lo, hi = span

    lines = []
    if options.show_mean:
        lines.append(ReferenceLine(f"{name} Mean", axis, mean, lo, hi))
    if options.show_median:
        lines.append(ReferenceLine(f"{name} Median", axis, compute_median(values), lo, hi))
    if options.show_std:
        lines.append(ReferenceLine(f"{name} Mean + Std", axis, mean + std_dev, lo, hi))
        lines.append(ReferenceLine(f"{name} Mean - Std", axis, mean - std_dev, lo, hi))
    return lines


def build_scatter(
    x_values: Sequence[Any],
    y_values: Sequence[Any],
    options: ScatterOptions | None = None,
    x_column: str = "x",
    y_column: str = "y",
) -> ScatterData:
    """Pair two columns into points and compute reference lines.

    Rows where either value is missing or not a finite number are dropped.

    Args:
        x_values: Values for the x-axis
        y_values: Values for the y-axis, same length as x_values
        options: Overlay and display options
        x_column: X column name
        y_column: Y column name

    Returns:
        ScatterData with points and reference lines

    Raises:
        ValueError: If the sequences differ in length
    """
    if len(x_values) != len(y_values):
        raise ValueError(
            f"x and y must have the same length, got {len(x_values)} and {len(y_values)}"
        )
    if options is None:
        options = ScatterOptions()

    points = []
    for raw_x, raw_y in zip(x_values, y_values):
        if is_missing(raw_x) or is_missing(raw_y):
            continue
        x, y = parse_number(raw_x), parse_number(raw_y)
        if x is None or y is None:
            continue
        points.append((x, y))

    result = ScatterData(x_column=x_column, y_column=y_column, points=points)
    if not points:
        return result

    xs, ys = result.xs, result.ys
    result.lines = (
        _axis_lines(Axis.X, xs, (min(ys), max(ys)), options)
        + _axis_lines(Axis.Y, ys, (min(xs), max(xs)), options)
    )
    # mean ± std can overflow for extreme values
    result.lines = [line for line in result.lines if math.isfinite(line.position)]
    return result


def dataset_scatter(
    dataset: Dataset,
    x_column: str,
    y_column: str,
    options: ScatterOptions | None = None,
) -> ScatterData:
    """Build the scatter data for two columns of a dataset.

    Raises:
        ColumnNotFoundError: If either column does not exist
    """
    return build_scatter(
        dataset.column_values(x_column),
        dataset.column_values(y_column),
        options,
        x_column=x_column,
        y_column=y_column,
    )
