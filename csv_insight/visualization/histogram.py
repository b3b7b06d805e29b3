"""Histogram binning for a single numeric column.

Bins are equal-width intervals over [min, max]. Each bin is half-open except
the last, which is closed at max so the largest value is always counted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

from csv_insight.analysis.statistics import compute_mean, compute_median, compute_std_dev
from csv_insight.config import get_settings
from csv_insight.core.dataset import Dataset
from csv_insight.visualization.options import HistogramOptions


@dataclass(frozen=True)
class Bin:
    """An equal-width interval with its frequency count."""

    start: float
    width: float
    count: int = 0

    @property
    def end(self) -> float:
        return self.start + self.width

    @property
    def label(self) -> str:
        return f"{self.start:.2f}"


@dataclass(frozen=True)
class OverlayMarker:
    """A statistic drawn as a vertical marker in bin coordinates.

    Attributes:
        label: Legend label
        positions: Positions of the statistic on the value axis
        values: Per-bin height, the max frequency where a position falls
    """

    label: str
    positions: tuple[float, ...]
    values: tuple[int, ...]


@dataclass
class HistogramData:
    """Binned frequencies ready for rendering.

    Attributes:
        column: Column name
        bins: Ordered bins
        mean: Mean of the valid values
        median: Median of the valid values
        std_dev: Population standard deviation of the valid values
        overlays: Overlay markers requested by the options
    """

    column: str
    bins: list[Bin] = field(default_factory=list)
    mean: float = math.nan
    median: float = math.nan
    std_dev: float = math.nan
    overlays: list[OverlayMarker] = field(default_factory=list)

    @property
    def labels(self) -> list[str]:
        return [b.label for b in self.bins]

    @property
    def counts(self) -> list[int]:
        return [b.count for b in self.bins]

    @property
    def total(self) -> int:
        return sum(b.count for b in self.bins)

    @property
    def is_empty(self) -> bool:
        return not self.bins

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "column": self.column,
            "labels": self.labels,
            "counts": self.counts,
            "total": self.total,
            "overlays": [
                {
                    "label": o.label,
                    "positions": [p if math.isfinite(p) else None for p in o.positions],
                    "values": list(o.values),
                }
                for o in self.overlays
            ],
        }


def bin_count(n: int, min_bins: int | None = None, max_bins: int | None = None) -> int:
    """Number of bins for n values: ceil(sqrt(n)) clamped to [min_bins, max_bins]."""
    settings = get_settings()
    if min_bins is None:
        min_bins = settings.min_bins
    if max_bins is None:
        max_bins = settings.max_bins
    return min(max_bins, max(min_bins, math.ceil(math.sqrt(n))))


def bin_width(lo: float, hi: float, n_bins: int) -> float:
    """Equal bin width over [lo, hi], or 0 when the range cannot be split."""
    width = (hi - lo) / n_bins
    if not math.isfinite(width):
        # hi - lo overflows; divide each end first
        width = hi / n_bins - lo / n_bins
    return width if math.isfinite(width) else 0.0


def bin_start(lo: float, index: int, width: float) -> float:
    """Left edge of bin number index."""
    start = lo + index * width
    if not math.isfinite(start):
        start = 2 * (lo / 2 + index * (width / 2))
    return start


def bin_index(value: float, lo: float, width: float, n_bins: int) -> int:
    """Index of the bin holding value.

    Bins are half-open except the last, which also takes the maximum.
    Constant columns map to bin 0. This is the only membership rule; counts
    and overlay markers both go through it.
    """
    if width == 0:
        return 0
    offset = (value - lo) / width
    if not math.isfinite(offset):
        offset = value / width - lo / width
    return max(0, min(int(math.floor(offset)), n_bins - 1))


def _marker_values(
    bins: list[Bin],
    positions: Sequence[float],
    lo: float,
    hi: float,
) -> tuple[int, ...]:
    peak = max((b.count for b in bins), default=0)
    width = bins[0].width if bins else 0.0
    # positions outside [lo, hi] fall in no bin
    hits = {
        bin_index(p, lo, width, len(bins))
        for p in positions
        if math.isfinite(p) and lo <= p <= hi
    }
    return tuple(peak if i in hits else 0 for i in range(len(bins)))


def build_histogram(
    values: Sequence[float],
    options: HistogramOptions | None = None,
    column: str = "",
) -> HistogramData:
    """Bin numeric values and compute the requested overlay markers.

    Non-finite values are dropped. An empty input yields a histogram with no
    bins.

    Args:
        values: Numeric values of one column
        options: Overlay and display options
        column: Column name, used for labels

    Returns:
        HistogramData with bins and overlays

    Example:
        >>> hist = build_histogram([5, 5, 5, 5])
        >>> hist.counts[0], hist.total
        (4, 4)
    """
    if options is None:
        options = HistogramOptions()

    data = [float(v) for v in values if v is not None and math.isfinite(v)]
    if not data:
        return HistogramData(column=column)

    lo, hi = min(data), max(data)
    n_bins = bin_count(len(data))
    width = bin_width(lo, hi, n_bins)

    counts = [0] * n_bins
    for v in data:
        counts[bin_index(v, lo, width, n_bins)] += 1

    bins = [
        Bin(start=bin_start(lo, i, width), width=width, count=c)
        for i, c in enumerate(counts)
    ]

    mean = compute_mean(data)
    median = compute_median(data)
    std_dev = compute_std_dev(data)

    requested = []
    if options.show_mean:
        requested.append(("Mean", (mean,)))
    if options.show_median:
        requested.append(("Median", (median,)))
    if options.show_std:
        requested.append(("Mean ± Std", (mean - std_dev, mean + std_dev)))

    overlays = [
        OverlayMarker(label, positions, _marker_values(bins, positions, lo, hi))
        for label, positions in requested
    ]

    return HistogramData(
        column=column,
        bins=bins,
        mean=mean,
        median=median,
        std_dev=std_dev,
        overlays=overlays,
    )


def dataset_histogram(
    dataset: Dataset,
    column: str,
    options: HistogramOptions | None = None,
) -> HistogramData:
    """Build the histogram for one column of a dataset.

    Raises:
        ColumnNotFoundError: If the column does not exist
    """
    return build_histogram(dataset.numeric_values(column), options, column=column)
