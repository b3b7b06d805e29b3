"""Descriptive statistics for dataset columns.

This module provides the per-column summaries shown on the analysis page:
- Counts of values and missing values
- Mean, median, population standard deviation, min and max for numeric columns
- Unique counts and most frequent values for text columns

All functions are pure; summaries are recomputed on every render.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence, Union

import numpy as np

from csv_insight.config import get_settings
from csv_insight.core.dataset import (
    ColumnType,
    Dataset,
    classify_column,
    is_missing,
    parse_number,
)


@dataclass(frozen=True)
class TopValue:
    """A distinct value and the number of times it occurs."""

    value: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "count": self.count}


@dataclass(frozen=True)
class NumericSummary:
    """Summary statistics for a numeric column.

    Statistics are NaN when the column has no numeric values.

    Attributes:
        column: Column name
        count: Number of cells, including missing ones
        null_count: Number of missing cells
        mean: Arithmetic mean
        median: Median (average of the central pair on even length)
        std_dev: Population standard deviation
        min: Minimum value
        max: Maximum value
    """

    column: str
    count: int
    null_count: int
    mean: float
    median: float
    std_dev: float
    min: float
    max: float

    @property
    def is_numeric(self) -> bool:
        return True

    @property
    def has_values(self) -> bool:
        """True when the statistics are defined."""
        return not math.isnan(self.mean)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase analysis payload."""
        return {
            "count": self.count,
            "nullCount": self.null_count,
            "mean": _json_float(self.mean),
            "median": _json_float(self.median),
            "stdDev": _json_float(self.std_dev),
            "min": _json_float(self.min),
            "max": _json_float(self.max),
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        lines = [
            f"**{self.column}** (numeric, n={self.count}, missing={self.null_count})",
            f"  Mean: {format_stat(self.mean)}",
            f"  Median: {format_stat(self.median)}",
            f"  Std Dev: {format_stat(self.std_dev)}",
            f"  Range: [{format_stat(self.min)}, {format_stat(self.max)}]",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class CategoricalSummary:
    """Summary statistics for a text column.

    Attributes:
        column: Column name
        count: Number of cells, including missing ones
        null_count: Number of missing cells
        unique_count: Number of distinct non-missing values
        top_values: Most frequent values, by descending count
    """

    column: str
    count: int
    null_count: int
    unique_count: int
    top_values: tuple[TopValue, ...] = ()

    @property
    def is_numeric(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase analysis payload."""
        return {
            "count": self.count,
            "nullCount": self.null_count,
            "uniqueCount": self.unique_count,
            "topValues": [tv.to_dict() for tv in self.top_values],
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        lines = [
            f"**{self.column}** (text, n={self.count}, missing={self.null_count})",
            f"  Unique values: {self.unique_count}",
        ]
        for tv in self.top_values:
            lines.append(f"  {tv.value}: {tv.count}")
        return "\n".join(lines)


ColumnSummary = Union[NumericSummary, CategoricalSummary]


def format_stat(value: float, digits: int = 2) -> str:
    """Format a statistic for display, showing N/A for undefined values."""
    if value is None or not math.isfinite(value):
        return "N/A"
    return f"{value:.{digits}f}"


def _json_float(value: float) -> float | None:
    return value if math.isfinite(value) else None


def compute_mean(values: Sequence[float]) -> float:
    """Arithmetic mean, or NaN for an empty sequence."""
    if len(values) == 0:
        return math.nan
    data = np.asarray(values, dtype=float)
    # pairwise summation can overshoot the range by an ulp
    return float(np.clip(np.mean(data), data.min(), data.max()))


def compute_median(values: Sequence[float]) -> float:
    """Median, averaging the two central values on even length.

    Returns NaN for an empty sequence.
    """
    if len(values) == 0:
        return math.nan
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2.0
    return float(ordered[mid])


def compute_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by n), or NaN when empty."""
    if len(values) == 0:
        return math.nan
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def numeric_subset(values: Sequence[Any]) -> list[float]:
    """Extract the non-missing, numeric-parseable values in order."""
    subset = []
    for value in values:
        if is_missing(value):
            continue
        number = parse_number(value)
        if number is not None:
            subset.append(number)
    return subset


def top_values(values: Sequence[Any], top_k: int | None = None) -> tuple[TopValue, ...]:
    """Rank non-missing values by descending count.

    Ties keep first-seen order. Values are compared by their string form.
    """
    if top_k is None:
        top_k = get_settings().top_k_values
    # Counter preserves insertion order and most_common sorts stably
    counts = Counter(str(v).strip() for v in values if not is_missing(v))
    return tuple(TopValue(value=v, count=c) for v, c in counts.most_common(top_k))


def summarize_numeric(values: Sequence[Any], column: str = "") -> NumericSummary:
    """Summarize a numeric column from its raw values."""
    subset = numeric_subset(values)

    return NumericSummary(
        column=column,
        count=len(values),
        null_count=sum(1 for v in values if is_missing(v)),
        mean=compute_mean(subset),
        median=compute_median(subset),
        std_dev=compute_std_dev(subset),
        min=float(min(subset)) if subset else math.nan,
        max=float(max(subset)) if subset else math.nan,
    )


def summarize_categorical(
    values: Sequence[Any],
    column: str = "",
    top_k: int | None = None,
) -> CategoricalSummary:
    """Summarize a text column from its raw values."""
    present = [str(v).strip() for v in values if not is_missing(v)]

    return CategoricalSummary(
        column=column,
        count=len(values),
        null_count=len(values) - len(present),
        unique_count=len(set(present)),
        top_values=top_values(present, top_k),
    )


def summarize_column(
    values: Sequence[Any],
    column: str = "",
    column_type: ColumnType | None = None,
    top_k: int | None = None,
) -> ColumnSummary:
    """Summarize one column, classifying it first if no type is given.

    Example:
        >>> summary = summarize_column([1, 2, 2, 3, None, ""], "score")
        >>> summary.mean, summary.null_count
        (2.0, 2)
    """
    if column_type is None:
        column_type = classify_column(values)

    if column_type == ColumnType.NUMERIC:
        return summarize_numeric(values, column)
    return summarize_categorical(values, column, top_k)


def summarize_dataset(
    dataset: Dataset,
    top_k: int | None = None,
) -> dict[str, ColumnSummary]:
    """Summarize every column of a dataset, in header order."""
    return {
        name: summarize_column(
            dataset.column_values(name),
            column=name,
            column_type=dataset.column_type(name),
            top_k=top_k,
        )
        for name in dataset.headers
    }


def analysis_payload(summaries: dict[str, ColumnSummary]) -> dict[str, dict[str, Any]]:
    """Convert summaries to the ``analysis`` mapping of the upload response."""
    return {name: summary.to_dict() for name, summary in summaries.items()}
