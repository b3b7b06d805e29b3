"""Statistical analysis for CSV Insight.

This module contains:
- Numeric summaries (mean, median, std, min, max)
- Text summaries (unique count, most frequent values)
"""

from csv_insight.analysis.statistics import (
    CategoricalSummary,
    ColumnSummary,
    NumericSummary,
    TopValue,
    summarize_column,
    summarize_dataset,
)

__all__ = [
    "CategoricalSummary",
    "ColumnSummary",
    "NumericSummary",
    "TopValue",
    "summarize_column",
    "summarize_dataset",
]
