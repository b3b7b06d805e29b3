"""CSV Insight: column statistics and charts for uploaded CSV files.

This package parses an uploaded CSV into an in-memory dataset, computes
per-column descriptive statistics, and renders summary cards, histograms and
scatter plots for interactive exploration.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports for main package exports."""
    if name == "Dataset":
        from csv_insight.core.dataset import Dataset

        return Dataset
    if name == "ChartRenderer":
        from csv_insight.visualization.charts import ChartRenderer

        return ChartRenderer
    if name == "summarize_dataset":
        from csv_insight.analysis.statistics import summarize_dataset

        return summarize_dataset
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ChartRenderer",
    "Dataset",
    "summarize_dataset",
    "__version__",
]
