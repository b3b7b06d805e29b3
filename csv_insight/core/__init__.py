"""Core functionality for CSV Insight.

This module contains:
- Dataset model with column classification
- Missing-value and numeric parsing rules
- Transient session storage
- Error types
"""

from csv_insight.core.dataset import (
    ColumnType,
    Dataset,
    classify_column,
    is_missing,
    parse_number,
)
from csv_insight.core.errors import (
    ColumnNotFoundError,
    CsvInsightError,
    EmptySessionError,
    PayloadError,
)
from csv_insight.core.session import (
    CSV_DATA_KEY,
    FILE_NAME_KEY,
    SessionStorage,
    load_dataset,
    store_dataset,
)

__all__ = [
    "ColumnType",
    "Dataset",
    "classify_column",
    "is_missing",
    "parse_number",
    "ColumnNotFoundError",
    "CsvInsightError",
    "EmptySessionError",
    "PayloadError",
    "CSV_DATA_KEY",
    "FILE_NAME_KEY",
    "SessionStorage",
    "load_dataset",
    "store_dataset",
]
