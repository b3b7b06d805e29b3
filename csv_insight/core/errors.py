"""Exception types raised by CSV Insight."""


class CsvInsightError(Exception):
    """Base class for all CSV Insight errors."""


class PayloadError(CsvInsightError, ValueError):
    """Raised when an upload or inbound payload is missing or malformed."""


class ColumnNotFoundError(CsvInsightError, KeyError):
    """Raised when a requested column is absent from the dataset."""

    def __init__(self, column: str):
        super().__init__(column)
        self.column = column

    def __str__(self) -> str:
        return f"Column {self.column!r} not found in dataset"


class EmptySessionError(CsvInsightError):
    """Raised when a session holds no dataset to analyse."""
