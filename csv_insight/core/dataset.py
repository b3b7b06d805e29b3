"""Tabular dataset model for CSV Insight.

This module provides the data source layer: an ordered set of rows keyed by
column header, together with a per-column type decided once when the dataset
is built. It handles:
- CSV parsing for uploads
- Loading from either inbound JSON payload shape
- Missing-value detection and numeric parsing
- Column classification by majority vote

Example:
    >>> from csv_insight.core.dataset import Dataset
    >>> ds = Dataset.from_records(["a", "b"], [{"a": "1", "b": "x"}])
    >>> ds.numeric_columns
    ('a',)
"""

from __future__ import annotations

import io
import logging
import math
import numbers
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from csv_insight.config import get_settings
from csv_insight.core.errors import ColumnNotFoundError, PayloadError

logger = logging.getLogger(__name__)

# dataType tags that mark a column numeric in the columnAnalysis payload
NUMERIC_DATA_TYPES = frozenset({"FLOAT", "NUMERIC"})


class ColumnType(str, Enum):
    """Classification of a column's values."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


def is_missing(value: Any, markers: Iterable[str] | None = None) -> bool:
    """Check whether a raw cell value is a missing marker.

    None, float NaN and any configured marker string (compared after
    stripping whitespace) count as missing.
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str):
        if markers is None:
            markers = get_settings().missing_markers
        return value.strip() in set(markers) or not value.strip()
    return False


def parse_number(value: Any) -> float | None:
    """Parse a raw cell value as a finite float.

    Returns:
        The parsed float, or None if the value is missing, non-numeric,
        boolean or non-finite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def classify_column(
    values: Sequence[Any],
    markers: Iterable[str] | None = None,
) -> ColumnType:
    """Classify a column as numeric or categorical.

    A column is numeric when strictly more than half of its non-missing
    values parse as finite numbers. A column with no non-missing values is
    categorical.
    """
    if markers is not None:
        markers = list(markers)
    present = [v for v in values if not is_missing(v, markers)]
    if not present:
        return ColumnType.CATEGORICAL

    numeric = sum(1 for v in present if parse_number(v) is not None)
    if numeric * 2 > len(present):
        return ColumnType.NUMERIC
    return ColumnType.CATEGORICAL


class Dataset:
    """An uploaded table held in memory for one analysis session.

    Column types are decided when the dataset is constructed and never
    re-inferred afterwards.

    Attributes:
        headers: Ordered column names
        rows: Ordered row mappings keyed by header
        column_types: Column name -> ColumnType
    """

    def __init__(
        self,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, Any]],
        column_types: Mapping[str, ColumnType] | None = None,
    ):
        headers = tuple(str(h) for h in headers)
        duplicates = sorted({h for h in headers if headers.count(h) > 1})
        if duplicates:
            raise PayloadError(f"Duplicate column headers are not supported: {duplicates}")

        self.headers: tuple[str, ...] = headers
        self.rows: list[dict[str, Any]] = [
            {h: row.get(h) for h in headers} for row in rows
        ]

        forced = dict(column_types or {})
        unknown = set(forced) - set(headers)
        if unknown:
            raise PayloadError(f"Column types given for unknown columns: {sorted(unknown)}")

        self.column_types: dict[str, ColumnType] = {
            h: forced.get(h) or classify_column(self.column_values(h))
            for h in headers
        }

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"Dataset(columns={len(self.headers)}, rows={len(self.rows)})"

    @property
    def is_empty(self) -> bool:
        """True when the dataset has no rows or no columns."""
        return not self.rows or not self.headers

    @property
    def numeric_columns(self) -> tuple[str, ...]:
        """Numeric columns in header order."""
        return tuple(
            h for h in self.headers if self.column_types[h] == ColumnType.NUMERIC
        )

    @property
    def categorical_columns(self) -> tuple[str, ...]:
        """Categorical columns in header order."""
        return tuple(
            h for h in self.headers if self.column_types[h] == ColumnType.CATEGORICAL
        )

    def column_type(self, name: str) -> ColumnType:
        if name not in self.column_types:
            raise ColumnNotFoundError(name)
        return self.column_types[name]

    def column_values(self, name: str) -> list[Any]:
        """Get the raw values of one column in row order.

        Raises:
            ColumnNotFoundError: If the column does not exist
        """
        if name not in self.headers:
            raise ColumnNotFoundError(name)
        return [row.get(name) for row in self.rows]

    def numeric_values(self, name: str) -> list[float]:
        """Get the parsed numeric values of one column, skipping the rest."""
        values = []
        for raw in self.column_values(name):
            if is_missing(raw):
                continue
            number = parse_number(raw)
            if number is not None:
                values.append(number)
        return values

    def preview(self, n_rows: int | None = None) -> list[dict[str, Any]]:
        """Return the first rows for the data preview table."""
        if n_rows is None:
            n_rows = get_settings().preview_rows
        return self.rows[:n_rows]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame with the original column order."""
        return pd.DataFrame(self.rows, columns=list(self.headers))

    def to_payload(self) -> dict[str, Any]:
        """Convert to the ``{headers, data, columnTypes}`` JSON payload."""
        return {
            "headers": list(self.headers),
            "data": [dict(row) for row in self.rows],
            "columnTypes": {h: t.value for h, t in self.column_types.items()},
        }

    @classmethod
    def from_records(
        cls,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, Any]],
    ) -> Dataset:
        return cls(headers, rows)

    @classmethod
    def from_csv(cls, source: str | bytes) -> Dataset:
        """Parse CSV text into a dataset.

        The first record is the header. Every cell is kept as a string and
        empty cells stay empty strings.

        Raises:
            PayloadError: If the text cannot be parsed as CSV
        """
        if isinstance(source, bytes):
            try:
                source = source.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise PayloadError(f"File is not valid UTF-8: {e}") from e

        try:
            df = pd.read_csv(
                io.StringIO(source),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError as e:
            raise PayloadError("CSV file is empty") from e
        except pd.errors.ParserError as e:
            raise PayloadError(f"Could not parse CSV: {e}") from e

        df = df.fillna("")
        headers = [str(h).strip() for h in df.iloc[0].tolist()]
        body = df.iloc[1:]
        rows = [dict(zip(headers, record)) for record in body.itertuples(index=False)]

        logger.debug(f"Parsed CSV with {len(headers)} columns and {len(rows)} rows")
        return cls(headers, rows)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Dataset:
        """Build a dataset from an inbound JSON payload.

        Two shapes are accepted:
        - ``{"headers": [...], "data": [{...}, ...], "analysis": {...}}``,
          optionally with ``"columnTypes"`` as written by ``to_payload``
        - ``{"columnAnalysis": {col: {"values": [...], "dataType": "FLOAT"}}}``

        Any precomputed analysis in the payload is ignored; summaries are
        always recomputed from the rows.

        Raises:
            PayloadError: If the payload matches neither shape
        """
        if not isinstance(payload, Mapping):
            raise PayloadError("Payload must be a JSON object")

        if "columnAnalysis" in payload:
            return cls._from_column_analysis(payload["columnAnalysis"])

        data = payload.get("data")
        if not isinstance(data, list):
            raise PayloadError("Payload is missing a 'data' list")
        if not all(isinstance(row, Mapping) for row in data):
            raise PayloadError("Every entry of 'data' must be an object")

        headers = payload.get("headers")
        if headers is None:
            headers = list(data[0].keys()) if data else []
        if not isinstance(headers, list):
            raise PayloadError("'headers' must be a list of column names")

        column_types = None
        if payload.get("columnTypes") is not None:
            try:
                column_types = {
                    name: ColumnType(value)
                    for name, value in dict(payload["columnTypes"]).items()
                }
            except (TypeError, ValueError) as e:
                raise PayloadError(f"Invalid 'columnTypes': {e}") from e

        return cls(headers, data, column_types=column_types)

    @classmethod
    def _from_column_analysis(cls, column_analysis: Any) -> Dataset:
        if not isinstance(column_analysis, Mapping):
            raise PayloadError("'columnAnalysis' must be an object")

        headers: list[str] = []
        columns: dict[str, list[Any]] = {}
        column_types: dict[str, ColumnType] = {}

        for name, entry in column_analysis.items():
            if not isinstance(entry, Mapping) or not isinstance(entry.get("values"), list):
                raise PayloadError(f"Column {name!r} has no 'values' list")
            headers.append(name)
            columns[name] = entry["values"]
            data_type = str(entry.get("dataType", "")).upper()
            column_types[name] = (
                ColumnType.NUMERIC if data_type in NUMERIC_DATA_TYPES
                else ColumnType.CATEGORICAL
            )

        n_rows = max((len(v) for v in columns.values()), default=0)
        rows = [
            {
                name: values[i] if i < len(values) else None
                for name, values in columns.items()
            }
            for i in range(n_rows)
        ]
        return cls(headers, rows, column_types=column_types)
