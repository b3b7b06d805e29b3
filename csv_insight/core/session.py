"""Transient session storage for uploaded datasets.

Mirrors browser session storage: string-valued named slots that hold the
serialized dataset and its file name between page transitions, cleared on
logout.
"""

from __future__ import annotations

import json
import logging

from csv_insight.core.dataset import Dataset
from csv_insight.core.errors import EmptySessionError, PayloadError

logger = logging.getLogger(__name__)

CSV_DATA_KEY = "csvData"
FILE_NAME_KEY = "fileName"


class SessionStorage:
    """String key/value slots scoped to a single session."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


def store_dataset(storage: SessionStorage, dataset: Dataset, file_name: str) -> None:
    """Serialize a dataset and its file name into the two storage slots."""
    storage.set_item(CSV_DATA_KEY, json.dumps(dataset.to_payload()))
    storage.set_item(FILE_NAME_KEY, file_name)
    logger.debug(f"Stored {len(dataset)} rows for {file_name!r}")


def load_dataset(storage: SessionStorage) -> tuple[Dataset, str]:
    """Restore the dataset and file name from storage.

    Returns:
        Tuple of (dataset, file_name)

    Raises:
        EmptySessionError: If either slot is missing or the dataset is empty
    """
    raw = storage.get_item(CSV_DATA_KEY)
    file_name = storage.get_item(FILE_NAME_KEY)

    if not raw or not file_name:
        raise EmptySessionError("No dataset stored for this session")

    try:
        dataset = Dataset.from_payload(json.loads(raw))
    except (json.JSONDecodeError, PayloadError) as e:
        raise EmptySessionError(f"Stored dataset could not be read: {e}") from e

    if dataset.is_empty:
        raise EmptySessionError("Stored dataset is empty")

    return dataset, file_name
