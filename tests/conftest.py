"""Pytest configuration and fixtures for CSV Insight tests."""

import pytest

from csv_insight.api.sessions import get_session_store
from csv_insight.core.dataset import Dataset


@pytest.fixture
def sample_csv() -> bytes:
    """Return a small CSV with numeric, text and sparse columns."""
    return (
        b"id,score,city,weight\n"
        b"1,1,London,70.5\n"
        b"2,2,Paris,\n"
        b"3,2,London,82.0\n"
        b"4,3,Berlin,NA\n"
        b"5,,London,65.25\n"
        b"6,,Paris,90\n"
    )


@pytest.fixture
def sample_dataset(sample_csv: bytes) -> Dataset:
    """Return the sample CSV parsed into a dataset."""
    return Dataset.from_csv(sample_csv)


@pytest.fixture
def sample_payload() -> dict:
    """Return an upload response payload in the headers/data shape."""
    return {
        "headers": ["x", "y", "label"],
        "data": [
            {"x": "1", "y": "2", "label": "a"},
            {"x": "2", "y": "4", "label": "b"},
            {"x": "3", "y": "5", "label": "a"},
            {"x": "4", "y": "", "label": "c"},
        ],
        "analysis": {},
    }


@pytest.fixture
def column_analysis_payload() -> dict:
    """Return a payload in the columnAnalysis shape."""
    return {
        "columnAnalysis": {
            "price": {"values": ["1.5", "2.5", "3.5"], "dataType": "FLOAT"},
            "qty": {"values": ["1", "2", "3"], "dataType": "NUMERIC"},
            "code": {"values": ["10", "20", "30"], "dataType": "TEXT"},
        }
    }


@pytest.fixture(autouse=True)
def fresh_session_store():
    """Give every test an empty session store."""
    yield get_session_store(force_new=True)
    get_session_store(force_new=True)
