"""Tests for descriptive statistics."""

import math

import numpy as np
import pytest

from csv_insight.analysis.statistics import (
    CategoricalSummary,
    NumericSummary,
    TopValue,
    analysis_payload,
    compute_mean,
    compute_median,
    compute_std_dev,
    format_stat,
    summarize_categorical,
    summarize_column,
    summarize_dataset,
    summarize_numeric,
    top_values,
)
from csv_insight.core.dataset import ColumnType, Dataset


class TestBasicStatistics:
    """Tests for mean, median and standard deviation."""

    def test_median_even_length_averages(self) -> None:
        """Test that even-length input averages the central pair."""
        assert compute_median([4, 1, 3, 2]) == 2.5

    def test_median_odd_length(self) -> None:
        """Test the single central element on odd length."""
        assert compute_median([3, 1, 2]) == 2.0

    def test_population_std_dev(self) -> None:
        """Test that standard deviation divides by n."""
        assert compute_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_empty_gives_nan(self) -> None:
        """Test the NaN sentinel for empty input."""
        assert math.isnan(compute_mean([]))
        assert math.isnan(compute_median([]))
        assert math.isnan(compute_std_dev([]))

    def test_invariants_on_random_data(self) -> None:
        """Test ordering invariants across random samples."""
        rng = np.random.default_rng(42)
        for size in (1, 2, 7, 50, 501):
            values = list(rng.normal(10, 5, size))
            summary = summarize_numeric(values)

            assert summary.std_dev >= 0
            assert summary.min <= summary.median <= summary.max
            assert summary.min <= summary.mean <= summary.max

    def test_mean_stays_in_range_for_constant_data(self) -> None:
        """Test that rounding does not push the mean past the max."""
        values = [0.1] * 10
        assert compute_mean(values) <= max(values)


class TestNumericSummary:
    """Tests for numeric column summaries."""

    def test_mixed_column(self) -> None:
        """Test counts and statistics with missing values."""
        summary = summarize_column([1, 2, 2, 3, None, ""], "score")

        assert isinstance(summary, NumericSummary)
        assert summary.count == 6
        assert summary.null_count == 2
        assert summary.mean == 2.0
        assert summary.median == 2.0
        assert summary.std_dev == pytest.approx(0.7071, abs=1e-4)
        assert summary.min == 1
        assert summary.max == 3

    def test_na_literal_is_missing(self) -> None:
        """Test that the literal NA counts as missing."""
        summary = summarize_numeric(["1", "NA", "3"])
        assert summary.null_count == 1
        assert summary.mean == 2.0

    def test_empty_numeric_subset(self) -> None:
        """Test that no numeric values give NaN statistics."""
        summary = summarize_numeric(["", None], "empty")

        assert summary.count == 2
        assert summary.null_count == 2
        assert not summary.has_values
        assert math.isnan(summary.mean)

    def test_to_dict_uses_payload_keys(self) -> None:
        """Test camelCase keys and None for undefined statistics."""
        data = summarize_numeric([], "x").to_dict()

        assert set(data) == {"count", "nullCount", "mean", "median", "stdDev", "min", "max"}
        assert data["mean"] is None

    def test_format_for_display(self) -> None:
        """Test human-readable output."""
        text = summarize_numeric([1, 2, 3], "score").format_for_display()
        assert "score" in text
        assert "Mean: 2.00" in text


class TestCategoricalSummary:
    """Tests for text column summaries."""

    def test_top_values(self) -> None:
        """Test unique count and ranked values."""
        summary = summarize_column(["a", "b", "a", "a", "c"], "letter")

        assert isinstance(summary, CategoricalSummary)
        assert summary.count == 5
        assert summary.null_count == 0
        assert summary.unique_count == 3
        assert summary.top_values == (
            TopValue("a", 3),
            TopValue("b", 1),
            TopValue("c", 1),
        )

    def test_ties_keep_first_seen_order(self) -> None:
        """Test tie-breaking by first occurrence."""
        ranked = top_values(["c", "b", "a", "b", "c", "a", "d"])
        assert [tv.value for tv in ranked] == ["c", "b", "a", "d"]

    def test_top_k_truncation(self) -> None:
        """Test the top-K limit."""
        values = list("abcdefghij")
        assert len(top_values(values, top_k=3)) == 3
        assert len(top_values(values)) == 5

    def test_counts_bounded_by_present_values(self) -> None:
        """Test that top counts never exceed the non-missing total."""
        values = ["x", "", "y", None, "x", "NA", "z", "x", "y"]
        summary = summarize_categorical(values, top_k=2)

        present = summary.count - summary.null_count
        counts = [tv.count for tv in summary.top_values]
        assert sum(counts) <= present
        assert counts == sorted(counts, reverse=True)
        assert summary.null_count == 3

    def test_to_dict(self) -> None:
        """Test payload keys for text summaries."""
        data = summarize_categorical(["a", "a", "b"]).to_dict()
        assert data["uniqueCount"] == 2
        assert data["topValues"][0] == {"value": "a", "count": 2}


class TestSummarizeDataset:
    """Tests for whole-dataset summaries."""

    def test_header_order_and_types(self, sample_dataset: Dataset) -> None:
        """Test that summaries follow header order and dataset types."""
        summaries = summarize_dataset(sample_dataset)

        assert list(summaries) == ["id", "score", "city", "weight"]
        assert summaries["score"].is_numeric
        assert not summaries["city"].is_numeric
        assert summaries["weight"].null_count == 2
        assert summaries["city"].top_values[0] == TopValue("London", 3)

    def test_forced_type_is_respected(self) -> None:
        """Test that the dataset's column type drives the summary."""
        dataset = Dataset(["code"], [{"code": "1"}, {"code": "2"}],
                          column_types={"code": ColumnType.CATEGORICAL})
        summary = summarize_dataset(dataset)["code"]
        assert isinstance(summary, CategoricalSummary)

    def test_analysis_payload(self, sample_dataset: Dataset) -> None:
        """Test the upload response analysis mapping."""
        payload = analysis_payload(summarize_dataset(sample_dataset))
        assert payload["score"]["mean"] == 2.0
        assert "uniqueCount" in payload["city"]


class TestFormatStat:
    """Tests for display formatting."""

    def test_format(self) -> None:
        assert format_stat(2.0) == "2.00"
        assert format_stat(1 / 3, digits=3) == "0.333"

    def test_undefined(self) -> None:
        assert format_stat(math.nan) == "N/A"
        assert format_stat(math.inf) == "N/A"
