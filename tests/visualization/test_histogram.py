"""Tests for histogram binning."""

import json
import math

import numpy as np
import pytest

from csv_insight.core.dataset import Dataset
from csv_insight.core.errors import ColumnNotFoundError
from csv_insight.visualization.histogram import (
    Bin,
    bin_count,
    bin_index,
    bin_width,
    build_histogram,
    dataset_histogram,
)
from csv_insight.visualization.options import HistogramOptions


class TestBinCount:
    """Tests for the bin count rule."""

    @pytest.mark.parametrize(
        "n, expected",
        [(0, 10), (1, 10), (4, 10), (100, 10), (101, 11), (400, 20), (2500, 50), (10000, 50)],
    )
    def test_clamped_sqrt(self, n: int, expected: int) -> None:
        """Test ceil(sqrt(n)) clamped to [10, 50]."""
        assert bin_count(n) == expected

    def test_custom_bounds(self) -> None:
        """Test explicit min/max bin bounds."""
        assert bin_count(4, min_bins=1, max_bins=5) == 2


class TestBinAssignment:
    """Tests for assigning values to bins."""

    def test_max_value_lands_in_last_bin(self) -> None:
        """Test that the maximum is clamped into the last bin."""
        assert bin_index(10.0, 0.0, 1.0, 10) == 9

    def test_zero_width(self) -> None:
        """Test that constant columns map to bin 0."""
        assert bin_index(5.0, 5.0, 0.0, 10) == 0

    def test_edges_are_half_open(self) -> None:
        """Test that an inner edge belongs to the bin on its right."""
        assert bin_index(3.0, 0.0, 1.0, 10) == 3
        assert bin_index(2.999, 0.0, 1.0, 10) == 2
        assert Bin(start=0.0, width=1.0).end == 1.0

    def test_overflowing_range(self) -> None:
        """Test assignment when max - min is too large for a float."""
        lo, hi = -(2.0**1023), 2.0**1023
        width = bin_width(lo, hi, 8)

        assert width == 2.0**1021
        assert bin_index(lo, lo, width, 8) == 0
        assert bin_index(0.0, lo, width, 8) == 4
        assert bin_index(hi, lo, width, 8) == 7
        assert bin_width(-1.5e308, 1.5e308, 1) == 0.0


class TestBuildHistogram:
    """Tests for histogram construction."""

    def test_constant_column(self) -> None:
        """Test that a constant column lands in a single bin."""
        hist = build_histogram([5, 5, 5, 5])

        assert len(hist.bins) == 10
        assert hist.counts[0] == 4
        assert sum(hist.counts[1:]) == 0
        assert hist.total == 4

    def test_frequencies_sum_to_valid_count(self) -> None:
        """Test that every value lands in exactly one bin."""
        rng = np.random.default_rng(7)
        for size in (1, 9, 100, 1000, 3000):
            values = list(rng.exponential(3.0, size))
            hist = build_histogram(values)

            assert hist.total == size
            assert len(hist.bins) == bin_count(size)

    def test_boundary_values_counted(self) -> None:
        """Test that min and max are both counted."""
        hist = build_histogram([0.0, 10.0])

        assert hist.counts[0] == 1
        assert hist.counts[-1] == 1
        assert hist.total == 2

    def test_non_finite_values_dropped(self) -> None:
        """Test that NaN and infinity are ignored."""
        hist = build_histogram([1.0, math.nan, 2.0, math.inf])
        assert hist.total == 2

    def test_empty_input(self) -> None:
        """Test that no values give no bins."""
        hist = build_histogram([])

        assert hist.is_empty
        assert hist.total == 0
        assert hist.overlays == []

    def test_labels_are_left_edges(self) -> None:
        """Test label formatting to two decimals."""
        hist = build_histogram([float(i) for i in range(11)])

        assert hist.labels[0] == "0.00"
        assert hist.labels[1] == "1.00"
        assert len(hist.labels) == len(hist.counts)

    def test_no_overlays_by_default(self) -> None:
        """Test that overlays are opt-in."""
        assert build_histogram([1, 2, 3]).overlays == []

    def test_range_wider_than_float_max(self) -> None:
        """Test binning a column whose max - min overflows."""
        options = HistogramOptions(show_mean=True, show_median=True, show_std=True)
        hist = build_histogram([-1e308, 0.0, 1e308], options)

        starts = [b.start for b in hist.bins]
        assert hist.total == 3
        assert hist.counts[0] == 1
        assert hist.counts[-1] == 1
        assert all(math.isfinite(s) for s in starts)
        assert starts == sorted(starts)
        json.dumps(hist.to_dict(), allow_nan=False)


class TestOverlayMarkers:
    """Tests for mean/median/std marker series."""

    @pytest.fixture
    def values(self) -> list[float]:
        return [float(i) for i in range(11)]

    def test_mean_marker(self, values: list[float]) -> None:
        """Test the mean marker sits in the mean's bin at max height."""
        hist = build_histogram(values, HistogramOptions(show_mean=True))

        (marker,) = hist.overlays
        peak = max(hist.counts)
        assert marker.label == "Mean"
        assert marker.positions == (5.0,)
        assert marker.values[5] == peak
        assert sum(1 for v in marker.values if v) == 1

    def test_all_markers(self, values: list[float]) -> None:
        """Test mean, median and mean ± std markers together."""
        options = HistogramOptions(show_mean=True, show_median=True, show_std=True)
        hist = build_histogram(values, options)

        labels = [o.label for o in hist.overlays]
        assert labels == ["Mean", "Median", "Mean ± Std"]

        std_marker = hist.overlays[2]
        assert len(std_marker.positions) == 2
        assert sum(1 for v in std_marker.values if v) == 2
        assert all(len(o.values) == len(hist.bins) for o in hist.overlays)

    def test_marker_outside_range_is_dropped(self) -> None:
        """Test that mean ± std beyond the data range marks no bin."""
        hist = build_histogram([0.0, 0.0, 0.0, 10.0], HistogramOptions(show_std=True))

        (marker,) = hist.overlays
        low, high = marker.positions
        assert low < 0.0
        assert sum(1 for v in marker.values if v) == 1

    def test_marker_on_bin_edge(self) -> None:
        """Test that a marker on an inner edge uses the same bin as the counts."""
        hist = build_histogram([0.0, 2.0, 4.0, 10.0], HistogramOptions(show_median=True))

        (marker,) = hist.overlays
        assert marker.positions == (3.0,)
        assert marker.values[3] == max(hist.counts)
        assert marker.values[2] == 0

    def test_constant_column_markers(self) -> None:
        """Test markers on a zero-width histogram hit only bin 0."""
        options = HistogramOptions(show_mean=True, show_median=True, show_std=True)
        hist = build_histogram([5, 5, 5, 5], options)

        for marker in hist.overlays:
            assert marker.values[0] == 4
            assert sum(marker.values[1:]) == 0


class TestDatasetHistogram:
    """Tests for building a histogram from a dataset column."""

    def test_column(self, sample_dataset: Dataset) -> None:
        """Test that missing cells are excluded."""
        hist = dataset_histogram(sample_dataset, "weight")

        assert hist.column == "weight"
        assert hist.total == 4

    def test_missing_column(self, sample_dataset: Dataset) -> None:
        """Test that an unknown column raises."""
        with pytest.raises(ColumnNotFoundError):
            dataset_histogram(sample_dataset, "nope")

    def test_to_dict(self, sample_dataset: Dataset) -> None:
        """Test serialisable output."""
        data = dataset_histogram(
            sample_dataset, "score", HistogramOptions(show_median=True)
        ).to_dict()

        assert data["total"] == 4
        assert data["overlays"][0]["label"] == "Median"
        assert len(data["labels"]) == len(data["counts"])
