"""Tests for scatter plot data."""

import pytest

from csv_insight.core.dataset import Dataset
from csv_insight.core.errors import ColumnNotFoundError
from csv_insight.visualization.options import ScatterOptions
from csv_insight.visualization.scatter import Axis, build_scatter, dataset_scatter


class TestBuildScatter:
    """Tests for pairing points."""

    def test_points_keep_row_order(self) -> None:
        """Test that points are literal pairs in source order."""
        data = build_scatter([3, 1, 2], [30, 10, 20])
        assert data.points == [(3.0, 30.0), (1.0, 10.0), (2.0, 20.0)]

    def test_incomplete_pairs_dropped(self) -> None:
        """Test that rows missing either coordinate are skipped."""
        data = build_scatter(["1", "", "3", "x"], ["2", "4", "NA", "8"])
        assert data.points == [(1.0, 2.0)]

    def test_unequal_lengths(self) -> None:
        """Test that mismatched sequences are rejected."""
        with pytest.raises(ValueError, match="same length"):
            build_scatter([1, 2], [1])

    def test_empty(self) -> None:
        """Test that no valid pairs give no points and no lines."""
        data = build_scatter(["a"], ["b"], ScatterOptions(show_mean=True))

        assert data.is_empty
        assert data.lines == []

    def test_no_lines_by_default(self) -> None:
        """Test that reference lines are opt-in."""
        assert build_scatter([1, 2], [3, 4]).lines == []


class TestReferenceLines:
    """Tests for mean/median/std reference lines."""

    @pytest.fixture
    def data(self):
        options = ScatterOptions(show_mean=True, show_median=True, show_std=True)
        return build_scatter([1, 2, 3, 4], [10, 20, 30, 100], options, "a", "b")

    def test_labels(self, data) -> None:
        """Test the full set of lines on both axes."""
        assert [line.label for line in data.lines] == [
            "X Mean", "X Median", "X Mean + Std", "X Mean - Std",
            "Y Mean", "Y Median", "Y Mean + Std", "Y Mean - Std",
        ]

    def test_vertical_lines_span_y_range(self, data) -> None:
        """Test that x lines span the observed y range."""
        x_mean = data.lines[0]
        assert x_mean.axis == Axis.X
        assert x_mean.points == ((2.5, 10.0), (2.5, 100.0))

    def test_horizontal_lines_span_x_range(self, data) -> None:
        """Test that y lines span the observed x range."""
        y_median = data.lines[5]
        assert y_median.axis == Axis.Y
        assert y_median.points == ((1.0, 25.0), (4.0, 25.0))

    def test_std_lines_symmetric(self, data) -> None:
        """Test mean ± std positions."""
        plus, minus = data.lines[2], data.lines[3]
        mean = data.lines[0].position
        assert plus.position - mean == pytest.approx(mean - minus.position)

    def test_zero_variance_axis(self) -> None:
        """Test a constant axis gives finite lines."""
        data = build_scatter([1, 1, 1], [1, 2, 3], ScatterOptions(show_std=True))
        positions = [line.position for line in data.lines if line.axis == Axis.X]
        assert positions == [1.0, 1.0]


class TestDatasetScatter:
    """Tests for building scatter data from a dataset."""

    def test_columns(self, sample_dataset: Dataset) -> None:
        """Test aligning two columns row by row."""
        data = dataset_scatter(sample_dataset, "id", "weight")

        assert data.x_column == "id"
        assert data.y_column == "weight"
        assert data.points == [(1.0, 70.5), (3.0, 82.0), (5.0, 65.25), (6.0, 90.0)]

    def test_missing_column(self, sample_dataset: Dataset) -> None:
        """Test that an unknown column raises."""
        with pytest.raises(ColumnNotFoundError):
            dataset_scatter(sample_dataset, "id", "nope")

    def test_to_dict(self, sample_dataset: Dataset) -> None:
        """Test serialisable output."""
        data = dataset_scatter(
            sample_dataset, "id", "score", ScatterOptions(show_mean=True)
        ).to_dict()

        assert data["points"][0] == {"x": 1.0, "y": 1.0}
        assert [line["label"] for line in data["lines"]] == ["X Mean", "Y Mean"]
