"""Tests for selection mapping and cut/keep policies."""
import numpy as np
import pytest

from sensor_log_editor.core.importer import import_text
from sensor_log_editor.core.range_mapper import (
    EditPolicy,
    SelectionSpace,
    apply_selection,
    apply_selection_to_all,
    apply_trim_to_all,
    map_selection,
    selection_to_index_range,
)


def ts(text):
    return np.datetime64(text, "ns")


class TestSelectionToIndexRange:
    def test_plain(self, ramp_series):
        assert selection_to_index_range(ramp_series, 2, 5) == (2, 5)

    def test_swapped(self, ramp_series):
        assert selection_to_index_range(ramp_series, 5, 2) == (2, 5)

    def test_fractional_bounds_widen(self, ramp_series):
        assert selection_to_index_range(ramp_series, 2.4, 5.2) == (2, 6)

    def test_clamped(self, ramp_series):
        assert selection_to_index_range(ramp_series, -10, 100) == (0, 9)

    def test_nan_bound(self, ramp_series):
        assert selection_to_index_range(ramp_series, float("nan"), 3) is None

    def test_time_space(self, ramp_series):
        result = selection_to_index_range(
            ramp_series, ts("2024-01-01T00:00:00.020"), ts("2024-01-01T00:00:00.040"), SelectionSpace.TIME
        )
        assert result == (2, 4)

    def test_time_space_reversed(self, ramp_series):
        result = selection_to_index_range(
            ramp_series, ts("2024-01-01T00:00:00.040"), ts("2024-01-01T00:00:00.020"), SelectionSpace.TIME
        )
        assert result == (2, 4)

    def test_time_space_no_match(self, ramp_series):
        result = selection_to_index_range(
            ramp_series, ts("2030-01-01"), ts("2030-01-02"), SelectionSpace.TIME
        )
        assert result is None


class TestMapSelection:
    """Tests for the ranges produced by each policy."""

    def test_cut(self, ramp_series):
        assert map_selection(ramp_series, 3, 6, EditPolicy.CUT) == [(3, 6)]

    def test_keep_tail_before_head(self, ramp_series):
        """Test that KEEP removes the higher tail range before the head range."""
        assert map_selection(ramp_series, 3, 6, EditPolicy.KEEP) == [(7, 9), (0, 2)]

    def test_keep_from_start(self, ramp_series):
        assert map_selection(ramp_series, 0, 6, EditPolicy.KEEP) == [(7, 9)]

    def test_keep_to_end(self, ramp_series):
        assert map_selection(ramp_series, 3, 9, EditPolicy.KEEP) == [(0, 2)]

    def test_keep_everything(self, ramp_series):
        assert map_selection(ramp_series, 0, 9, EditPolicy.KEEP) == []

    def test_empty_series(self, log_text):
        series = import_text(log_text([]))
        assert map_selection(series, 0, 5) == []


class TestApplySelection:
    def test_cut_removes_interior(self, ramp_series):
        removed = apply_selection(ramp_series, 3, 6, EditPolicy.CUT)
        assert removed == 4
        np.testing.assert_array_equal(ramp_series.z, [0, 1, 2, 7, 8, 9])

    def test_keep_leaves_interior(self, ramp_series):
        removed = apply_selection(ramp_series, 3, 6, EditPolicy.KEEP)
        assert removed == 6
        np.testing.assert_array_equal(ramp_series.z, [3, 4, 5, 6])
        assert ramp_series.removed_ranges == [(7, 9), (0, 2)]

    def test_keep_in_time_space(self, ramp_series):
        apply_selection(
            ramp_series,
            ts("2024-01-01T00:00:00.010"),
            ts("2024-01-01T00:00:00.030"),
            EditPolicy.KEEP,
            SelectionSpace.TIME,
        )
        np.testing.assert_array_equal(ramp_series.z, [1, 2, 3])

    def test_no_match_removes_nothing(self, ramp_series):
        removed = apply_selection(ramp_series, ts("2030-01-01"), ts("2030-01-02"), space=SelectionSpace.TIME)
        assert removed == 0
        assert len(ramp_series) == 10


class TestApplyToAll:
    """Tests for cross-file edits with differing lengths."""

    @pytest.fixture
    def series_pair(self, log_text, ramp):
        return [
            import_text(log_text(ramp(10)), source_path="a.txt"),
            import_text(log_text(ramp(5)), source_path="b.txt"),
        ]

    def test_selection_clamped_per_file(self, series_pair):
        removed = apply_selection_to_all(series_pair, 3, 7, EditPolicy.CUT)
        assert removed == [5, 2]
        np.testing.assert_array_equal(series_pair[0].z, [0, 1, 2, 8, 9])
        np.testing.assert_array_equal(series_pair[1].z, [0, 1, 2])

    def test_keep_per_file(self, series_pair):
        apply_selection_to_all(series_pair, 1, 3, EditPolicy.KEEP)
        np.testing.assert_array_equal(series_pair[0].z, [1, 2, 3])
        np.testing.assert_array_equal(series_pair[1].z, [1, 2, 3])

    def test_trim_counts_from_each_end(self, series_pair):
        removed = apply_trim_to_all(series_pair, head_count=1, tail_count=2)
        assert removed == [3, 3]
        np.testing.assert_array_equal(series_pair[0].z, [1, 2, 3, 4, 5, 6, 7])
        np.testing.assert_array_equal(series_pair[1].z, [1, 2])

    def test_trim_longer_than_file(self, series_pair):
        apply_trim_to_all(series_pair, head_count=0, tail_count=7)
        assert len(series_pair[0]) == 3
        assert len(series_pair[1]) == 0

    def test_trim_negative_fails(self, series_pair):
        with pytest.raises(ValueError, match="must be >= 0"):
            apply_trim_to_all(series_pair, head_count=-1, tail_count=0)
