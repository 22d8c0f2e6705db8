"""Translation of user selections into cuts on an EditableSeries.

A selection is a (min, max) pair in index space or time space. The CUT policy
removes the selected interior; KEEP removes everything outside it.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Sequence

from loguru import logger

from sensor_log_editor.core.series import EditableSeries, is_empty_range


class EditPolicy(Enum):
    """What a selection means to the edit."""

    CUT = "cut"  # Remove [min, max]
    KEEP = "keep"  # Remove everything outside [min, max]


class SelectionSpace(Enum):
    """Coordinate space of a selection."""

    INDEX = "index"
    TIME = "time"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def selection_to_index_range(
    series: EditableSeries,
    lo: Any,
    hi: Any,
    space: SelectionSpace = SelectionSpace.INDEX,
) -> tuple[int, int] | None:
    """Turn a selection into a clamped inclusive working-index range.

    Reversed bounds are swapped. Fractional index bounds widen outwards
    (floor/ceil). Time selections go through the series timestamp lookup.

    Returns:
        (start, end) inclusive, or None when the selection matches no samples
    """
    n = len(series)
    if n == 0:
        return None

    if space is SelectionSpace.TIME:
        if hi < lo:
            lo, hi = hi, lo
        index_range = series.get_index_range_for_timestamp_range(lo, hi)
        if is_empty_range(index_range):
            return None
        return index_range

    lo_f, hi_f = float(lo), float(hi)
    if math.isnan(lo_f) or math.isnan(hi_f):
        return None
    if hi_f < lo_f:
        lo_f, hi_f = hi_f, lo_f

    start = _clamp(int(math.floor(lo_f)), 0, n - 1)
    end = _clamp(int(math.ceil(hi_f)), 0, n - 1)
    return start, end


def map_selection(
    series: EditableSeries,
    lo: Any,
    hi: Any,
    policy: EditPolicy = EditPolicy.CUT,
    space: SelectionSpace = SelectionSpace.INDEX,
) -> list[tuple[int, int]]:
    """Compute the cut ranges for a selection, in the order they must be applied.

    For KEEP the tail range comes before the head range: removing the head
    first would shift every later index and invalidate the tail bounds.

    Args:
        series: Series the selection was made on
        lo: Selection lower bound
        hi: Selection upper bound
        policy: CUT or KEEP
        space: INDEX or TIME

    Returns:
        List of inclusive (start, end) working-index ranges (possibly empty)
    """
    index_range = selection_to_index_range(series, lo, hi, space)
    if index_range is None:
        return []

    start, end = index_range
    if policy is EditPolicy.CUT:
        return [(start, end)]

    last = len(series) - 1
    ranges = []
    if end < last:
        ranges.append((end + 1, last))
    if start > 0:
        ranges.append((0, start - 1))
    return ranges


def apply_selection(
    series: EditableSeries,
    lo: Any,
    hi: Any,
    policy: EditPolicy = EditPolicy.CUT,
    space: SelectionSpace = SelectionSpace.INDEX,
) -> int:
    """Apply a selection to a series.

    Returns:
        Number of samples removed
    """
    removed = 0
    for start, end in map_selection(series, lo, hi, policy, space):
        removed += series.cut_range(start, end)

    logger.info(
        f"{policy.value.upper()} selection [{lo}, {hi}] ({space.value}) on "
        f"{series.file_name or 'series'}: removed {removed}, {len(series)} remaining"
    )
    return removed


def apply_selection_to_all(
    series_list: Sequence[EditableSeries],
    lo: Any,
    hi: Any,
    policy: EditPolicy = EditPolicy.CUT,
    space: SelectionSpace = SelectionSpace.INDEX,
) -> list[int]:
    """Apply the same selection to every series, one after another.

    Each series clamps the selection against its own working length, so files
    of different lengths receive different concrete ranges.

    Returns:
        Samples removed per series, in input order
    """
    return [apply_selection(series, lo, hi, policy, space) for series in series_list]


def apply_trim_to_all(series_list: Sequence[EditableSeries], head_count: int, tail_count: int) -> list[int]:
    """Trim the same number of leading and trailing samples from every series.

    Trims are counted from each end of each file, so files of different
    lengths stay aligned on their first and last kept samples. The tail is
    removed before the head so head removal cannot shift the tail bounds.

    Args:
        series_list: Series to edit, processed one after another
        head_count: Leading samples to remove from each series
        tail_count: Trailing samples to remove from each series

    Returns:
        Samples removed per series, in input order
    """
    if head_count < 0 or tail_count < 0:
        raise ValueError(f"trim counts must be >= 0, got head={head_count}, tail={tail_count}")

    results = []
    for series in series_list:
        removed = 0
        n = len(series)
        if tail_count > 0 and n > 0:
            removed += series.cut_range(max(0, n - tail_count), n - 1)
        if head_count > 0 and len(series) > 0:
            removed += series.cut_range(0, head_count - 1)
        results.append(removed)

        logger.debug(
            f"Trimmed head={head_count}, tail={tail_count} from {series.file_name or 'series'}: "
            f"removed {removed}, {len(series)} remaining"
        )

    return results
