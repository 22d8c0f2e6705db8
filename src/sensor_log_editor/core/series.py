"""Editable working copy of one imported accelerometer log.

The series keeps the imported samples untouched and applies cuts to a working
copy. Channel and timestamp arrays are rebuilt after every mutation so they
stay parallel to the working set.
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
from loguru import logger

from sensor_log_editor.core.data_models import (
    CHANNEL_NAMES,
    SAMPLE_DTYPE,
    DecodeStats,
    SensorHeader,
    SensorType,
    TimestampedSample,
)

# Returned by get_index_range_for_timestamp_range when nothing matches.
# Callers must check for it before passing the pair to cut_range.
EMPTY_RANGE = (0, -1)


def is_empty_range(index_range: tuple[int, int]) -> bool:
    """True when an inclusive index pair selects nothing."""
    return index_range[1] < index_range[0]


def _to_datetime64(value: Any) -> np.datetime64:
    if isinstance(value, np.datetime64):
        return value.astype("datetime64[ns]")
    return np.datetime64(value, "ns")


class EditableSeries:
    """Working state of one imported file.

    Cuts are expressed as inclusive index ranges into the *current* working
    set. removed_ranges records them in that space, so a recorded range refers
    to the working state at the time it was applied, not to file positions.
    original_indices tracks which file position every surviving sample came
    from, giving an order-independent view of the edit history.

    Instances are not thread-safe; cuts on one series must be serialized.

    Attributes:
        header: Parsed device header
        header_text: Header lines up to and including the column-title line
        working: Structured array (SAMPLE_DTYPE) of the samples still present
        removed_ranges: Applied cuts, inclusive, in pre-removal working space
        original_indices: File position of every working sample
        z, x, y: Channel arrays parallel to working
        timestamps: datetime64[ns] array parallel to working
        channel_text: (n, 3) source text of the Z, X, Y fields parallel to
            working, or None when the series was built without it
    """

    def __init__(
        self,
        records: np.ndarray,
        header: SensorHeader,
        header_text: str = "",
        source_path: Path | str | None = None,
        size_bytes: int = 0,
        decode_stats: DecodeStats | None = None,
        channel_text: np.ndarray | None = None,
    ):
        """Initialize the series from reconstructed samples.

        Args:
            records: Structured array of SAMPLE_DTYPE in file order
            header: Parsed device header
            header_text: Raw header text, kept verbatim for export
            source_path: File the samples were read from (None for in-memory text)
            size_bytes: Size of the source file
            decode_stats: Counters from decoding the data section
            channel_text: (n, 3) array with the Z, X, Y source text of every
                record, or None to export formatted floats

        Raises:
            TypeError: If records is not a SAMPLE_DTYPE array
            ValueError: If channel_text does not have one row per record
        """
        if not isinstance(records, np.ndarray) or records.dtype != SAMPLE_DTYPE:
            raise TypeError(f"records must be an ndarray of SAMPLE_DTYPE, got {getattr(records, 'dtype', type(records).__name__)}")
        if channel_text is not None:
            channel_text = np.asarray(channel_text, dtype=object)
            if channel_text.shape != (len(records), 3):
                raise ValueError(f"channel_text must have shape ({len(records)}, 3), got {channel_text.shape}")
            channel_text = channel_text.copy()
            channel_text.flags.writeable = False
        self._original_text = channel_text

        self.header = header
        self.header_text = header_text
        self.source_path = Path(source_path) if source_path is not None else None
        self.size_bytes = size_bytes
        self.decode_stats = decode_stats or DecodeStats()
        self.imported_at = datetime.now(timezone.utc)

        self._original = records.copy()
        self._original.flags.writeable = False

        self.working: np.ndarray = self._original.copy()
        self.original_indices: np.ndarray = np.arange(len(self._original), dtype=np.int64)
        self.removed_ranges: list[tuple[int, int]] = []

        self._rebuild()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def _rebuild(self) -> None:
        """Rebuild channel/timestamp arrays and the bottom-cut sentinel from working."""
        self.z = np.ascontiguousarray(self.working["z"])
        self.x = np.ascontiguousarray(self.working["x"])
        self.y = np.ascontiguousarray(self.working["y"])
        self.timestamps = np.ascontiguousarray(self.working["timestamp"])
        self.channel_text = None if self._original_text is None else self._original_text[self.original_indices]
        self.bottom_cut_sentinel = len(self.working) + 1

    @property
    def original(self) -> np.ndarray:
        """Read-only samples as imported."""
        return self._original

    @property
    def num_samples(self) -> int:
        """Number of samples in the working set."""
        return len(self.working)

    @property
    def num_original_samples(self) -> int:
        """Number of samples imported from the file."""
        return len(self._original)

    @property
    def file_name(self) -> str:
        """Name of the source file (empty for in-memory imports)."""
        return self.source_path.name if self.source_path is not None else ""

    @property
    def sensor_type(self) -> SensorType:
        """Device family detected from the header."""
        return self.header.sensor_type

    @property
    def start_time(self) -> np.datetime64:
        """Time origin used for seconds-based X positions."""
        if self.header.date is not None:
            return np.datetime64(self.header.date, "ns")
        if len(self._original) > 0:
            return self._original["timestamp"][0]
        return np.datetime64("NaT", "ns")

    @property
    def duration(self) -> float:
        """Seconds between the first and last working sample."""
        if len(self.working) < 2:
            return 0.0
        return float((self.timestamps[-1] - self.timestamps[0]) / np.timedelta64(1, "s"))

    @property
    def is_cut(self) -> bool:
        """True once any cut has been applied since import or the last reset."""
        return bool(self.removed_ranges)

    def __len__(self) -> int:
        return len(self.working)

    def __getitem__(self, index: int) -> TimestampedSample:
        return TimestampedSample.from_record(self.working[index])

    def __repr__(self) -> str:
        return (
            f"EditableSeries(file={self.file_name!r}, samples={len(self.working)}/"
            f"{len(self._original)}, cuts={len(self.removed_ranges)})"
        )

    def channel(self, name: str) -> np.ndarray:
        """Get a channel array by name ("z", "x" or "y").

        Raises:
            KeyError: If name is not a channel
        """
        name = name.lower()
        if name not in CHANNEL_NAMES:
            raise KeyError(f"Unknown channel: {name!r}. Available: {list(CHANNEL_NAMES)}")
        return getattr(self, name)

    def x_positions(self, space: str = "index") -> np.ndarray:
        """X coordinates of the working samples for plotting.

        Args:
            space: "index" for working-set positions, "time" for seconds since start_time

        Returns:
            Float array parallel to working
        """
        if space == "index":
            return np.arange(len(self.working), dtype=np.float64)
        if space == "time":
            return (self.timestamps - self.start_time) / np.timedelta64(1, "s")
        raise ValueError(f"space must be 'index' or 'time', got {space!r}")

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def cut_range(self, start_idx: int, end_idx: int) -> int:
        """Remove the inclusive working-index range [start_idx, end_idx].

        No-op when end_idx < start_idx or start_idx is past the end. Indices
        are clamped into the working range otherwise.

        Args:
            start_idx: First working index to remove
            end_idx: Last working index to remove

        Returns:
            Number of samples removed
        """
        n = len(self.working)
        if end_idx < start_idx or start_idx >= n or n == 0:
            logger.debug(f"cut_range({start_idx}, {end_idx}) ignored, working length {n}")
            return 0

        start = max(0, min(int(start_idx), n - 1))
        end = max(0, min(int(end_idx), n - 1))
        if end < start:
            return 0

        removed = np.arange(start, end + 1)
        self.working = np.delete(self.working, removed)
        self.original_indices = np.delete(self.original_indices, removed)
        self.removed_ranges.append((start, end))
        self._rebuild()

        logger.debug(
            f"Cut [{start}, {end}] from {self.file_name or 'series'}: "
            f"{len(removed)} removed, {len(self.working)} remaining"
        )
        return len(removed)

    def reset_cuts(self) -> None:
        """Restore the working set to the imported samples and clear the cut history."""
        self.working = self._original.copy()
        self.original_indices = np.arange(len(self._original), dtype=np.int64)
        self.removed_ranges.clear()
        self._rebuild()
        logger.debug(f"Reset cuts on {self.file_name or 'series'}")

    def removed_original_ranges(self) -> list[tuple[int, int]]:
        """Removed samples as merged inclusive ranges of file positions.

        Unlike removed_ranges this does not depend on the order cuts were applied.
        """
        removed = np.setdiff1d(
            np.arange(len(self._original), dtype=np.int64),
            self.original_indices,
            assume_unique=True,
        )
        if removed.size == 0:
            return []

        breaks = np.where(np.diff(removed) != 1)[0]
        starts = np.concatenate(([removed[0]], removed[breaks + 1]))
        ends = np.concatenate((removed[breaks], [removed[-1]]))
        return [(int(s), int(e)) for s, e in zip(starts, ends)]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_index_range_for_timestamp_range(self, start: Any, end: Any) -> tuple[int, int]:
        """Translate a time window into an inclusive working-index range.

        Scans timestamps in working order and stops at the first timestamp
        past end. The first index with timestamp >= start opens the range;
        the last index before the stop closes it.

        Args:
            start: Window start (datetime, numpy datetime64, pandas Timestamp or ISO text)
            end: Window end

        Returns:
            (s, e) inclusive, or EMPTY_RANGE when nothing matches
        """
        n = len(self.timestamps)
        if n == 0:
            return EMPTY_RANGE

        t_start = _to_datetime64(start)
        t_end = _to_datetime64(end)

        past_end = self.timestamps > t_end
        stop = int(np.argmax(past_end)) if past_end.any() else n

        candidates = np.flatnonzero(self.timestamps[:stop] >= t_start)
        if candidates.size == 0:
            return EMPTY_RANGE

        s = int(candidates[0])
        e = stop - 1
        if e < s:
            return EMPTY_RANGE
        return s, e
