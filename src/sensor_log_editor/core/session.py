"""In-memory set of files open for editing.

Holds one EditableSeries per imported file for the lifetime of the process.
Nothing is written to disk; closing the session discards all edits.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from loguru import logger

from sensor_log_editor.core.series import EditableSeries


def _path_key(series: EditableSeries) -> str | None:
    if series.source_path is None:
        return None
    return str(series.source_path.absolute()).casefold()


class EditSession:
    """Ordered collection of open series, one per source file.

    Files are identified by path, case-insensitively; adding a file that is
    already open is ignored. Series imported from in-memory text have no path
    and are always added.
    """

    def __init__(self):
        self._series: list[EditableSeries] = []

    def __len__(self) -> int:
        return len(self._series)

    def __iter__(self) -> Iterator[EditableSeries]:
        return iter(self._series)

    def __getitem__(self, index: int) -> EditableSeries:
        return self._series[index]

    @property
    def series(self) -> list[EditableSeries]:
        """Open series in the order they were added (a copy)."""
        return list(self._series)

    def contains_path(self, path: Path | str) -> bool:
        """True when a series for this path is already open."""
        key = str(Path(path).absolute()).casefold()
        return any(_path_key(s) == key for s in self._series)

    def add(self, series: EditableSeries) -> bool:
        """Add a series unless its file is already open.

        Returns:
            True if the series was added
        """
        key = _path_key(series)
        if key is not None and any(_path_key(s) == key for s in self._series):
            logger.debug(f"Skipping duplicate file: {series.source_path}")
            return False

        self._series.append(series)
        logger.info(f"Opened {series.file_name or 'in-memory series'} ({len(series)} samples)")
        return True

    def add_all(self, series_list: Iterable[EditableSeries]) -> int:
        """Add several series, skipping duplicates.

        Returns:
            Number of series added
        """
        return sum(1 for series in series_list if self.add(series))

    def remove(self, series: EditableSeries) -> None:
        """Close a series and drop its edits.

        Raises:
            ValueError: If the series is not open
        """
        for i, open_series in enumerate(self._series):
            if open_series is series:
                del self._series[i]
                logger.info(f"Closed {series.file_name or 'in-memory series'}")
                return
        raise ValueError(f"Series is not open in this session: {series!r}")

    def clear(self) -> None:
        """Close every series."""
        count = len(self._series)
        self._series.clear()
        logger.info(f"Closed {count} series")

    def find(self, path: Path | str) -> EditableSeries | None:
        """Get the open series for a path, or None."""
        key = str(Path(path).absolute()).casefold()
        for series in self._series:
            if _path_key(series) == key:
                return series
        return None
