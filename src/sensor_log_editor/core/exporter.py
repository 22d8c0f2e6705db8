"""Export of edited series back to the device text format.

An exported file is the original header text, unchanged, followed by one
``timestamp;z;x;y`` line per working sample. Cuts applied to the series are
therefore reflected in the output while the header keeps its column names.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from loguru import logger

from sensor_log_editor.config.settings import ExportConfig
from sensor_log_editor.core.record_decoder import FIELD_DELIMITER, format_channel_value
from sensor_log_editor.core.series import EditableSeries
from sensor_log_editor.core.timestamps import format_timestamps

_INVALID_FILE_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_file_name(name: str | None) -> str:
    """Replace characters that are not allowed in file names with underscores."""
    return _INVALID_FILE_NAME_CHARS.sub("_", name or "")


def format_working_lines(
    series: EditableSeries,
    start: int | None = None,
    end: int | None = None,
    delimiter: str = FIELD_DELIMITER,
) -> list[str]:
    """Render working samples as ``timestamp;z;x;y`` lines.

    Channel values are written as they appeared in the source file when the
    series carries its channel text, otherwise in positional notation.

    Args:
        series: Series to render
        start: First working index (inclusive, default 0)
        end: Last working index (inclusive, default last sample)
        delimiter: Field delimiter

    Returns:
        One line per sample, without line terminators
    """
    n = len(series)
    start = 0 if start is None else start
    end = n - 1 if end is None else end
    if n == 0 or end < start:
        return []

    window = slice(start, end + 1)
    stamps = format_timestamps(series.timestamps[window], series.header.date_format)
    if series.channel_text is not None:
        rows = series.channel_text[window]
    else:
        rows = [
            (format_channel_value(z), format_channel_value(x), format_channel_value(y))
            for z, x, y in zip(series.z[window], series.x[window], series.y[window])
        ]
    return [delimiter.join((ts, *row)) for ts, row in zip(stamps, rows)]


def _write_lines(output_path: Path, header_text: str, lines: Iterable[str], terminator: str) -> int:
    count = 0
    # newline="" so the configured terminator is written verbatim on every platform
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        if header_text:
            for header_line in header_text.split("\n"):
                f.write(header_line)
                f.write(terminator)
        for line in lines:
            f.write(line)
            f.write(terminator)
            count += 1
    return count


def _output_name(series: EditableSeries, config: ExportConfig) -> str:
    name = sanitize_file_name(series.file_name)
    return name if name.strip() else config.fallback_file_name


def export_series(
    series: EditableSeries,
    output_dir: Path | str,
    config: ExportConfig | None = None,
) -> Path:
    """Export the header and every working sample of a series.

    The output keeps the source file name (sanitized) inside output_dir.

    Args:
        series: Series to export
        output_dir: Destination directory (created if missing)
        config: Output layout (defaults to ExportConfig())

    Returns:
        Path to the created file
    """
    config = config or ExportConfig()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    output_path = output_dir / _output_name(series, config)
    count = _write_lines(output_path, series.header_text, format_working_lines(series), config.line_terminator)

    logger.info(f"Exported {series.file_name or 'series'} to {output_path} ({count} samples)")
    return output_path


def export_selection(
    series: EditableSeries,
    start_index: int,
    end_index: int,
    output_dir: Path | str,
    config: ExportConfig | None = None,
) -> Path:
    """Export the header and an inclusive range of working samples.

    Indices are clamped to the working range and swapped when reversed. The
    output file name gets the selection suffix before its extension. An empty
    series produces a file with only the header.

    Args:
        series: Series to export
        start_index: First working index
        end_index: Last working index
        output_dir: Destination directory (created if missing)
        config: Output layout (defaults to ExportConfig())

    Returns:
        Path to the created file
    """
    config = config or ExportConfig()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    name = Path(_output_name(series, config))
    suffix = name.suffix or ".txt"
    output_path = output_dir / f"{name.stem}{config.selection_suffix}{suffix}"

    n = len(series)
    lines: list[str] = []
    if n > 0:
        start = max(0, min(start_index, n - 1))
        end = max(0, min(end_index, n - 1))
        if end < start:
            start, end = end, start
        lines = format_working_lines(series, start, end)

    count = _write_lines(output_path, series.header_text, lines, config.line_terminator)
    logger.info(f"Exported selection of {series.file_name or 'series'} to {output_path} ({count} samples)")
    return output_path


def export_all(
    series_list: Iterable[EditableSeries],
    output_dir: Path | str,
    config: ExportConfig | None = None,
) -> list[Path]:
    """Export every series into output_dir, one after another.

    Returns:
        Paths of the created files, in input order
    """
    return [export_series(series, output_dir, config) for series in series_list]
