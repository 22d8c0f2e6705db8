"""Import of accelerometer log files into EditableSeries.

A file is a free-text device header, a column-title line starting with
"TimeStamp", then ``index;z;x;y`` rows. Each file is read fully before
parsing because the body can only be decoded once the title line is found.
Batches are processed one file at a time and a failing file never aborts the
rest of the batch.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

from loguru import logger

from sensor_log_editor.config.settings import ImportConfig
from sensor_log_editor.core.data_models import ImportBatchResult, ImportRejection, RejectionKind
from sensor_log_editor.core.exceptions import FormatRejectedError, HeaderInvalidError
from sensor_log_editor.core.header_parser import is_data_header_line, parse_header
from sensor_log_editor.core.record_decoder import channel_texts, decode_records
from sensor_log_editor.core.series import EditableSeries
from sensor_log_editor.core.timestamps import reconstruct

ProgressCallback = Callable[[int, int], None]


def split_lines(text: str) -> list[str]:
    """Split text on any line-ending convention (\\r\\n, \\r or \\n)."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def find_data_header_index(lines: list[str], token: str = "TimeStamp") -> int:
    """Find the column-title line.

    Returns:
        Index of the first line starting with token (case-insensitive), or -1
    """
    for i, line in enumerate(lines):
        if is_data_header_line(line, token):
            return i
    return -1


def import_text(
    raw_text: str,
    source_path: Path | str | None = None,
    size_bytes: int = 0,
    config: ImportConfig | None = None,
) -> EditableSeries:
    """Parse the full text of a log file into an EditableSeries.

    Args:
        raw_text: Whole file content (a leading BOM is tolerated)
        source_path: Path the text came from, kept on the series for export
        size_bytes: Size of the source file
        config: Input dialect (defaults to ImportConfig())

    Returns:
        EditableSeries with reconstructed timestamps

    Raises:
        FormatRejectedError: If no column-title line is present
        HeaderInvalidError: If the header lacks device name, date or sampling rate
    """
    config = config or ImportConfig()

    lines = split_lines(raw_text.lstrip("\ufeff"))
    header_index = find_data_header_index(lines, config.data_header_token)
    if header_index < 0:
        raise FormatRejectedError(
            f"Unsupported format: no line starting with {config.data_header_token!r} found"
        )

    # The title line stays in the header text so exports keep the column names
    header_lines = lines[: header_index + 1]
    data_lines = lines[header_index + 1:]

    header = parse_header(header_lines[:-1])
    samples, stats = decode_records(data_lines, config.delimiter)
    records = reconstruct(header, samples)

    return EditableSeries(
        records,
        header,
        header_text="\n".join(header_lines),
        source_path=source_path,
        size_bytes=size_bytes,
        decode_stats=stats,
        channel_text=channel_texts(samples),
    )


def read_text_file(path: Path, encoding: str = "utf-8-sig") -> str:
    """Read a whole file as text, stripping a UTF-8 BOM when present.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the content is not valid in the given encoding
    """
    return path.read_bytes().decode(encoding)


def import_file(path: Path | str, config: ImportConfig | None = None) -> EditableSeries:
    """Import one log file.

    Args:
        path: Path to the log file
        config: Input dialect (defaults to ImportConfig())

    Returns:
        EditableSeries for the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        FormatRejectedError: If no column-title line is present
        HeaderInvalidError: If the header is incomplete
        OSError: If the file cannot be read
    """
    config = config or ImportConfig()
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Log file not found: {path}")

    if not path.is_file():
        raise IsADirectoryError(f"Path is not a file: {path}")

    logger.info(f"Importing log file: {path}")

    text = read_text_file(path, config.encoding)
    series = import_text(text, source_path=path, size_bytes=path.stat().st_size, config=config)

    logger.info(
        f"Imported {len(series)} samples from {path.name} "
        f"(device={series.header.device_name!r}, {series.header.sampling_rate} Hz)"
    )
    return series


def import_files(
    paths: Iterable[Path | str],
    progress_callback: ProgressCallback | None = None,
    config: ImportConfig | None = None,
) -> ImportBatchResult:
    """Import a batch of log files sequentially.

    Rejected and unreadable files are collected as ImportRejection entries;
    the batch always runs to the end.

    Args:
        paths: Files to import, in order
        progress_callback: Called with (current, total) before each file, 1-based
        config: Input dialect (defaults to ImportConfig())

    Returns:
        ImportBatchResult with imported series and rejections
    """
    config = config or ImportConfig()
    path_list = [Path(p) for p in paths]
    total = len(path_list)
    result = ImportBatchResult()

    for i, path in enumerate(path_list, start=1):
        if progress_callback is not None:
            progress_callback(i, total)

        try:
            result.series.append(import_file(path, config))
        except FormatRejectedError as e:
            message = f"File rejected (unsupported format / data header not found): {path}"
            logger.warning(f"{message} ({e})")
            result.rejections.append(ImportRejection(path=path, kind=RejectionKind.FORMAT_REJECTED, message=message))
        except HeaderInvalidError as e:
            message = f"File rejected (incomplete or invalid header): {path}"
            logger.warning(f"{message} ({e})")
            result.rejections.append(ImportRejection(path=path, kind=RejectionKind.HEADER_INVALID, message=message))
        except (OSError, UnicodeDecodeError) as e:
            message = f"Error importing file: {path}: {e}"
            logger.error(message)
            result.rejections.append(ImportRejection(path=path, kind=RejectionKind.IO_FAILURE, message=message))

    logger.info(f"Import batch finished: {result.num_imported} imported, {result.num_rejected} rejected")
    return result
