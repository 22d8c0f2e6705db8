"""Decoding of ``index;z;x;y`` data lines into RawSample records."""
from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from loguru import logger

from sensor_log_editor.core.data_models import DecodeStats, RawSample

FIELD_DELIMITER = ";"
MIN_FIELDS = 4


def normalize_channel_text(text: str) -> str:
    """Trim a channel field and replace a decimal comma with a dot."""
    return text.strip().replace(",", ".")


def parse_channel_value(text: str) -> float | None:
    """Parse one channel value, accepting a decimal comma.

    Returns:
        The value, or None when the field is not a number
    """
    try:
        return float(normalize_channel_text(text))
    except ValueError:
        return None


def format_channel_value(value: float) -> str:
    """Render a channel value in plain positional notation with a dot decimal separator.

    Example:
        >>> format_channel_value(5e-05)
        '0.00005'
    """
    return np.format_float_positional(float(value), trim="-")


def channel_texts(samples: Sequence[RawSample]) -> np.ndarray:
    """Stack the source text of decoded samples.

    Samples without source text are rendered with format_channel_value.

    Returns:
        Object array of shape (n, 3) with the Z, X, Y field text
    """
    texts = np.empty((len(samples), 3), dtype=object)
    for i, s in enumerate(samples):
        texts[i] = s.text if s.text is not None else tuple(format_channel_value(v) for v in (s.z, s.x, s.y))
    return texts


def decode_record(line: str, ordinal: int, delimiter: str = FIELD_DELIMITER) -> RawSample | None:
    """Decode one data line.

    Field 0 is the sample index; when it is not an integer the zero-based
    ordinal is used instead, so a corrupt index column degrades to sequential
    numbering. Fields 1-3 are Z, X, Y.

    Args:
        line: Raw data line
        ordinal: Zero-based position of the line among the non-empty data lines
        delimiter: Field delimiter

    Returns:
        RawSample, or None when the line has fewer than 4 fields or any
        channel value fails to parse
    """
    parts = line.split(delimiter)
    if len(parts) < MIN_FIELDS:
        return None
    return _decode_fields(parts, ordinal)


def _decode_fields(parts: list[str], ordinal: int) -> RawSample | None:
    try:
        index = int(parts[0].strip())
    except ValueError:
        index = ordinal

    text = tuple(normalize_channel_text(p) for p in parts[1:4])
    values = [parse_channel_value(t) for t in text]
    if any(v is None for v in values):
        return None

    z, x, y = values
    return RawSample(index=index, z=z, x=x, y=y, text=text)


def decode_records(
    lines: Iterable[str], delimiter: str = FIELD_DELIMITER
) -> tuple[list[RawSample], DecodeStats]:
    """Decode the data section of a file.

    Empty lines are skipped without taking an ordinal. Lines with fewer than
    4 fields are skipped silently but keep their ordinal. Lines whose channel
    values do not parse are dropped whole and counted, keeping the three
    channels the same length.

    Args:
        lines: Data lines following the column-title line
        delimiter: Field delimiter

    Returns:
        Tuple of (decoded samples, DecodeStats)
    """
    samples: list[RawSample] = []
    stats = DecodeStats()
    ordinal = 0

    for line in lines:
        stats.lines_seen += 1
        if not line:
            stats.short_lines_skipped += 1
            continue

        parts = line.split(delimiter)
        if len(parts) < MIN_FIELDS:
            stats.short_lines_skipped += 1
            ordinal += 1
            continue

        sample = _decode_fields(parts, ordinal)
        ordinal += 1
        if sample is None:
            stats.unparsable_dropped += 1
            continue
        samples.append(sample)

    if stats.unparsable_dropped:
        logger.warning(
            f"Dropped {stats.unparsable_dropped} of {stats.lines_seen} data lines "
            f"with unparsable channel values"
        )
    logger.debug(
        f"Decoded {len(samples)} samples ({stats.short_lines_skipped} short lines skipped)"
    )
    return samples, stats
