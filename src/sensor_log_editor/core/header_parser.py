"""Parsing of the textual device header that precedes the sample table.

Header lines are ``Key: Value`` pairs. Keys are matched case-insensitively
against a fixed vocabulary; anything unrecognized is ignored so newer device
firmware with extra metadata still imports.
"""
from __future__ import annotations

import math
import re
import warnings
from datetime import datetime
from typing import Iterable

import pandas as pd
from loguru import logger

from sensor_log_editor.core.data_models import SensorHeader
from sensor_log_editor.core.date_format import parse_datetime
from sensor_log_editor.core.exceptions import HeaderInvalidError

DATA_HEADER_TOKEN = "TimeStamp"

_RANGE_NUMBER = re.compile(r"[-+]?[0-9]*,?[0-9]+")
_LIST_SEPARATORS = re.compile(r"[|,;]")
_SEPARATOR_CHARS = frozenset("- \t")


def is_data_header_line(line: str, token: str = DATA_HEADER_TOKEN) -> bool:
    """Check if a line is the column-title line that starts the sample table."""
    return bool(line.strip()) and line.lstrip().lower().startswith(token.lower())


def _is_separator_line(line: str) -> bool:
    return all(c in _SEPARATOR_CHARS for c in line)


def _parse_float(token: str) -> float | None:
    try:
        return float(token.replace(",", "."))
    except ValueError:
        return None


def _parse_range(value: str) -> tuple[float, float] | None:
    """Extract (min, max) from values like ``-2g / +2g`` or ``2 g``."""
    numbers = [_parse_float(m) for m in _RANGE_NUMBER.findall(value)]
    if len(numbers) >= 2:
        low, high = numbers[0], numbers[1]
        return (
            low if low is not None else math.nan,
            high if high is not None else math.nan,
        )
    if len(numbers) == 1 and numbers[0] is not None:
        return -abs(numbers[0]), abs(numbers[0])
    return None


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in _LIST_SEPARATORS.split(value) if part.strip()]


def _parse_int_list(value: str) -> list[int]:
    ids = []
    for part in _split_list(value):
        try:
            ids.append(int(part))
        except ValueError:
            logger.debug(f"Ignoring non-integer sensor id: {part!r}")
    return ids


def parse_header_date(value: str, date_format: str | None) -> datetime | None:
    """Parse the header start date.

    Uses the declared DATE_FORMAT when known, falling back to a best-effort
    generic parse. Returns None ("unset") when nothing works.

    Args:
        value: Raw date text from the header
        date_format: .NET-style format declared earlier in the header, if any

    Returns:
        Naive datetime, or None when the text is not a recognizable date
    """
    if date_format:
        try:
            return parse_datetime(value, date_format)
        except ValueError:
            logger.debug(f"Date {value!r} does not match DATE_FORMAT {date_format!r}, trying generic parse")

    with warnings.catch_warnings():
        # pandas warns when it has to guess the format element by element
        warnings.simplefilter("ignore", UserWarning)
        parsed = pd.to_datetime(value.strip(), errors="coerce")

    if parsed is None or pd.isna(parsed):
        logger.warning(f"Could not parse header date: {value!r}")
        return None

    return parsed.to_pydatetime().replace(tzinfo=None)


def parse_header_fields(lines: Iterable[str]) -> SensorHeader:
    """Parse header lines into a SensorHeader without validating it.

    Args:
        lines: Raw header lines (the column-title line may be included and is skipped)

    Returns:
        SensorHeader with every recognized key filled in
    """
    header = SensorHeader()

    for raw in lines:
        line = raw.strip()
        if not line or _is_separator_line(line):
            continue
        if is_data_header_line(line):
            continue

        idx = line.find(":")
        if idx <= 0:
            continue

        key = line[:idx].strip()
        value = line[idx + 1:].strip()
        key_lower = key.lower()

        if key_lower in ("device", "beandevice"):
            header.device_name = value
        elif "range" in key_lower:
            parsed_range = _parse_range(value)
            if parsed_range is not None:
                header.range_min, header.range_max = parsed_range
        elif key_lower in ("mac id", "macid"):
            header.mac_id = value
        elif key_lower in ("network id", "networkid"):
            header.network_id = value
        elif key_lower in ("pan id", "panid"):
            header.pan_id = value
        elif "measure mode" in key_lower:
            header.measure_mode = value
        elif "streaming options" in key_lower:
            header.streaming_options = value
        elif "unit" in key_lower:
            header.unit = value
        elif key_lower == "date_format":
            header.date_format = value
        elif key_lower == "date":
            header.date = parse_header_date(value, header.date_format)
        elif key_lower == "sampling rate":
            try:
                header.sampling_rate = int(value)
            except ValueError:
                logger.warning(f"Invalid sampling rate in header: {value!r}")
                header.sampling_rate = 0
        elif key_lower in ("sensor ids", "sensor id"):
            header.sensor_ids = _parse_int_list(value)
        elif key_lower in ("sensor labels", "sensorlabel"):
            header.sensor_labels = _split_list(value)
        else:
            logger.debug(f"Ignoring unrecognized header key: {key!r}")

    return header


def parse_header(lines: Iterable[str]) -> SensorHeader:
    """Parse and validate the device header.

    Args:
        lines: Raw header lines preceding the column-title line

    Returns:
        Valid SensorHeader

    Raises:
        HeaderInvalidError: If device name, date or a positive sampling rate is missing
    """
    header = parse_header_fields(lines)

    if not header.is_valid:
        missing = []
        if not header.device_name.strip():
            missing.append("device name")
        if header.date is None:
            missing.append("date")
        if header.sampling_rate <= 0:
            missing.append("sampling rate")
        raise HeaderInvalidError(f"Incomplete or invalid header (missing {', '.join(missing)})")

    logger.debug(
        f"Parsed header: device={header.device_name!r}, date={header.date}, "
        f"sampling_rate={header.sampling_rate} Hz, unit={header.unit!r}"
    )
    return header
