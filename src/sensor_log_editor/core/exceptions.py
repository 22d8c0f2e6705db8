"""Exceptions raised while importing accelerometer log files."""
from __future__ import annotations

from sensor_log_editor.core.data_models import RejectionKind


class SensorLogError(Exception):
    """Base error for all sensor-log import failures."""

    kind: RejectionKind | None = None


class FormatRejectedError(SensorLogError, ValueError):
    """Raised when no line starting with the data-header token is found."""

    kind = RejectionKind.FORMAT_REJECTED


class HeaderInvalidError(SensorLogError, ValueError):
    """Raised when the header lacks a device name, a date or a positive sampling rate."""

    kind = RejectionKind.HEADER_INVALID
