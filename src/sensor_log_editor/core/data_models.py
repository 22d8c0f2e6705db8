"""Data models for accelerometer log import and editing.

Uses attrs with validators for type-safe, validated data containers.
"""
from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import attrs
import numpy as np
from attrs import define, field

# Structured dtype of one timestamped triaxial sample. Series keep their
# working set as a single array of this dtype so cuts are plain index deletes.
SAMPLE_DTYPE = np.dtype(
    [
        ("timestamp", "datetime64[ns]"),
        ("z", np.float64),
        ("x", np.float64),
        ("y", np.float64),
    ]
)

CHANNEL_NAMES = ("z", "x", "y")


class SensorType(Enum):
    """Known accelerometer device families."""

    AX3D = "ax3d"
    UNKNOWN = "unknown"


class RejectionKind(Enum):
    """Why a file was left out of an import batch."""

    FORMAT_REJECTED = "format_rejected"  # No "TimeStamp" column-title line
    HEADER_INVALID = "header_invalid"  # Missing device name, date or sampling rate
    IO_FAILURE = "io_failure"  # Unreadable, undecodable or vanished file


def _validate_nonnegative(instance, attribute, value):
    """Validator: ensure value is >= 0."""
    if value < 0:
        raise ValueError(f"{attribute.name} must be >= 0, got {value}")


def detect_sensor_type(device_name: str) -> SensorType:
    """Detect the device family from the header device name.

    Args:
        device_name: Value of the Device/BeanDevice header key

    Returns:
        Detected SensorType
    """
    if "AX 3D" in (device_name or "").upper():
        return SensorType.AX3D
    return SensorType.UNKNOWN


@define
class SensorHeader:
    """Typed metadata parsed from the textual device header.

    A header is valid only when it carries a device name, a start date and a
    positive sampling rate; files with an invalid header are rejected whole.
    """

    device_name: str = field(default="", validator=attrs.validators.instance_of(str))
    range_min: float = field(default=math.nan, validator=attrs.validators.instance_of(float))
    range_max: float = field(default=math.nan, validator=attrs.validators.instance_of(float))
    mac_id: str = field(default="", validator=attrs.validators.instance_of(str))
    network_id: str = field(default="", validator=attrs.validators.instance_of(str))
    pan_id: str = field(default="", validator=attrs.validators.instance_of(str))
    measure_mode: str = field(default="", validator=attrs.validators.instance_of(str))
    streaming_options: str = field(default="", validator=attrs.validators.instance_of(str))
    unit: str = field(default="", validator=attrs.validators.instance_of(str))
    date_format: str | None = field(default=None, validator=attrs.validators.optional(attrs.validators.instance_of(str)))
    # None means "unset"
    date: datetime | None = field(default=None, validator=attrs.validators.optional(attrs.validators.instance_of(datetime)))
    sampling_rate: int = field(default=0, validator=attrs.validators.instance_of(int))
    sensor_ids: list[int] = field(factory=list, validator=attrs.validators.instance_of(list))
    sensor_labels: list[str] = field(factory=list, validator=attrs.validators.instance_of(list))

    @property
    def is_valid(self) -> bool:
        """True when date is set, sampling rate is positive and device name is non-empty."""
        return self.date is not None and self.sampling_rate > 0 and bool(self.device_name.strip())

    @property
    def sample_interval(self) -> float:
        """Seconds between consecutive sample indices (0.0 when rate is unknown)."""
        return 1.0 / self.sampling_rate if self.sampling_rate > 0 else 0.0

    @property
    def sensor_type(self) -> SensorType:
        """Device family detected from the device name."""
        return detect_sensor_type(self.device_name)


@define(frozen=True)
class RawSample:
    """One decoded data line: sample index plus the Z, X, Y channel values.

    text holds the Z, X, Y fields as written in the file (trimmed, decimal
    comma replaced by a dot) so exports reproduce the input digits.
    """

    index: int
    z: float
    x: float
    y: float
    text: tuple[str, str, str] | None = field(default=None, eq=False)


@define(frozen=True)
class TimestampedSample:
    """A sample placed on the wall clock."""

    timestamp: np.datetime64
    z: float
    x: float
    y: float

    @classmethod
    def from_record(cls, record: np.void) -> TimestampedSample:
        """Build from one element of a SAMPLE_DTYPE array."""
        return cls(
            timestamp=record["timestamp"],
            z=float(record["z"]),
            x=float(record["x"]),
            y=float(record["y"]),
        )


@define
class DecodeStats:
    """Counters collected while decoding the data section of one file."""

    lines_seen: int = field(default=0, validator=_validate_nonnegative)
    short_lines_skipped: int = field(default=0, validator=_validate_nonnegative)
    unparsable_dropped: int = field(default=0, validator=_validate_nonnegative)

    @property
    def samples_decoded(self) -> int:
        """Number of lines that produced a complete sample."""
        return self.lines_seen - self.short_lines_skipped - self.unparsable_dropped


@define
class ImportRejection:
    """A file that could not be imported, with the reason shown to the user."""

    path: Path | None = field(converter=attrs.converters.optional(Path))
    kind: RejectionKind = field(validator=attrs.validators.instance_of(RejectionKind))
    message: str = field(validator=attrs.validators.instance_of(str))


@define
class ImportBatchResult:
    """Outcome of importing several files: the series that loaded and the rejections."""

    # list[EditableSeries]; typed loosely to keep this module free of the series import
    series: list[Any] = field(factory=list, validator=attrs.validators.instance_of(list))
    rejections: list[ImportRejection] = field(factory=list, validator=attrs.validators.instance_of(list))

    @property
    def num_imported(self) -> int:
        """Number of files imported successfully."""
        return len(self.series)

    @property
    def num_rejected(self) -> int:
        """Number of files rejected."""
        return len(self.rejections)
