"""Reconstruction of wall-clock timestamps from the header start date.

Devices do not log a clock per sample. Each sample's time is derived from the
header start date and sampling rate: ``date + index / sampling_rate``. The raw
sample index is used, not the line position, so gaps or reordering in the
index column show up as gaps in time.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
from loguru import logger

from sensor_log_editor.core.data_models import SAMPLE_DTYPE, RawSample, SensorHeader
from sensor_log_editor.core.date_format import ISO_FALLBACK_FORMAT, format_datetime
from sensor_log_editor.core.record_decoder import channel_texts

_NS_PER_SECOND = 1_000_000_000


def can_reconstruct(header: SensorHeader | None) -> bool:
    """True when the header carries a start date and a positive sampling rate."""
    return header is not None and header.date is not None and header.sampling_rate > 0


def reconstruct_timestamps(header: SensorHeader, indices: np.ndarray) -> np.ndarray | None:
    """Compute the timestamp of every sample index.

    Args:
        header: Parsed device header
        indices: 1D array of raw sample indices

    Returns:
        datetime64[ns] array parallel to indices, or None when the header has
        no start date or a non-positive sampling rate
    """
    if not can_reconstruct(header):
        return None

    indices = np.asarray(indices, dtype=np.float64)
    start = np.datetime64(header.date, "ns")
    offsets_ns = np.rint(indices * (_NS_PER_SECOND / header.sampling_rate)).astype(np.int64)
    return start + offsets_ns.astype("timedelta64[ns]")


def reconstruct(header: SensorHeader, samples: Sequence[RawSample]) -> np.ndarray:
    """Place decoded samples on the wall clock.

    Args:
        header: Parsed device header
        samples: Decoded samples in file order

    Returns:
        Structured array of SAMPLE_DTYPE. Timestamps are NaT when the header
        cannot provide a time base.
    """
    records = np.empty(len(samples), dtype=SAMPLE_DTYPE)
    if len(samples) == 0:
        return records

    records["z"] = [s.z for s in samples]
    records["x"] = [s.x for s in samples]
    records["y"] = [s.y for s in samples]

    timestamps = reconstruct_timestamps(header, np.fromiter((s.index for s in samples), dtype=np.int64, count=len(samples)))
    if timestamps is None:
        logger.warning("Header has no start date or sampling rate, timestamps left unset")
        records["timestamp"] = np.datetime64("NaT", "ns")
    else:
        records["timestamp"] = timestamps

    return records


def format_timestamp(timestamp: np.datetime64, date_format: str | None = None) -> str:
    """Render one timestamp with the header DATE_FORMAT, or ISO-8601 when absent.

    Returns:
        Formatted text, empty for NaT
    """
    value = np.datetime64(timestamp, "us").item()
    if value is None:
        return ""
    return format_datetime(value, date_format or ISO_FALLBACK_FORMAT)


def format_timestamps(timestamps: np.ndarray, date_format: str | None = None) -> list[str]:
    """Render an array of timestamps (see format_timestamp)."""
    fmt = date_format or ISO_FALLBACK_FORMAT
    return [
        "" if value is None else format_datetime(value, fmt)
        for value in np.asarray(timestamps).astype("datetime64[us]").tolist()
    ]


def build_preview_lines(header: SensorHeader | None, samples: Sequence[RawSample]) -> list[str]:
    """Build the ``timestamp;z;x;y`` text preview of decoded samples.

    Channel fields keep their source text. When the header cannot provide a
    time base the raw index is kept as text in the first field.
    """
    texts = channel_texts(samples)
    if not can_reconstruct(header):
        leads = [str(s.index) for s in samples]
    else:
        records = reconstruct(header, samples)
        leads = format_timestamps(records["timestamp"], header.date_format)
    return [";".join((lead, *row)) for lead, row in zip(leads, texts)]
