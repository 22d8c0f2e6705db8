"""Shared fixtures for SensorLogEditor tests."""
import os
from pathlib import Path

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from sensor_log_editor.core.importer import import_text

HEADER_LINES = [
    "BeanDevice AX 3D log export",
    "-----------------------------",
    "Device: BeanDevice AX 3D",
    "Range: -2g / +2g",
    "Mac Id: 00:11:22:33:44:55",
    "Network Id: 12",
    "Pan Id: 4",
    "Measure mode: Streaming",
    "Streaming options: continuous",
    "Unit: g",
    "DATE_FORMAT: yyyy-MM-dd HH:mm:ss",
    "Date: 2024-01-01 00:00:00",
    "Sampling rate: 100",
    "Sensor ids: 1|2|3",
    "Sensor labels: Z|X|Y",
]
TITLE_LINE = "TimeStamp;Z;X;Y"


def make_log_text(data_lines, header_lines=None, newline="\n"):
    """Build the text of a log file from header and data lines."""
    header_lines = HEADER_LINES if header_lines is None else header_lines
    return newline.join([*header_lines, TITLE_LINE, *data_lines]) + newline


def ramp_lines(n):
    """Data lines 0..n-1 with z=i, x=-i, y=i/2."""
    return [f"{i};{i}.0;{-i}.0;{i / 2}" for i in range(n)]


@pytest.fixture
def sample_text():
    """Three-sample log at 100 Hz starting 2024-01-01 00:00:00."""
    return make_log_text(["0;0.1;0.2;0.3", "1;0.4;0.5;0.6", "2;0.7;0.8;0.9"])


@pytest.fixture
def sample_series(sample_text):
    """EditableSeries imported from sample_text."""
    return import_text(sample_text, source_path="sample.txt")


@pytest.fixture
def ramp_series():
    """EditableSeries of 10 ramp samples."""
    return import_text(make_log_text(ramp_lines(10)), source_path="ramp.txt")


@pytest.fixture
def write_log(tmp_path):
    """Write a log file into tmp_path and return its path."""

    def _write(name, text, encoding="utf-8"):
        path = Path(tmp_path) / name
        path.write_bytes(text.encode(encoding))
        return path

    return _write


@pytest.fixture
def log_text():
    """Factory building log text: log_text(data_lines, header_lines=None, newline="\\n")."""
    return make_log_text


@pytest.fixture
def ramp():
    """Factory for ramp data lines: ramp(n)."""
    return ramp_lines
