"""Tests for device header parsing."""
import math
from datetime import datetime

import pytest

from sensor_log_editor.core.exceptions import HeaderInvalidError, SensorLogError
from sensor_log_editor.core.data_models import RejectionKind, SensorType
from sensor_log_editor.core.header_parser import (
    is_data_header_line,
    parse_header,
    parse_header_date,
    parse_header_fields,
)

FULL_HEADER = [
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


class TestDataHeaderLine:
    def test_title_line_detected(self):
        assert is_data_header_line("TimeStamp;Z;X;Y")
        assert is_data_header_line("  timestamp ; z")

    def test_other_lines(self):
        assert not is_data_header_line("")
        assert not is_data_header_line("Date: 2024-01-01")
        assert not is_data_header_line("0;0.1;0.2;0.3")


class TestParseHeaderFields:
    """Tests for key recognition."""

    def test_full_header(self):
        header = parse_header_fields(FULL_HEADER)

        assert header.device_name == "BeanDevice AX 3D"
        assert header.sensor_type is SensorType.AX3D
        assert header.range_min == -2.0
        assert header.range_max == 2.0
        assert header.mac_id == "00:11:22:33:44:55"
        assert header.network_id == "12"
        assert header.pan_id == "4"
        assert header.measure_mode == "Streaming"
        assert header.streaming_options == "continuous"
        assert header.unit == "g"
        assert header.date_format == "yyyy-MM-dd HH:mm:ss"
        assert header.date == datetime(2024, 1, 1)
        assert header.sampling_rate == 100
        assert header.sensor_ids == [1, 2, 3]
        assert header.sensor_labels == ["Z", "X", "Y"]

    def test_keys_case_insensitive(self):
        header = parse_header_fields(["BEANDEVICE: AX 3D", "SAMPLING RATE: 50", "date: 2024-02-03 04:05:06"])
        assert header.device_name == "AX 3D"
        assert header.sampling_rate == 50
        assert header.date == datetime(2024, 2, 3, 4, 5, 6)

    def test_single_range_value_is_symmetric(self):
        header = parse_header_fields(["Range: 8 g"])
        assert (header.range_min, header.range_max) == (-8.0, 8.0)

    def test_range_with_decimal_comma(self):
        header = parse_header_fields(["Measurement range: -1,5 / 1,5"])
        assert (header.range_min, header.range_max) == (-1.5, 1.5)

    def test_unparsable_range_left_unset(self):
        header = parse_header_fields(["Range: auto"])
        assert math.isnan(header.range_min)

    def test_invalid_sampling_rate_is_zero(self):
        assert parse_header_fields(["Sampling rate: fast"]).sampling_rate == 0

    def test_unknown_keys_and_noise_ignored(self):
        header = parse_header_fields(["Firmware: 2.1", "no colon here", ":leading colon", "---"])
        assert header.device_name == ""
        assert header.date is None
        assert header.sampling_rate == 0
        assert header.unit == ""

    def test_non_integer_sensor_ids_skipped(self):
        assert parse_header_fields(["Sensor id: 1, two; 3"]).sensor_ids == [1, 3]

    def test_title_line_skipped(self):
        header = parse_header_fields(["TimeStamp: not a key", "Device: AX 3D"])
        assert header.device_name == "AX 3D"


class TestParseHeaderDate:
    def test_declared_format(self):
        assert parse_header_date("03/01/2024 10:00", "dd/MM/yyyy HH:mm") == datetime(2024, 1, 3, 10, 0)

    def test_generic_fallback(self):
        """Test that a date not matching DATE_FORMAT is still parsed generically."""
        assert parse_header_date("2024-01-01T12:30:00", "dd/MM/yyyy") == datetime(2024, 1, 1, 12, 30)

    def test_no_format(self):
        assert parse_header_date("2024-06-30 23:59:59", None) == datetime(2024, 6, 30, 23, 59, 59)

    def test_garbage_is_unset(self):
        assert parse_header_date("not a date", None) is None


class TestParseHeader:
    """Tests for validation."""

    def test_valid(self):
        header = parse_header(FULL_HEADER)
        assert header.is_valid

    @pytest.mark.parametrize(
        "drop_prefix, missing",
        [
            ("Device:", "device name"),
            ("Date:", "date"),
            ("Sampling rate:", "sampling rate"),
        ],
    )
    def test_missing_required_field(self, drop_prefix, missing):
        lines = [line for line in FULL_HEADER if not line.startswith(drop_prefix)]
        with pytest.raises(HeaderInvalidError, match=missing):
            parse_header(lines)

    def test_zero_sampling_rate(self):
        lines = [line if not line.startswith("Sampling rate") else "Sampling rate: 0" for line in FULL_HEADER]
        with pytest.raises(HeaderInvalidError):
            parse_header(lines)

    def test_error_hierarchy(self):
        with pytest.raises(SensorLogError) as exc_info:
            parse_header([])
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.kind is RejectionKind.HEADER_INVALID
