"""Core data models, import, editing, and export for SensorLogEditor."""

from .data_models import (
    CHANNEL_NAMES,
    SAMPLE_DTYPE,
    DecodeStats,
    ImportBatchResult,
    ImportRejection,
    RawSample,
    RejectionKind,
    SensorHeader,
    SensorType,
    TimestampedSample,
    detect_sensor_type,
)
from .exceptions import FormatRejectedError, HeaderInvalidError, SensorLogError
from .exporter import export_all, export_selection, export_series, format_working_lines
from .header_parser import parse_header, parse_header_fields
from .importer import import_file, import_files, import_text
from .range_mapper import (
    EditPolicy,
    SelectionSpace,
    apply_selection,
    apply_selection_to_all,
    apply_trim_to_all,
    map_selection,
)
from .record_decoder import decode_record, decode_records
from .series import EMPTY_RANGE, EditableSeries, is_empty_range
from .session import EditSession
from .timestamps import build_preview_lines, reconstruct, reconstruct_timestamps

__all__ = [
    "SAMPLE_DTYPE",
    "CHANNEL_NAMES",
    "SensorType",
    "RejectionKind",
    "SensorHeader",
    "RawSample",
    "TimestampedSample",
    "DecodeStats",
    "ImportRejection",
    "ImportBatchResult",
    "detect_sensor_type",
    "SensorLogError",
    "FormatRejectedError",
    "HeaderInvalidError",
    "parse_header",
    "parse_header_fields",
    "decode_record",
    "decode_records",
    "reconstruct",
    "reconstruct_timestamps",
    "build_preview_lines",
    "EditableSeries",
    "EMPTY_RANGE",
    "is_empty_range",
    "EditPolicy",
    "SelectionSpace",
    "map_selection",
    "apply_selection",
    "apply_selection_to_all",
    "apply_trim_to_all",
    "import_text",
    "import_file",
    "import_files",
    "EditSession",
    "format_working_lines",
    "export_series",
    "export_selection",
    "export_all",
]
