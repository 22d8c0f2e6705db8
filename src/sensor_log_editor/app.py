"""Logging setup and batch command-line entry point.

Imports one or more log files, optionally applies a single cut or keep
selection to every file, and exports the results into an output directory.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

import pandas as pd
from loguru import logger

from sensor_log_editor import __version__
from sensor_log_editor.config.settings import get_config
from sensor_log_editor.core.exporter import export_all
from sensor_log_editor.core.importer import import_files
from sensor_log_editor.core.range_mapper import EditPolicy, SelectionSpace, apply_selection_to_all
from sensor_log_editor.core.session import EditSession

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: str | Path | None = "sensor_log_editor.log") -> None:
    """Install the stderr sink and the rotating file sink.

    Args:
        level: Minimum level for the stderr sink
        log_file: Path of the DEBUG file sink, or None to skip it
    """
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)
    if log_file is not None:
        logger.add(
            str(log_file),
            rotation="10 MB",
            retention="7 days",
            level="DEBUG",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensor-log-editor",
        description="Import accelerometer log files, trim sample ranges, and export the result.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Log files to import")
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path("."), help="Directory for exported files (default: .)"
    )

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument("--cut", nargs=2, metavar=("START", "END"), help="Remove samples START..END")
    selection.add_argument("--keep", nargs=2, metavar=("START", "END"), help="Keep only samples START..END")

    parser.add_argument(
        "--time",
        action="store_true",
        help="Interpret START and END as timestamps instead of sample indices",
    )
    parser.add_argument("--no-export", action="store_true", help="Import and edit only, write nothing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
    parser.add_argument("--log-file", default="sensor_log_editor.log", help="Rotating log file path")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _parse_bound(text: str, space: SelectionSpace):
    if space is SelectionSpace.TIME:
        return pd.Timestamp(text).to_datetime64()
    return float(text)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the batch editor.

    Returns:
        Process exit status: 0 on success, 1 when every file was rejected,
        2 for an invalid selection
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "INFO", args.log_file)
    config = get_config()

    supported = {ext.lower() for ext in config.importing.supported_extensions}
    for path in args.files:
        if path.suffix.lower() not in supported:
            logger.warning(f"Unexpected file extension, importing anyway: {path}")

    result = import_files(args.files, config=config.importing)
    for rejection in result.rejections:
        print(f"rejected: {rejection.message}", file=sys.stderr)

    if result.num_imported == 0:
        logger.error("No file could be imported")
        return 1

    session = EditSession()
    session.add_all(result.series)

    bounds = args.cut or args.keep
    if bounds is not None:
        policy = EditPolicy.CUT if args.cut else EditPolicy.KEEP
        space = SelectionSpace.TIME if args.time else SelectionSpace.INDEX
        try:
            lo, hi = (_parse_bound(b, space) for b in bounds)
        except ValueError as e:
            parser.print_usage(sys.stderr)
            print(f"invalid selection bound: {e}", file=sys.stderr)
            return 2
        apply_selection_to_all(session.series, lo, hi, policy, space)

    written = []
    if not args.no_export:
        written = export_all(session.series, args.output_dir, config.export)

    for series in session:
        print(f"{series.file_name}: {len(series)}/{series.num_original_samples} samples kept")
    if written:
        print(f"{len(written)} file(s) written to {args.output_dir}")
    if result.rejections:
        print(f"{result.num_rejected} file(s) rejected")

    return 0


if __name__ == "__main__":
    sys.exit(main())
