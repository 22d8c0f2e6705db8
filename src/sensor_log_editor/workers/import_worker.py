"""Background file import using QThread.

Runs a batch import off the GUI thread and reports per-file progress,
rejections, and the final result through Qt signals.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger
from PySide6.QtCore import QThread, Signal

from sensor_log_editor.config.settings import ImportConfig
from sensor_log_editor.core.importer import import_files


class ImportWorker(QThread):
    """Background worker importing a list of log files.

    Signals:
        file_progress: Emitted with (current, total) before each file, 1-based
        file_rejected: Emitted with an ImportRejection for every skipped file
        finished: Emitted with the ImportBatchResult when the batch completes
        error: Emitted with an error message on unexpected failure
    """

    file_progress = Signal(int, int)
    file_rejected = Signal(object)
    finished = Signal(object)
    error = Signal(str)

    def __init__(self, paths: Iterable[Path | str], config: ImportConfig | None = None, parent=None):
        """Initialize worker with the files to import.

        Args:
            paths: Files to import, in order
            config: Input dialect (defaults to ImportConfig())
            parent: Parent QObject
        """
        super().__init__(parent=parent)
        self.paths = [Path(p) for p in paths]
        self.config = config or ImportConfig()
        self._cancelled = False

    def run(self):
        """Import the files in the background thread."""
        try:
            logger.info(f"Import worker started: {len(self.paths)} file(s)")

            result = import_files(self.paths, progress_callback=self.file_progress.emit, config=self.config)

            if self._cancelled:
                logger.info("Import was cancelled")
                return

            for rejection in result.rejections:
                self.file_rejected.emit(rejection)

            self.finished.emit(result)
            logger.info("Import worker completed successfully")

        except Exception as e:
            logger.error(f"Import worker failed: {e}")
            self.error.emit(str(e))

    def cancel(self):
        """Discard the result once the current batch returns."""
        self._cancelled = True
        logger.info("Import cancellation requested")

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._cancelled
