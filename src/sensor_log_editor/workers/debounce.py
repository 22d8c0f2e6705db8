"""Coalescing of rapid view-window and cut changes into one recompute."""
from __future__ import annotations

from loguru import logger
from PySide6.QtCore import QObject, QTimer, Signal

from sensor_log_editor.config.settings import ViewConfig, get_config


class RecomputeDebouncer(QObject):
    """Single-shot timer that fires once after a burst of triggers.

    Every call to trigger() restarts the timer; `triggered` is emitted when
    no new trigger arrives for interval_ms.

    Signals:
        triggered: Emitted once per burst of triggers
    """

    triggered = Signal()

    def __init__(self, interval_ms: int | None = None, config: ViewConfig | None = None, parent=None):
        """Initialize the debouncer.

        Args:
            interval_ms: Quiet period before firing (defaults to config.debounce_ms)
            config: View configuration (uses global config if None)
            parent: Parent QObject
        """
        super().__init__(parent)
        if interval_ms is None:
            interval_ms = (config or get_config().view).debounce_ms
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self._pending = 0
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        """True while a recompute is scheduled."""
        return self._timer.isActive()

    def trigger(self):
        """Schedule a recompute, restarting the quiet period."""
        self._pending += 1
        self._timer.start()

    def cancel(self):
        """Drop a scheduled recompute."""
        self._timer.stop()
        self._pending = 0

    def _fire(self):
        logger.debug(f"Recompute after {self._pending} trigger(s)")
        self._pending = 0
        self.triggered.emit()
