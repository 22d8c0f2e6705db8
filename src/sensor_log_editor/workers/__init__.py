"""Qt background workers and timers."""

from .debounce import RecomputeDebouncer
from .import_worker import ImportWorker

__all__ = ["ImportWorker", "RecomputeDebouncer"]
