"""File watching module for livewatch.

Turns OS change notifications on a set of directories into debounced,
serialized dispatch cycles.
"""

from livewatch.watching.directories import (
    DirectoryWatcherManager,
    ReconcileResult,
    WatchedDirectory,
)
from livewatch.watching.events import ChangeEvent, DirectoryEventHandler
from livewatch.watching.expand import expand_dirs
from livewatch.watching.filters import ChangeEventFilter, is_ignored, normalize_path
from livewatch.watching.gate import DebounceScheduler, RunGate, RunState, WatchState
from livewatch.watching.unlock import FileUnlockWaiter, can_read

__all__ = [
    "ChangeEvent",
    "ChangeEventFilter",
    "DebounceScheduler",
    "DirectoryEventHandler",
    "DirectoryWatcherManager",
    "FileUnlockWaiter",
    "ReconcileResult",
    "RunGate",
    "RunState",
    "WatchState",
    "WatchedDirectory",
    "can_read",
    "expand_dirs",
    "is_ignored",
    "normalize_path",
]
