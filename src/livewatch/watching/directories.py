"""Directory watch handle management.

Keeps exactly one watchdog watch per desired directory. Each activation
reconciles the open handles against a freshly expanded directory list:
new directories get a handle, departed ones have theirs closed, and
unchanged ones are left alone.

Directories created after an activation are not picked up until the next
activation.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from watchdog.observers import Observer

from livewatch.logging import VERBOSE, get_logger
from livewatch.watching.events import ChangeEvent, DirectoryEventHandler

if TYPE_CHECKING:
    from livewatch.console import Reporter

log = get_logger("watching")


@dataclass
class WatchedDirectory:
    """A directory with its open watch handle."""

    path: str
    handle: Any  # watchdog ObservedWatch


@dataclass
class ReconcileResult:
    """Directories whose watch state changed during a reconcile."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class DirectoryWatcherManager:
    """Owns the set of active directory watch handles."""

    def __init__(
        self,
        sink: Callable[[ChangeEvent], None],
        observer: Any | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            sink: Receives every ChangeEvent; called on the observer thread.
            observer: watchdog Observer (or compatible); a new one if None.
            reporter: Console reporter for add/remove summaries.
        """
        self._sink = sink
        self._observer = observer if observer is not None else Observer()
        self._reporter = reporter
        self._watched: dict[str, WatchedDirectory] = {}

    @property
    def directories(self) -> list[str]:
        return list(self._watched)

    def get(self, path: str) -> WatchedDirectory | None:
        return self._watched.get(path)

    def start(self) -> None:
        """Start the observer thread if it is not running yet."""
        if not self._observer.is_alive():
            self._observer.start()

    def reconcile(self, desired: list[str]) -> ReconcileResult:
        """Bring the open handles in line with the desired directory list."""
        start = time.perf_counter()
        result = ReconcileResult()
        wanted = set(desired)

        for directory in desired:
            if directory in self._watched:
                continue
            handler = DirectoryEventHandler(directory, self._sink)
            try:
                handle = self._observer.schedule(handler, directory, recursive=False)
            except OSError as e:
                log.warning("Could not watch %s: %s", directory, e)
                continue
            self._watched[directory] = WatchedDirectory(path=directory, handle=handle)
            result.added.append(directory)

        for directory in list(self._watched):
            if directory in wanted:
                continue
            self._close(self._watched.pop(directory))
            result.removed.append(directory)

        result.elapsed_ms = (time.perf_counter() - start) * 1000
        self._report(result)
        return result

    def _close(self, watched: WatchedDirectory) -> None:
        try:
            self._observer.unschedule(watched.handle)
        except (KeyError, OSError) as e:
            # Already gone, e.g. the directory itself was deleted.
            log.debug("Unschedule failed for %s: %s", watched.path, e)

    def _report(self, result: ReconcileResult) -> None:
        if result.removed:
            log.log(VERBOSE, "Dirs removed from watch list: %s", ", ".join(result.removed))
            if self._reporter:
                self._reporter.dirs_removed(len(result.removed))

        if result.added:
            log.log(VERBOSE, "Dirs added to watch list: %s", ", ".join(result.added))
            if self._reporter:
                self._reporter.dirs_added(len(result.added), result.elapsed_ms)

    def close(self) -> None:
        """Close every open watch handle."""
        for watched in self._watched.values():
            self._close(watched)
        self._watched.clear()

    def stop(self) -> None:
        """Close all handles and stop the observer thread."""
        self.close()
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=2)
