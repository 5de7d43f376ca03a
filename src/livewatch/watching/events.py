"""Raw change events and the watchdog adapter that produces them."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass

from watchdog.events import FileSystemEvent, FileSystemEventHandler

MODIFY = "modify"
RENAME = "rename"

_KIND_BY_EVENT_TYPE = {
    "modified": MODIFY,
    "created": RENAME,
    "deleted": RENAME,
    "moved": RENAME,
}


@dataclass(frozen=True)
class ChangeEvent:
    """One raw notification from a watched directory."""

    kind: str  # "modify" or "rename"
    raw_name: str  # entry name relative to directory
    directory: str


class DirectoryEventHandler(FileSystemEventHandler):
    """Forwards watchdog events for one directory as ChangeEvents.

    Runs on the watchdog observer thread; ``sink`` must be safe to call
    from there.
    """

    def __init__(self, directory: str, sink: Callable[[ChangeEvent], None]) -> None:
        self.directory = directory
        self._sink = sink

    def _name(self, path: bytes | str) -> str:
        return os.path.relpath(os.fsdecode(path), self.directory)

    def on_any_event(self, event: FileSystemEvent) -> None:
        kind = _KIND_BY_EVENT_TYPE.get(event.event_type)
        if kind is None:
            return
        self._sink(ChangeEvent(kind, self._name(event.src_path), self.directory))
        dest_path = getattr(event, "dest_path", "")
        if event.event_type == "moved" and dest_path:
            self._sink(ChangeEvent(kind, self._name(dest_path), self.directory))
