"""Mapping changed files to task names."""

from __future__ import annotations

import os
from collections.abc import Mapping

from livewatch.config.schema import TriggerEntry

WILDCARD = "*"


def extension_of(path: str) -> str:
    """File extension without the dot ("" for none or dot files)."""
    return os.path.splitext(path)[1][1:]


class TaskResolver:
    """Looks up the tasks a changed file should trigger.

    Entries are keyed by extension, with ``"*"`` as the fallback. An entry
    is a task name, a list of names, or a callable taking the path and
    returning either.
    """

    def __init__(self, triggers: Mapping[str, TriggerEntry]) -> None:
        self._triggers = dict(triggers)

    def resolve(self, path: str) -> list[str]:
        entry = self._triggers.get(extension_of(path))
        if entry is None:
            entry = self._triggers.get(WILDCARD)
        if entry is None:
            return []

        tasks = entry(path) if callable(entry) else entry
        if not tasks:
            return []
        if isinstance(tasks, str):
            return [tasks]
        return list(tasks)
