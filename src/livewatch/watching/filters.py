"""Normalization and filtering of raw change events.

A raw (kind, name, directory) notification either becomes a canonical
forward-slash file path ready for the run gate, or is dropped.
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Callable
from fnmatch import fnmatchcase

from livewatch.logging import VERBOSE, get_logger

log = get_logger("watching")

IgnorePredicate = Callable[[list[str], str], bool]


def normalize_path(directory: str, name: str) -> str:
    """Join directory and name into a normalized forward-slash path."""
    joined = os.path.join(directory or "", name or "").replace("\\", "/")
    return posixpath.normpath(joined)


def is_ignored(patterns: list[str], path: str) -> bool:
    """Check a path against ignore patterns.

    Dot files match like any other name. Patterns without a slash are
    matched against the base name only. There is no negation and no
    comment syntax: ``!`` and ``#`` are literal characters.
    """
    name = posixpath.basename(path)
    for pattern in patterns:
        target = path if "/" in pattern else name
        if fnmatchcase(target, pattern):
            return True
    return False


class ChangeEventFilter:
    """Decides which raw change notifications are qualifying file changes.

    With a root, ignore patterns see paths relative to it, so "build/*"
    means the build directory of the project wherever the project lives.
    """

    def __init__(
        self,
        ignored_files: list[str],
        ignore_predicate: IgnorePredicate = is_ignored,
        root: str | None = None,
    ) -> None:
        self._patterns = list(ignored_files)
        self._is_ignored = ignore_predicate
        self._root = root

    def relative(self, path: str) -> str:
        """Path as seen by ignore patterns; unchanged outside the root."""
        if self._root is None:
            return path
        try:
            rel = os.path.relpath(path, self._root).replace("\\", "/")
        except ValueError:
            # Different drive on Windows.
            return path
        if rel == ".." or rel.startswith("../"):
            return path
        return rel

    def filter(self, kind: str, raw_name: str, directory: str) -> str | None:
        """Return the normalized path for a qualifying file change, else None."""
        path = normalize_path(directory, raw_name)

        if self._is_ignored(self._patterns, self.relative(path)):
            return None

        # The entry may be gone by the time the callback runs, e.g. a
        # symlinked directory removed concurrently.
        if not os.path.exists(path):
            return None

        log.log(VERBOSE, "changed: %s", path)

        if os.path.isdir(path):
            log.log(VERBOSE, "Dir changed: %s", path)
            return None

        return path
