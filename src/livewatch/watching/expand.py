"""Directory glob expansion.

Turns the configured ``watch.dirs`` patterns into the concrete list of
directories to watch. Patterns are relative to the project root; a leading
``!`` excludes matches (and everything beneath them) from the result.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path

_ROOT_PATTERNS = {"", ".", "./"}


def _is_excluded(rel: str, excludes: list[str]) -> bool:
    for pattern in excludes:
        if fnmatchcase(rel, pattern) or fnmatchcase(rel, pattern + "/*"):
            return True
    return False


def expand_dirs(patterns: list[str], root: str | Path = ".") -> list[str]:
    """Expand directory patterns into existing directories.

    Args:
        patterns: Glob patterns such as ``"**"`` or ``"app/*"``; ``"!x"`` excludes.
        root: Directory the patterns are relative to.

    Returns:
        Forward-slash paths (joined onto root) in first-match order, no duplicates.
    """
    base = Path(root)
    excludes = [p[1:].strip("/") for p in patterns if p.startswith("!")]
    found: dict[str, None] = {}

    for pattern in patterns:
        if pattern.startswith("!"):
            continue
        pattern = pattern.rstrip("/")
        if pattern in _ROOT_PATTERNS:
            matches = [base]
        else:
            matches = sorted(base.glob(pattern))

        for match in matches:
            if not match.is_dir():
                continue
            rel = match.relative_to(base).as_posix()
            if rel != "." and _is_excluded(rel, excludes):
                continue
            found.setdefault(match.as_posix(), None)

    return list(found)
