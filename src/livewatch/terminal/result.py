"""Outcome of running one task command."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ShellResult:
    """What a task's shell command did.

    ``exit_code`` is None when the command timed out; a negative code means
    it was killed by that signal. ``status`` is one of "ok", "error",
    "timeout" or "killed".
    """

    command: str
    exit_code: int | None
    output: str  # stdout and stderr interleaved
    truncated: bool
    status: str
    duration_ms: float

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def __repr__(self) -> str:
        if self.success:
            return f"<ShellResult ok, {self.duration_ms:.0f} ms>"
        return f"<ShellResult {self.status}, exit={self.exit_code}>"
