"""Operator-facing console output.

Directory summaries, the "File(s) changed:" report, the idle indicator and
warning/fatal lines are printed here with rich. Diagnostics belong to
livewatch.logging instead.
"""

from __future__ import annotations

from rich.console import Console


def _dir_string(count: int) -> str:
    return "dir is" if count == 1 else "dirs are"


class Reporter:
    """Prints the watch process's human-readable status lines."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def _print(self, text: str, style: str | None = None) -> None:
        self.console.print(text, style=style, markup=False, highlight=False)

    def _ok(self, text: str) -> None:
        self._print(f">> {text}", style="green")

    def dirs_removed(self, count: int) -> None:
        self._print(f"{count} {_dir_string(count)} no longer watched", style="cyan")

    def dirs_added(self, count: int, elapsed_ms: float) -> None:
        self._print(
            f"{count} more {_dir_string(count)} now being watched, within {elapsed_ms:.0f} ms.",
            style="cyan",
        )

    def files_changed(self, files: list[str]) -> None:
        self._print("")
        self._print("File(s) changed:")
        self._ok("\n".join(files))

    def continuing(self) -> None:
        self._print("")
        self._print("Continuing watch")

    def waiting(self) -> None:
        self._ok("Waiting...")

    def info(self, text: str) -> None:
        self._print(text)

    def task_output(self, text: str) -> None:
        self._print(text.rstrip("\n"), style="dim")

    def warning(self, message: str, beep: bool = False) -> None:
        if beep:
            self.console.bell()
        self._print(f"Warning: {message}", style="yellow")

    def fatal(self, message: str, beep: bool = False) -> None:
        if beep:
            self.console.bell()
        self._print(f"Fatal error: {message}", style="red")
