"""Task runners: what actually executes a dispatched task list."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from livewatch.errors import TaskFatal, TaskWarning
from livewatch.logging import get_logger
from livewatch.terminal.subprocess_executor import SubprocessTerminalExecutor

if TYPE_CHECKING:
    from livewatch.console import Reporter

log = get_logger("tasks")


class TaskRunner(Protocol):
    """Executes task names in order.

    Returning means the sequence completed. Raise TaskWarning for a
    recoverable failure and TaskFatal (or anything else) for a fatal one.
    """

    async def run(self, task_names: list[str]) -> None: ...


class ShellTaskRunner:
    """Runs each task's configured shell command, stopping at the first failure."""

    def __init__(
        self,
        commands: Mapping[str, str],
        executor: SubprocessTerminalExecutor | None = None,
        reporter: Reporter | None = None,
        cwd: str = ".",
        timeout: float | None = None,
    ) -> None:
        self._commands = dict(commands)
        self._executor = executor or SubprocessTerminalExecutor(default_cwd=cwd)
        self._reporter = reporter
        self._timeout = timeout

    async def run(self, task_names: list[str]) -> None:
        for name in task_names:
            command = self._commands.get(name)
            if command is None:
                raise TaskFatal(f'Task "{name}" not found.')

            if self._reporter:
                self._reporter.info(f'Running "{name}" task')
            log.info("Running task %s: %s", name, command)

            result = await self._executor.execute(command, timeout=self._timeout)
            if result.output and self._reporter:
                self._reporter.task_output(result.output)
            log.debug("Task %s finished: %r", name, result)

            if not result.success:
                raise TaskWarning(
                    f'Task "{name}" failed ({result.status}, exit={result.exit_code}).'
                )
