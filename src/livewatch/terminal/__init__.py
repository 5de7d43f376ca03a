"""Task execution through local shell commands.

The coordinator only needs a TaskRunner; ShellTaskRunner is the default,
mapping task names to the command lines in the ``tasks`` config section.
"""

from livewatch.terminal.result import ShellResult
from livewatch.terminal.runner import ShellTaskRunner, TaskRunner
from livewatch.terminal.subprocess_executor import SubprocessTerminalExecutor

__all__ = [
    "ShellResult",
    "ShellTaskRunner",
    "SubprocessTerminalExecutor",
    "TaskRunner",
]
