"""Subprocess-based executor for task shell commands."""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import sys
import time

from livewatch.terminal.result import ShellResult

_POSIX = sys.platform != "win32"

# Seconds to wait for a killed shell to be reaped after cancellation.
_REAP_TIMEOUT = 5.0


def _kill(process: asyncio.subprocess.Process) -> None:
    """Kill the shell and everything it started.

    On POSIX the shell leads its own session, so the whole process group
    goes; elsewhere only the shell itself can be killed.
    """
    with contextlib.suppress(ProcessLookupError):
        if _POSIX:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()


class SubprocessTerminalExecutor:
    """Execute shell command lines using asyncio subprocess."""

    def __init__(self, default_cwd: str = ".") -> None:
        self._default_cwd = default_cwd

    async def execute(
        self,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        output_limit: int = 50000,
    ) -> ShellResult:
        """Run a command line through the system shell.

        Args:
            command: Full command line, e.g. "npm run build".
            cwd: Working directory. Uses default_cwd if None.
            env: Extra environment variables on top of ours.
            timeout: Seconds before the command is killed. None waits forever.
            output_limit: Maximum characters of output to keep.
        """
        started = time.perf_counter()

        def result(exit_code: int | None, output: str, status: str, truncated: bool = False):
            return ShellResult(
                command=command,
                exit_code=exit_code,
                output=output,
                truncated=truncated,
                status=status,
                duration_ms=(time.perf_counter() - started) * 1000,
            )

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=cwd or self._default_cwd,
                env={**os.environ, **(env or {})},
                start_new_session=_POSIX,
            )
        except OSError as e:
            # Usually a missing cwd; a missing program is the shell's 127.
            return result(126 if isinstance(e, PermissionError) else 127,
                          f"Could not start command: {e}", "error")

        try:
            stdout_data, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            _kill(process)
            await process.wait()
            return result(None, f"Command timed out after {timeout}s", "timeout")
        except asyncio.CancelledError:
            # Watch was reset or stopped while the task ran.
            if process.returncode is None:
                _kill(process)
                with contextlib.suppress(asyncio.TimeoutError, asyncio.CancelledError):
                    await asyncio.wait_for(asyncio.shield(process.wait()), timeout=_REAP_TIMEOUT)
            raise

        output = stdout_data.decode("utf-8", errors="replace")
        truncated = len(output) > output_limit
        if truncated:
            output = output[:output_limit] + "\n... (output truncated)"

        exit_code = process.returncode
        if exit_code is not None and exit_code < 0:
            status = "killed"
        else:
            status = "ok" if exit_code == 0 else "error"
        return result(exit_code, output, status, truncated)
