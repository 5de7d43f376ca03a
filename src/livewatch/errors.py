"""Exception types raised across livewatch."""

from __future__ import annotations


class LiveWatchError(Exception):
    """Base class for livewatch errors."""


class TaskWarning(LiveWatchError):
    """A task reported a non-fatal problem (e.g. a non-zero exit code)."""


class TaskFatal(LiveWatchError):
    """A task reported a problem it cannot continue from."""


class ConfigError(LiveWatchError):
    """Configuration values are invalid."""


class LiveReloadBindError(LiveWatchError):
    """The live reload port is held by another process.

    No restart can fix an externally held port, so this is the one
    condition that is allowed to terminate the watch process.
    """

    def __init__(self, port: int, cause: OSError | None = None) -> None:
        super().__init__(f"Port {port} is already in use by another process.")
        self.port = port
        self.cause = cause
