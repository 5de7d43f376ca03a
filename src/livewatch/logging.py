"""Diagnostic logging for livewatch.

Everything logs under the ``livewatch`` logger (children via get_logger).
Two extra levels sit around INFO: VERBOSE for per-file decisions such as
deferrals, unlock retries and replays, and TRACE below DEBUG.

Output goes to the file named by ``logging.file`` or LIVEWATCH_LOG, or to
stderr when that is a real terminal. The embedded uvicorn server logs into
the same handlers.

Operator-facing lines ("File(s) changed:", "Waiting...") are not log
records; see livewatch.console.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from livewatch.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("livewatch")

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error")

_configured = False

_LEVEL_NAMES = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# -v count on top of the default of 2 (info)
_VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)


class _Formatter(logging.Formatter):
    """``12:00:01 watching verbose: message`` style lines."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        name = record.name
        if name.startswith("livewatch."):
            name = name[len("livewatch."):]
        record.component = name
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Effective level for a LoggingConfig.

    ``verbose`` (0..4) wins over ``level``; anything above 4 means TRACE.
    """
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        index = max(config.verbose, 0)
        return _VERBOSITY_LEVELS[min(index, len(_VERBOSITY_LEVELS) - 1)]
    if config.level:
        return _LEVEL_NAMES.get(config.level.upper(), logging.INFO)
    return logging.INFO


def _open_handler(config: LoggingConfig | None) -> logging.Handler | None:
    path = config.file if config and config.file else os.environ.get("LIVEWATCH_LOG")
    if path:
        try:
            return logging.FileHandler(os.path.expanduser(path), mode="a", encoding="utf-8")
        except OSError as e:
            if sys.stderr.isatty():
                print(f"[livewatch] Failed to open log file: {e}", file=sys.stderr)
            else:
                return None
    if sys.stderr.isatty():
        return logging.StreamHandler(sys.stderr)
    return None


def setup_logging(config: LoggingConfig | None = None) -> int:
    """Attach handlers once at startup. Later calls change nothing.

    Returns:
        The level livewatch logs at.
    """
    global _configured
    level = resolve_level(config)
    if _configured:
        return logger.level
    _configured = True

    logger.setLevel(level)
    handler = _open_handler(config)
    if handler is None:
        return level

    handler.setLevel(level)
    handler.setFormatter(
        _Formatter("%(asctime)s %(component)s %(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.addHandler(handler)
        server_logger.propagate = False
    return level


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the livewatch logger, or its child ``name`` (e.g. "watching")."""
    if name:
        return logger.getChild(name)
    return logger
