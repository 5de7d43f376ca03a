"""Configuration schema dataclasses for livewatch.

Defines the structure of configuration at all levels (user, project,
explicit file, CLI). Defaults live here so partial configs merge cleanly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

# A trigger maps a file path to one or more task names.
TriggerFn = Callable[[str], Union[str, list[str], None]]
TriggerEntry = Union[TriggerFn, str, list[str]]

DEFAULT_DEBOUNCE_DELAY = 0.2
DEFAULT_UNLOCK_INTERVAL = 0.01
DEFAULT_UNLOCK_TRY_LIMIT = 50
DEFAULT_LIVERELOAD_PORT = 35729


@dataclass
class WatchConfig:
    """Which directories to watch and how to pace change handling.

    Example config.yaml:
        watch:
          dirs: ["app/**", "!app/vendor"]
          ignored_files: ["*.tmp", ".#*"]
          debounce_delay: 0.2
    """

    dirs: list[str] = field(
        default_factory=lambda: ["**", "!.git", "!node_modules", "!bower_components"]
    )  # Glob patterns, "!" excludes
    ignored_files: list[str] = field(default_factory=list)  # Base-name globs, dot files match
    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY  # Seconds of quiet before a cycle
    unlock_interval: float = DEFAULT_UNLOCK_INTERVAL  # Seconds between lock probes
    unlock_try_limit: int = DEFAULT_UNLOCK_TRY_LIMIT  # Failed probes before giving up


@dataclass
class LiveReloadConfig:
    """Live reload server configuration.

    key and cert may be file paths or the PEM bytes themselves.
    """

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = DEFAULT_LIVERELOAD_PORT
    extensions: list[str] = field(default_factory=lambda: ["js", "css", "html"])
    key: str | bytes | None = None
    cert: str | bytes | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0..4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    livereload: LiveReloadConfig = field(default_factory=LiveReloadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # extension (without dot) or "*" -> task name(s) or a callable
    triggers: dict[str, TriggerEntry] = field(default_factory=dict)
    # task name -> shell command
    tasks: dict[str, str] = field(default_factory=dict)

    beep: bool = True  # Friendly beep on error
    error_stack: bool = True  # Include tracebacks in warning/fatal output
    force: bool = False  # Keep going after warnings/fatals instead of restarting

    # Extension point for unknown sections
    extra: dict[str, Any] = field(default_factory=dict)
