"""livewatch: directory watcher that runs tasks on change and drives live reload."""

__version__ = "0.1.0"

# Public API
from livewatch.config import Config, load_config
from livewatch.errors import (
    ConfigError,
    LiveReloadBindError,
    LiveWatchError,
    TaskFatal,
    TaskWarning,
)
from livewatch.hooks import Hooks
from livewatch.orchestrator import WatchOrchestrator
from livewatch.tasks import TaskBatch, TaskGroup
from livewatch.terminal import ShellTaskRunner, TaskRunner

__all__ = [
    # Main entry point
    "WatchOrchestrator",
    "Hooks",
    # Config
    "Config",
    "load_config",
    # Tasks
    "TaskBatch",
    "TaskGroup",
    "TaskRunner",
    "ShellTaskRunner",
    # Errors
    "LiveWatchError",
    "ConfigError",
    "LiveReloadBindError",
    "TaskWarning",
    "TaskFatal",
]
