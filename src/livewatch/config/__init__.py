"""Configuration management for livewatch.

Provides hierarchical YAML-based configuration with:
- User-level config (~/.config/livewatch/ or %APPDATA%)
- Project-level config (<root>/.livewatch.yaml)
- An explicit --config file
- Environment variable and CLI overrides (highest priority)

Example usage:
    from livewatch.config import load_config

    config = load_config(root="/path/to/project")
    print(config.watch.dirs)
    print(config.livereload.port)
"""

from livewatch.config.loader import dict_to_config, load_config
from livewatch.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
)
from livewatch.config.schema import (
    Config,
    LiveReloadConfig,
    LoggingConfig,
    WatchConfig,
)

__all__ = [
    "Config",
    "load_config",
    "dict_to_config",
    "WatchConfig",
    "LiveReloadConfig",
    "LoggingConfig",
    "get_config_paths",
    "get_user_config_path",
    "get_project_config_path",
]
