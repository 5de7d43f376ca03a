"""Configuration file loading.

Handles:
- YAML file parsing
- Environment variable overrides
- Conversion from dict to typed Config dataclass, with validation
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from livewatch.config.merge import merge_configs
from livewatch.config.paths import get_config_paths
from livewatch.config.schema import (
    Config,
    LiveReloadConfig,
    LoggingConfig,
    TriggerEntry,
    WatchConfig,
)
from livewatch.errors import ConfigError
from livewatch.logging import get_logger

_log = get_logger("config")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables.

    LIVEWATCH_LOG sets logging.file, LIVEWATCH_PORT sets livereload.port.
    """
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("LIVEWATCH_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    port = os.environ.get("LIVEWATCH_PORT")
    if port:
        try:
            overrides.setdefault("livereload", {})["port"] = int(port)
        except ValueError:
            _log.warning("Ignoring non-numeric LIVEWATCH_PORT=%r", port)

    return overrides


def _string_list(value: Any, name: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{name} must be a list of strings")
    return list(value)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a mapping, got {type(section).__name__}")
    return section


def _number(section: dict[str, Any], key: str, default: Any, kind: type, prefix: str) -> Any:
    value = section.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{prefix}.{key} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{prefix}.{key} must be a number, got {value!r}") from None


def _parse_triggers(data: Any) -> dict[str, TriggerEntry]:
    if not isinstance(data, dict):
        raise ConfigError("triggers must be a mapping of extension to task names")
    triggers: dict[str, TriggerEntry] = {}
    for ext, entry in data.items():
        key = str(ext).lstrip(".")
        if callable(entry):
            triggers[key] = entry
        else:
            triggers[key] = _string_list(entry, f"triggers.{key}")
    return triggers


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass.

    Raises:
        ConfigError: If a value is out of range or of the wrong shape.
    """
    defaults = Config()

    watch_data = _section(data, "watch")
    watch = WatchConfig(
        dirs=_string_list(watch_data.get("dirs", defaults.watch.dirs), "watch.dirs"),
        ignored_files=_string_list(
            watch_data.get("ignored_files", defaults.watch.ignored_files),
            "watch.ignored_files",
        ),
        debounce_delay=_number(
            watch_data, "debounce_delay", defaults.watch.debounce_delay, float, "watch"
        ),
        unlock_interval=_number(
            watch_data, "unlock_interval", defaults.watch.unlock_interval, float, "watch"
        ),
        unlock_try_limit=_number(
            watch_data, "unlock_try_limit", defaults.watch.unlock_try_limit, int, "watch"
        ),
    )
    if watch.debounce_delay < 0 or watch.unlock_interval < 0:
        raise ConfigError("watch delays must not be negative")
    if watch.unlock_try_limit < 1:
        raise ConfigError("watch.unlock_try_limit must be at least 1")

    lr_data = _section(data, "livereload")
    livereload = LiveReloadConfig(
        enabled=bool(lr_data.get("enabled", defaults.livereload.enabled)),
        host=str(lr_data.get("host", defaults.livereload.host)),
        port=_number(lr_data, "port", defaults.livereload.port, int, "livereload"),
        extensions=[
            e.lstrip(".")
            for e in _string_list(
                lr_data.get("extensions", defaults.livereload.extensions),
                "livereload.extensions",
            )
        ],
        key=lr_data.get("key"),
        cert=lr_data.get("cert"),
    )
    if not 0 < livereload.port < 65536:
        raise ConfigError(f"livereload.port out of range: {livereload.port}")

    log_data = _section(data, "logging")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    tasks_data = _section(data, "tasks")

    known_keys = {
        "watch", "livereload", "logging", "triggers", "tasks",
        "beep", "error_stack", "force",
    }
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(
        watch=watch,
        livereload=livereload,
        logging=logging_config,
        triggers=_parse_triggers(data.get("triggers", {})),
        tasks={str(k): str(v) for k, v in tasks_data.items()},
        beep=bool(data.get("beep", defaults.beep)),
        error_stack=bool(data.get("error_stack", defaults.error_stack)),
        force=bool(data.get("force", defaults.force)),
        extra=extra,
    )


def load_config(
    root: str | Path | None = None,
    config_file: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Explicit overrides (CLI flags)
    2. Environment variables
    3. Explicit config file (--config)
    4. Project config (<root>/.livewatch.yaml)
    5. User config

    Raises:
        ConfigError: If an explicit config file is missing or values are invalid.
    """
    configs: list[dict[str, Any]] = []

    for path in get_config_paths(root):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    if config_file is not None:
        path = Path(config_file)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        configs.append(load_yaml_file(path))

    configs.append(env_overrides())
    if overrides:
        configs.append(overrides)

    return dict_to_config(merge_configs(*configs))
