"""Layering of configuration dicts (user < project < --config < env < CLI)."""

from __future__ import annotations

from functools import reduce
from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``override`` layered onto ``base``.

    Nested mappings merge key by key; anything else, lists included, is
    replaced. A None in ``override`` leaves the base value alone, so CLI
    flags that were not given do not clobber file settings.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_configs(*layers: dict[str, Any] | None) -> dict[str, Any]:
    """Fold config layers left to right. Empty layers are skipped."""
    return reduce(deep_merge, (layer for layer in layers if layer), {})
