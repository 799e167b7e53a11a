"""Merge utilities for layered settings."""

from typing import Any


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base, recursing into nested dicts.

    Non-dict values in overlay replace those in base. Neither input is mutated.

    Args:
        base: Lower-priority settings
        overlay: Higher-priority settings

    Returns:
        Merged settings dict
    """
    result = dict(base)
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
