"""Logic for deep merging cross-reference configuration dictionaries."""

from typing import Any

ADDITIVE_KEYS = frozenset({"disabled_types"})


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two configuration dictionaries.

    - Nested sections (url_patterns, batch, cache...) are merged recursively.
    - Lists in 'update' replace 'base' lists, EXCEPT for additive keys.
    - 'disabled_types' is additive: a user file can only switch more kinds off.
    """
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif (
            key in ADDITIVE_KEYS
            and isinstance(value, list)
            and isinstance(result.get(key), list)
        ):
            merged = set(result[key])
            merged.update(value)
            result[key] = sorted(merged)
        else:
            result[key] = value
    return result
