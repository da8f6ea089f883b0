from typing import Any

UNSET = object()
"""Marker for CLI options the user did not set. Dropped by `recursive_merge`."""


def recursive_merge(*dictionaries: dict | None) -> dict:
    """Merge dictionaries left to right; later values win, nested dicts are merged.

    Values that are `UNSET` are skipped so that unset CLI flags never clobber
    values coming from config files.
    """
    result: dict[str, Any] = {}
    for d in dictionaries:
        if d is None:
            continue
        for key, value in d.items():
            if value is UNSET:
                continue
            if isinstance(value, dict) and isinstance(result.get(key), dict):
                result[key] = recursive_merge(result[key], value)
            elif isinstance(value, dict):
                result[key] = recursive_merge(value)
            else:
                result[key] = value
    return result
