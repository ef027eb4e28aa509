"""Helpers for canonical ordering of mapping values."""

from typing import Any


def sort_mapping_keys(value: Any) -> Any:
    """Return value with every nested dict rebuilt in sorted key order.

    Lists are walked so dicts inside them are sorted too. Any other value,
    including pydantic models and dataclasses, is returned unchanged.

    Raises:
        TypeError: If a dict holds keys that cannot be compared.
    """
    if isinstance(value, dict):
        return {key: sort_mapping_keys(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [sort_mapping_keys(item) for item in value]
    return value
