"""Shared field checks for the reference state types.

``from_dict`` implementations use these to reject structurally malformed
payloads with ``TypeError``/``ValueError``, which the adapter reports as
``DecodeError``.
"""

from __future__ import annotations

from typing import Any


def require_mapping(data: Any, what: str) -> dict:
    """Return ``data`` if it is a JSON object, else raise TypeError."""
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be an object, got {type(data).__name__}")
    return data


def require_int(value: Any, what: str, minimum: int | None = None) -> int:
    """Return ``value`` if it is an int (not bool) no smaller than ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an integer, got {type(value).__name__}")
    if minimum is not None and value < minimum:
        raise ValueError(f"{what} must be >= {minimum}, got {value}")
    return value


def require_str(value: Any, what: str) -> str:
    """Return ``value`` if it is a non-empty string."""
    if not isinstance(value, str) or not value:
        raise TypeError(f"{what} must be a non-empty string, got {value!r}")
    return value


def optional_str_set(data: dict, name: str) -> frozenset[str] | None:
    """Read an optional list of strings from ``data[name]``."""
    raw = data.get(name)
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise TypeError(f"{name} must be a list, got {type(raw).__name__}")
    return frozenset(require_str(item, f"{name} entry") for item in raw)
