"""String helpers shared by the canonicalizer and the diff appliers."""

from __future__ import annotations


def has_prefix(value: str, prefix: str) -> bool:
    """Return True if *value* starts with *prefix*.

    Examples:
        >>> has_prefix("192.168.0.7", "192.168.0.")
        True
        >>> has_prefix("10.0.0.1", "192.168.0.")
        False
    """
    if len(value) < len(prefix):
        return False
    return value[: len(prefix)] == prefix


def has_suffix(value: str, suffix: str) -> bool:
    """Return True if *value* ends with *suffix*.

    Examples:
        >>> has_suffix("10Mbit/s", "bit/s")
        True
        >>> has_suffix("10", "bit/s")
        False
    """
    if len(value) < len(suffix):
        return False
    return value[len(value) - len(suffix) :] == suffix


def strip_prefix(value: str, prefix: str) -> str:
    """Remove *prefix* from *value* when present, otherwise return it unchanged.

    Examples:
        >>> strip_prefix("192.168.0.7", "192.168.0.")
        '7'
        >>> strip_prefix("fe80::1", "192.168.0.")
        'fe80::1'
    """
    if prefix and has_prefix(value, prefix):
        return value[len(prefix) :]
    return value
