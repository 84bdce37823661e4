"""
Nil-safe conversions between REST payload values and schema attributes.
"""

import re
from typing import Any, Optional

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def to_string(value: Optional[str], default: str) -> str:
    """Return value, or default when value is None."""
    if value is None:
        return default
    return value


def to_bool(value: Optional[bool], default: bool) -> bool:
    """Return value, or default when value is None."""
    if value is None:
        return default
    return value


def to_int(value: Any, default: int) -> int:
    """Return value as an int, or default when value is None."""
    if value is None:
        return default
    return int(value)


def atoi(value: str) -> int:
    """
    Parse a base-10 integer ID.

    Unlike int(), surrounding whitespace and digit separators are rejected.

    Raises:
        ValueError: value is not a plain integer.
    """
    if not isinstance(value, str) or not _INT_PATTERN.fullmatch(value):
        raise ValueError(f'invalid syntax: "{value}"')
    return int(value)
