"""
Attribute validators used in resource schemas.

A validator takes (value, key) and returns a list of error messages; an
empty list means the value is valid.
"""

from typing import Any, Callable, Iterable

ValidateFunc = Callable[[Any, str], list[str]]


def no_empty_strings(value: Any, key: str) -> list[str]:
    """Reject values that are not strings or are blank."""
    if not isinstance(value, str):
        return [f"expected type of {key} to be string"]
    if value.strip() == "":
        return [f"{key} must not be empty"]
    return []


def string_in_slice(valid: Iterable[str], ignore_case: bool) -> ValidateFunc:
    """Build a validator accepting only the given strings."""
    valid = list(valid)

    def _validate(value: Any, key: str) -> list[str]:
        if not isinstance(value, str):
            return [f"expected type of {key} to be string"]
        for candidate in valid:
            if value == candidate or (ignore_case and value.lower() == candidate.lower()):
                return []
        return [f"expected {key} to be one of {valid}, got {value}"]

    return _validate


def int_at_least(minimum: int) -> ValidateFunc:
    """Build a validator accepting integers >= minimum."""

    def _validate(value: Any, key: str) -> list[str]:
        if not isinstance(value, int) or isinstance(value, bool):
            return [f"expected type of {key} to be integer"]
        if value < minimum:
            return [f"expected {key} to be at least ({minimum}), got {value}"]
        return []

    return _validate
