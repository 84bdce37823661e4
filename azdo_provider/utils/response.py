"""
Classification of remote client errors.
"""

from typing import Optional

from azdo_provider.errors import NotFoundError


def response_was_not_found(err: Optional[BaseException]) -> bool:
    """Return True if err reports a missing remote entity."""
    return isinstance(err, NotFoundError)
