"""
Error types raised by the Azure DevOps client and resource handlers.
"""

from typing import Any, Optional


class AzureDevOpsError(RuntimeError):
    """
    Base error for remote and handler failures. Carries metadata for structured logging.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.metadata = metadata or {}


class NotFoundError(AzureDevOpsError):
    """Raised when the remote API reports that an entity does not exist."""


class ResourceError(AzureDevOpsError):
    """Raised by a lifecycle operation; wraps local format errors and remote failures."""


class ConfigError(AzureDevOpsError):
    """Raised when configuration is invalid or missing."""


class SettingsDecodeError(ValueError):
    """Raised when a policy settings payload does not have the expected shape."""
