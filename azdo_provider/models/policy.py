"""
Policy configuration model.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PolicyType(Enum):
    """Azure DevOps policy type IDs.

    These are global and can be listed with the policy types endpoint:
    https://docs.microsoft.com/en-us/rest/api/azure/devops/policy/types/list?view=azure-devops-rest-5.1
    """

    NO_ACTIVE_COMMENTS = uuid.UUID("c6a1889d-b943-4856-b76f-9e46bb6b0df2")
    MIN_REVIEWER_COUNT = uuid.UUID("fa4e907d-c16b-4a4c-9dfa-4906e5d171dd")
    SUCCESSFUL_BUILD = uuid.UUID("0609b952-1397-4640-95ec-e00a01b2c241")


class MatchKind(str, Enum):
    """Branch name matching strategy used by a policy scope."""

    EXACT = "Exact"
    PREFIX = "Prefix"


@dataclass
class ScopeEntry:
    """A (repository, ref, match kind) filter narrowing where a policy applies.

    An empty repository_id means all repositories; an empty repository_ref
    means all branches.
    """
    repository_id: str = ""
    repository_ref: str = ""
    match_type: str = MatchKind.EXACT.value


@dataclass
class PolicyTypeRef:
    id: uuid.UUID

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id)}

    @classmethod
    def from_dict(cls, data: Any) -> "PolicyTypeRef":
        if not isinstance(data, dict) or data.get("id") is None:
            raise ValueError("policy configuration has no type id")
        return cls(id=uuid.UUID(str(data["id"])))


@dataclass
class PolicyConfiguration:
    """A policy configuration as exchanged with the REST API.

    The shape of settings depends on the policy type, so it is kept as a
    plain mapping and decoded by the resource that owns the type.
    """
    type: PolicyTypeRef
    is_enabled: bool = True
    is_blocking: bool = True
    settings: Any = field(default_factory=dict)
    id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the REST request body."""
        body: dict[str, Any] = {
            "isEnabled": self.is_enabled,
            "isBlocking": self.is_blocking,
            "type": self.type.to_dict(),
            "settings": self.settings,
        }
        if self.id is not None:
            body["id"] = self.id
        return body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PolicyConfiguration":
        """Build from a REST response body."""
        return cls(
            id=data.get("id"),
            is_enabled=data.get("isEnabled", True),
            is_blocking=data.get("isBlocking", True),
            type=PolicyTypeRef.from_dict(data.get("type")),
            settings=data.get("settings") or {},
        )
