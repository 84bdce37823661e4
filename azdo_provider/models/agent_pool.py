"""
Agent pool model.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class PoolType(str, Enum):
    """Agent pool types."""

    AUTOMATION = "automation"
    DEPLOYMENT = "deployment"

    @classmethod
    def parse(cls, value: str) -> "PoolType":
        for pool_type in cls:
            if pool_type.value == value:
                return pool_type
        raise ValueError(f"unknown agent pool type {value!r}")


@dataclass
class TaskAgentPool:
    """An organization-level agent pool."""
    name: str
    pool_type: PoolType = PoolType.AUTOMATION
    auto_provision: bool = False
    id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the REST request body."""
        body: dict[str, Any] = {
            "name": self.name,
            "poolType": self.pool_type.value,
            "autoProvision": self.auto_provision,
        }
        if self.id is not None:
            body["id"] = self.id
        return body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskAgentPool":
        """Build from a REST response body."""
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            pool_type=PoolType.parse(data.get("poolType") or PoolType.AUTOMATION.value),
            auto_provision=bool(data.get("autoProvision", False)),
        )

    def __repr__(self) -> str:
        return f"<TaskAgentPool(id={self.id}, name={self.name}, pool_type={self.pool_type.value})>"
