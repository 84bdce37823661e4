# Azure DevOps Models
from azdo_provider.models.policy import (
    MatchKind,
    PolicyConfiguration,
    PolicyType,
    PolicyTypeRef,
    ScopeEntry,
)
from azdo_provider.models.agent_pool import PoolType, TaskAgentPool

__all__ = [
    "MatchKind",
    "PolicyConfiguration",
    "PolicyType",
    "PolicyTypeRef",
    "ScopeEntry",
    "PoolType",
    "TaskAgentPool",
]
