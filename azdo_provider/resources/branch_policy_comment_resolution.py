"""
Branch policy requiring all pull request comments to be resolved.

The policy has no settings beyond the common scopes.
"""

from azdo_provider.models.policy import PolicyType
from azdo_provider.resources.branch_policy import (
    PolicyCrudArgs,
    base_expand_func,
    base_flatten_func,
    gen_base_policy_resource,
)
from azdo_provider.schema import Resource


def resource_branch_policy_comment_resolution() -> Resource:
    return gen_base_policy_resource(
        PolicyCrudArgs(
            policy_type=PolicyType.NO_ACTIVE_COMMENTS,
            expand_func=base_expand_func,
            flatten_func=base_flatten_func,
        )
    )
