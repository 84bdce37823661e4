"""
Branch policy requiring a minimum number of reviewers.
"""

import uuid

from azdo_provider.models.policy import PolicyConfiguration, PolicyType
from azdo_provider.resources.branch_policy import (
    SCHEMA_SETTINGS,
    PolicyCrudArgs,
    base_expand_func,
    base_flatten_func,
    decode_settings,
    gen_base_policy_resource,
)
from azdo_provider.schema import Resource, ResourceData, Schema, SchemaType
from azdo_provider.utils import int_at_least, to_bool, to_int

SCHEMA_REVIEWER_COUNT = "reviewer_count"
SCHEMA_SUBMITTER_CAN_VOTE = "submitter_can_vote"

_SETTING_MINIMUM_APPROVER_COUNT = "minimumApproverCount"
_SETTING_CREATOR_VOTE_COUNTS = "creatorVoteCounts"


def resource_branch_policy_min_reviewers() -> Resource:
    resource = gen_base_policy_resource(
        PolicyCrudArgs(
            policy_type=PolicyType.MIN_REVIEWER_COUNT,
            expand_func=_expand_min_reviewer_policy,
            flatten_func=_flatten_min_reviewer_policy,
        )
    )

    settings_schema = resource.schema[SCHEMA_SETTINGS].elem
    settings_schema[SCHEMA_REVIEWER_COUNT] = Schema(
        type=SchemaType.INT,
        optional=True,
        default=1,
        validate_func=int_at_least(1),
        description="The number of reviewers needed to approve",
    )
    settings_schema[SCHEMA_SUBMITTER_CAN_VOTE] = Schema(
        type=SchemaType.BOOL,
        optional=True,
        default=False,
        description="Allow requesters to approve their own changes",
    )
    return resource


def _flatten_min_reviewer_policy(
    d: ResourceData, policy_config: PolicyConfiguration, project_id: str
) -> None:
    base_flatten_func(d, policy_config, project_id)

    policy_settings = decode_settings(policy_config.settings)
    settings = d.get(SCHEMA_SETTINGS)
    settings[0][SCHEMA_REVIEWER_COUNT] = to_int(
        policy_settings.get(_SETTING_MINIMUM_APPROVER_COUNT), 1
    )
    settings[0][SCHEMA_SUBMITTER_CAN_VOTE] = to_bool(
        policy_settings.get(_SETTING_CREATOR_VOTE_COUNTS), False
    )
    d.set(SCHEMA_SETTINGS, settings)


def _expand_min_reviewer_policy(
    d: ResourceData, type_id: uuid.UUID
) -> tuple[PolicyConfiguration, str]:
    policy_config, project_id = base_expand_func(d, type_id)

    settings = d.get(SCHEMA_SETTINGS)[0]
    policy_config.settings[_SETTING_MINIMUM_APPROVER_COUNT] = settings[SCHEMA_REVIEWER_COUNT]
    policy_config.settings[_SETTING_CREATOR_VOTE_COUNTS] = settings[SCHEMA_SUBMITTER_CAN_VOTE]

    return policy_config, project_id
