"""
Branch policy requiring a successful build before merging.
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
from azdo_provider.utils import int_at_least, no_empty_strings

SCHEMA_BUILD_DEFINITION_ID = "build_definition_id"
SCHEMA_DISPLAY_NAME = "display_name"
SCHEMA_VALID_DURATION = "valid_duration"
SCHEMA_QUEUE_ON_SOURCE_UPDATE_ONLY = "queue_on_source_update_only"
SCHEMA_MANUAL_QUEUE_ONLY = "manual_queue_only"

DEFAULT_DISPLAY_NAME = "Managed by Terraform"
DEFAULT_VALID_DURATION = 720

# Schema key -> settings member, with the value used when the member is absent
_SETTINGS_FIELDS = {
    SCHEMA_BUILD_DEFINITION_ID: ("buildDefinitionId", 0),
    SCHEMA_DISPLAY_NAME: ("displayName", DEFAULT_DISPLAY_NAME),
    SCHEMA_VALID_DURATION: ("validDuration", DEFAULT_VALID_DURATION),
    SCHEMA_QUEUE_ON_SOURCE_UPDATE_ONLY: ("queueOnSourceUpdateOnly", True),
    SCHEMA_MANUAL_QUEUE_ONLY: ("manualQueueOnly", False),
}


def resource_branch_policy_build_validation() -> Resource:
    resource = gen_base_policy_resource(
        PolicyCrudArgs(
            policy_type=PolicyType.SUCCESSFUL_BUILD,
            expand_func=_expand_build_policy,
            flatten_func=_flatten_build_policy,
        )
    )

    settings_schema = resource.schema[SCHEMA_SETTINGS].elem
    settings_schema[SCHEMA_BUILD_DEFINITION_ID] = Schema(
        type=SchemaType.INT,
        required=True,
        validate_func=int_at_least(1),
        description="The ID of the build definition to run",
    )
    settings_schema[SCHEMA_DISPLAY_NAME] = Schema(
        type=SchemaType.STRING,
        optional=True,
        default=DEFAULT_DISPLAY_NAME,
        validate_func=no_empty_strings,
    )
    settings_schema[SCHEMA_VALID_DURATION] = Schema(
        type=SchemaType.INT,
        optional=True,
        default=DEFAULT_VALID_DURATION,
        validate_func=int_at_least(0),
        description="Minutes a successful build stays valid; 0 means it never expires",
    )
    settings_schema[SCHEMA_QUEUE_ON_SOURCE_UPDATE_ONLY] = Schema(
        type=SchemaType.BOOL,
        optional=True,
        default=True,
    )
    settings_schema[SCHEMA_MANUAL_QUEUE_ONLY] = Schema(
        type=SchemaType.BOOL,
        optional=True,
        default=False,
    )
    return resource


def _flatten_build_policy(
    d: ResourceData, policy_config: PolicyConfiguration, project_id: str
) -> None:
    base_flatten_func(d, policy_config, project_id)

    policy_settings = decode_settings(policy_config.settings)
    settings = d.get(SCHEMA_SETTINGS)
    for key, (member, default) in _SETTINGS_FIELDS.items():
        value = policy_settings.get(member)
        settings[0][key] = default if value is None else value
    d.set(SCHEMA_SETTINGS, settings)


def _expand_build_policy(
    d: ResourceData, type_id: uuid.UUID
) -> tuple[PolicyConfiguration, str]:
    policy_config, project_id = base_expand_func(d, type_id)

    settings = d.get(SCHEMA_SETTINGS)[0]
    for key, (member, _) in _SETTINGS_FIELDS.items():
        policy_config.settings[member] = settings[key]

    return policy_config, project_id
