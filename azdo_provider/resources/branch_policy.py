"""
Common plumbing for branch policy resources.

Every branch policy kind shares the same lifecycle against the policy
configuration endpoints and the same base schema (project, enabled,
blocking and a settings block with one or more scopes). A concrete kind
supplies its policy type plus an expand/flatten pair through
PolicyCrudArgs, and gen_base_policy_resource builds the Resource.
"""

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable

from azdo_provider.errors import AzureDevOpsError, ResourceError, SettingsDecodeError
from azdo_provider.models.policy import (
    MatchKind,
    PolicyConfiguration,
    PolicyType,
    PolicyTypeRef,
    ScopeEntry,
)
from azdo_provider.schema import Resource, ResourceData, ResourceImporter, Schema, SchemaType
from azdo_provider.services.client import AggregatedClient
from azdo_provider.utils import atoi, response_was_not_found, string_in_slice, to_bool, to_string

logger = logging.getLogger(__name__)


# Keys for schema elements
SCHEMA_PROJECT_ID = "project_id"
SCHEMA_ENABLED = "enabled"
SCHEMA_BLOCKING = "blocking"
SCHEMA_SETTINGS = "settings"
SCHEMA_SCOPE = "scope"
SCHEMA_REPOSITORY_ID = "repository_id"
SCHEMA_REPOSITORY_REF = "repository_ref"
SCHEMA_MATCH_TYPE = "match_type"


ExpandFunc = Callable[[ResourceData, uuid.UUID], tuple[PolicyConfiguration, str]]
FlattenFunc = Callable[[ResourceData, PolicyConfiguration, str], None]


@dataclass
class PolicyCrudArgs:
    """Arguments for gen_base_policy_resource."""
    policy_type: PolicyType
    expand_func: ExpandFunc
    flatten_func: FlattenFunc


# =============================================================================
# Settings codec
# =============================================================================


def decode_settings(raw: Any) -> dict[str, Any]:
    """
    Normalise a policy settings payload into a plain mapping.

    The API returns settings as an untyped JSON document, either already
    parsed or as text. The payload is round-tripped through JSON so that
    only JSON types remain.

    Raises:
        SettingsDecodeError: The payload is not a JSON object.
    """
    if raw is None:
        return {}

    try:
        text = raw if isinstance(raw, (str, bytes)) else json.dumps(raw)
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise SettingsDecodeError(f"Policy settings are not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise SettingsDecodeError(
            f"Policy settings must be an object, got {type(payload).__name__}"
        )
    return payload


def decode_scopes(raw: Any) -> list[ScopeEntry]:
    """
    Decode the scopes of a policy settings payload.

    Scopes are read by field name. A payload without a "scope" member has
    no scopes.

    Raises:
        SettingsDecodeError: The payload or one of its scopes has the wrong shape.
    """
    payload = decode_settings(raw)

    raw_scopes = payload.get("scope")
    if raw_scopes is None:
        return []
    if not isinstance(raw_scopes, list):
        raise SettingsDecodeError(
            f"Policy settings scope must be a list, got {type(raw_scopes).__name__}"
        )

    scopes = []
    for index, raw_scope in enumerate(raw_scopes):
        if not isinstance(raw_scope, dict):
            raise SettingsDecodeError(f"Policy settings scope {index} must be an object")
        scopes.append(
            ScopeEntry(
                repository_id=to_string(raw_scope.get("repositoryId"), ""),
                repository_ref=to_string(raw_scope.get("refName"), ""),
                match_type=to_string(raw_scope.get("matchKind"), ""),
            )
        )
    return scopes


def encode_scopes(scopes: list[ScopeEntry]) -> dict[str, Any]:
    """Encode scopes into the policy settings wire shape, preserving order."""
    return {
        SCHEMA_SCOPE: [
            {
                "repositoryId": scope.repository_id,
                "refName": scope.repository_ref,
                "matchKind": scope.match_type,
            }
            for scope in scopes
        ]
    }


def expand_settings(d: ResourceData) -> list[ScopeEntry]:
    """Read the scopes from the settings block of the schema."""
    settings_list = d.get(SCHEMA_SETTINGS)
    if not settings_list:
        raise ResourceError(f"Exactly one {SCHEMA_SETTINGS} block is required")

    settings = settings_list[0]
    return [
        ScopeEntry(
            repository_id=scope.get(SCHEMA_REPOSITORY_ID) or "",
            repository_ref=scope.get(SCHEMA_REPOSITORY_REF) or "",
            match_type=_canonical_match_type(scope.get(SCHEMA_MATCH_TYPE)),
        )
        for scope in settings.get(SCHEMA_SCOPE) or []
    ]


def _canonical_match_type(value: Any) -> str:
    """Map a match type to its MatchKind spelling, ignoring case."""
    if not value:
        return MatchKind.EXACT.value
    for kind in MatchKind:
        if kind.value.lower() == str(value).lower():
            return kind.value
    return value


def flatten_settings(scopes: list[ScopeEntry]) -> list[dict[str, Any]]:
    """Build the settings block of the schema from scopes."""
    return [
        {
            SCHEMA_SCOPE: [
                {
                    SCHEMA_REPOSITORY_ID: scope.repository_id,
                    SCHEMA_REPOSITORY_REF: scope.repository_ref,
                    SCHEMA_MATCH_TYPE: scope.match_type,
                }
                for scope in scopes
            ]
        }
    ]


# =============================================================================
# Base expand / flatten
# =============================================================================


def base_flatten_func(d: ResourceData, policy_config: PolicyConfiguration, project_id: str) -> None:
    """Flatten each of the base elements of the schema."""
    d.set_id(str(policy_config.id))
    d.set(SCHEMA_PROJECT_ID, to_string(project_id, ""))
    d.set(SCHEMA_ENABLED, to_bool(policy_config.is_enabled, True))
    d.set(SCHEMA_BLOCKING, to_bool(policy_config.is_blocking, True))
    d.set(SCHEMA_SETTINGS, flatten_settings(decode_scopes(policy_config.settings)))


def base_expand_func(d: ResourceData, type_id: uuid.UUID) -> tuple[PolicyConfiguration, str]:
    """Expand each of the base elements of the schema."""
    project_id = d.get(SCHEMA_PROJECT_ID)

    policy_config = PolicyConfiguration(
        is_enabled=d.get(SCHEMA_ENABLED),
        is_blocking=d.get(SCHEMA_BLOCKING),
        type=PolicyTypeRef(id=type_id),
        settings=encode_scopes(expand_settings(d)),
    )

    if d.id != "":
        try:
            policy_config.id = atoi(d.id)
        except ValueError as e:
            raise ResourceError(f"Error parsing policy configuration ID: ({e})") from e

    return policy_config, project_id


def gen_base_schema() -> dict[str, Schema]:
    """Build the schema shared by all branch policy kinds."""
    return {
        SCHEMA_PROJECT_ID: Schema(
            type=SchemaType.STRING,
            required=True,
            force_new=True,
        ),
        SCHEMA_ENABLED: Schema(
            type=SchemaType.BOOL,
            optional=True,
            default=True,
        ),
        SCHEMA_BLOCKING: Schema(
            type=SchemaType.BOOL,
            optional=True,
            default=True,
        ),
        SCHEMA_SETTINGS: Schema(
            type=SchemaType.LIST,
            required=True,
            min_items=1,
            max_items=1,
            elem={
                SCHEMA_SCOPE: Schema(
                    type=SchemaType.LIST,
                    required=True,
                    min_items=1,
                    elem={
                        SCHEMA_REPOSITORY_ID: Schema(
                            type=SchemaType.STRING,
                            optional=True,
                        ),
                        SCHEMA_REPOSITORY_REF: Schema(
                            type=SchemaType.STRING,
                            optional=True,
                        ),
                        SCHEMA_MATCH_TYPE: Schema(
                            type=SchemaType.STRING,
                            optional=True,
                            default=MatchKind.EXACT.value,
                            validate_func=string_in_slice(
                                [MatchKind.EXACT.value, MatchKind.PREFIX.value], True
                            ),
                        ),
                    },
                ),
            },
        ),
    }


# =============================================================================
# Resource factory
# =============================================================================


def _flatten_response(
    crud_args: PolicyCrudArgs,
    d: ResourceData,
    policy_config: PolicyConfiguration,
    project_id: str,
) -> None:
    try:
        crud_args.flatten_func(d, policy_config, project_id)
    except SettingsDecodeError as e:
        raise ResourceError(
            f"Error decoding settings of policy configuration ({policy_config.id}) in project ({project_id}): {e}",
            metadata={"policy_id": policy_config.id, "project_id": project_id},
        ) from e


def gen_base_policy_resource(crud_args: PolicyCrudArgs) -> Resource:
    """Create a Resource with the common elements of a branch policy."""
    return Resource(
        create=_gen_policy_create_func(crud_args),
        read=_gen_policy_read_func(crud_args),
        update=_gen_policy_update_func(crud_args),
        delete=_gen_policy_delete_func(crud_args),
        importer=_gen_policy_importer(),
        schema=gen_base_schema(),
    )


def _gen_policy_create_func(crud_args: PolicyCrudArgs):
    async def create(d: ResourceData, meta: AggregatedClient) -> None:
        policy_config, project_id = crud_args.expand_func(d, crud_args.policy_type.value)

        try:
            created_policy = await meta.policy_client.create_policy_configuration(
                policy_config, project_id
            )
        except AzureDevOpsError as e:
            raise ResourceError(f"Error creating policy in Azure DevOps: {e}") from e

        _flatten_response(crud_args, d, created_policy, project_id)
        logger.info(
            f"Created {crud_args.policy_type.name} policy configuration {d.id} in project {project_id}"
        )

    return create


def _gen_policy_read_func(crud_args: PolicyCrudArgs):
    async def read(d: ResourceData, meta: AggregatedClient) -> None:
        project_id = d.get(SCHEMA_PROJECT_ID)
        try:
            policy_id = atoi(d.id)
        except ValueError as e:
            raise ResourceError(f"Error converting policy ID to an integer: ({e})") from e

        try:
            policy_config = await meta.policy_client.get_policy_configuration(
                project_id, policy_id
            )
        except AzureDevOpsError as e:
            if response_was_not_found(e):
                logger.info(
                    f"Policy configuration {policy_id} not found in project {project_id}, removing from state"
                )
                d.set_id("")
                return
            raise ResourceError(
                f"Error looking up policy configuration with ID ({policy_id}) and project ID ({project_id}): {e}",
                metadata={"policy_id": policy_id, "project_id": project_id},
            ) from e

        _flatten_response(crud_args, d, policy_config, project_id)

    return read


def _gen_policy_update_func(crud_args: PolicyCrudArgs):
    async def update(d: ResourceData, meta: AggregatedClient) -> None:
        policy_config, project_id = crud_args.expand_func(d, crud_args.policy_type.value)
        if policy_config.id is None:
            raise ResourceError("Error updating policy in Azure DevOps: policy configuration ID is not set")

        try:
            updated_policy = await meta.policy_client.update_policy_configuration(
                policy_config, project_id, policy_config.id
            )
        except AzureDevOpsError as e:
            raise ResourceError(f"Error updating policy in Azure DevOps: {e}") from e

        _flatten_response(crud_args, d, updated_policy, project_id)

    return update


def _gen_policy_delete_func(crud_args: PolicyCrudArgs):
    async def delete(d: ResourceData, meta: AggregatedClient) -> None:
        policy_config, project_id = crud_args.expand_func(d, crud_args.policy_type.value)
        if policy_config.id is None:
            raise ResourceError("Error deleting policy in Azure DevOps: policy configuration ID is not set")

        try:
            await meta.policy_client.delete_policy_configuration(project_id, policy_config.id)
        except AzureDevOpsError as e:
            raise ResourceError(f"Error deleting policy in Azure DevOps: {e}") from e

        logger.info(f"Deleted policy configuration {policy_config.id} in project {project_id}")

    return delete


def _gen_policy_importer() -> ResourceImporter:
    async def import_state(d: ResourceData, meta: Any) -> list[ResourceData]:
        id = d.id
        parts = id.split("/", 1)
        if len(parts) != 2 or parts[0] == "" or parts[1] == "":
            raise ResourceError(f"unexpected format of ID ({id}), expected projectid/resourceId")

        try:
            atoi(parts[1])
        except ValueError as e:
            raise ResourceError(f"Policy configuration ID ({parts[1]}) isn't a valid Int") from e

        d.set(SCHEMA_PROJECT_ID, parts[0])
        d.set_id(parts[1])
        return [d]

    return ResourceImporter(state=import_state)
