"""
Agent pool resource.
"""

import logging

from azdo_provider.errors import AzureDevOpsError, ResourceError
from azdo_provider.models.agent_pool import PoolType, TaskAgentPool
from azdo_provider.schema import (
    Resource,
    ResourceData,
    ResourceImporter,
    Schema,
    SchemaType,
    import_state_passthrough,
)
from azdo_provider.services.client import AggregatedClient
from azdo_provider.utils import atoi, no_empty_strings, response_was_not_found, string_in_slice, to_string

logger = logging.getLogger(__name__)

SCHEMA_NAME = "name"
SCHEMA_POOL_TYPE = "pool_type"
SCHEMA_AUTO_PROVISION = "auto_provision"


def resource_agent_pool() -> Resource:
    return Resource(
        create=resource_agent_pool_create,
        read=resource_agent_pool_read,
        update=resource_agent_pool_update,
        delete=resource_agent_pool_delete,
        importer=ResourceImporter(state=import_state_passthrough),
        schema={
            SCHEMA_NAME: Schema(
                type=SchemaType.STRING,
                required=True,
                validate_func=no_empty_strings,
                description="The name of the agent pool",
            ),
            SCHEMA_POOL_TYPE: Schema(
                type=SchemaType.STRING,
                optional=True,
                force_new=True,
                default=PoolType.AUTOMATION.value,
                validate_func=string_in_slice(
                    [PoolType.AUTOMATION.value, PoolType.DEPLOYMENT.value], False
                ),
                description="Specifies whether the agent pool type is Automation or Deployment",
            ),
            SCHEMA_AUTO_PROVISION: Schema(
                type=SchemaType.BOOL,
                optional=True,
                default=False,
                description="Specifies whether or not a queue should be automatically provisioned for each project collection",
            ),
        },
    )


async def resource_agent_pool_create(d: ResourceData, meta: AggregatedClient) -> None:
    agent_pool = expand_agent_pool(d, for_create=True)

    try:
        created_agent_pool = await meta.task_agent_client.add_agent_pool(agent_pool)
    except AzureDevOpsError as e:
        raise ResourceError(f"Error creating agent pool in Azure DevOps: {e}") from e

    flatten_agent_pool(d, created_agent_pool)
    logger.info(f"Created agent pool {created_agent_pool.id} ({created_agent_pool.name})")

    await resource_agent_pool_read(d, meta)


async def resource_agent_pool_read(d: ResourceData, meta: AggregatedClient) -> None:
    pool_id = _parse_pool_id(d.id)

    try:
        agent_pool = await meta.task_agent_client.get_agent_pool(pool_id)
    except AzureDevOpsError as e:
        if response_was_not_found(e):
            logger.info(f"Agent pool {pool_id} not found, removing from state")
            d.set_id("")
            return
        raise ResourceError(
            f"Error looking up agent pool with ID {pool_id}. Error: {e}",
            metadata={"pool_id": pool_id},
        ) from e

    flatten_agent_pool(d, agent_pool)


async def resource_agent_pool_update(d: ResourceData, meta: AggregatedClient) -> None:
    agent_pool = expand_agent_pool(d, for_create=False)

    try:
        await meta.task_agent_client.update_agent_pool(
            agent_pool.id,
            TaskAgentPool(
                name=agent_pool.name,
                pool_type=agent_pool.pool_type,
                auto_provision=agent_pool.auto_provision,
            ),
        )
    except AzureDevOpsError as e:
        raise ResourceError(f"Error updating agent pool in Azure DevOps: {e}") from e

    await resource_agent_pool_read(d, meta)


async def resource_agent_pool_delete(d: ResourceData, meta: AggregatedClient) -> None:
    pool_id = _parse_pool_id(d.id)

    try:
        await meta.task_agent_client.delete_agent_pool(pool_id)
    except AzureDevOpsError as e:
        raise ResourceError(f"Error deleting agent pool {pool_id} in Azure DevOps: {e}") from e

    logger.info(f"Deleted agent pool {pool_id}")


def flatten_agent_pool(d: ResourceData, agent_pool: TaskAgentPool) -> None:
    d.set_id(str(agent_pool.id))
    d.set(SCHEMA_NAME, to_string(agent_pool.name, ""))
    d.set(SCHEMA_POOL_TYPE, agent_pool.pool_type.value)
    d.set(SCHEMA_AUTO_PROVISION, agent_pool.auto_provision)


def expand_agent_pool(d: ResourceData, for_create: bool) -> TaskAgentPool:
    """
    Build the agent pool request from the schema.

    The stored ID is only required when updating an existing pool.

    Raises:
        ResourceError: The stored ID is not an integer and for_create is False.
    """
    pool_id = None
    if not for_create:
        pool_id = _parse_pool_id(d.id)

    return TaskAgentPool(
        id=pool_id,
        name=d.get(SCHEMA_NAME),
        pool_type=PoolType(d.get(SCHEMA_POOL_TYPE)),
        auto_provision=d.get(SCHEMA_AUTO_PROVISION),
    )


def _parse_pool_id(id: str) -> int:
    try:
        return atoi(id)
    except ValueError as e:
        raise ResourceError(f"Error getting agent pool Id: {e}") from e
