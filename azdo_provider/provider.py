"""
Provider definition: the resource kinds served to the host runtime and
the client they share.
"""

import logging
from typing import Optional

import httpx

from azdo_provider.config import Config, validate_config
from azdo_provider.resources.agent_pool import resource_agent_pool
from azdo_provider.resources.branch_policy_build_validation import resource_branch_policy_build_validation
from azdo_provider.resources.branch_policy_comment_resolution import resource_branch_policy_comment_resolution
from azdo_provider.resources.branch_policy_min_reviewers import resource_branch_policy_min_reviewers
from azdo_provider.schema import Resource
from azdo_provider.services.client import AggregatedClient, create_aggregated_client

logger = logging.getLogger(__name__)


def resources() -> dict[str, Resource]:
    """Map host resource type names to their definitions."""
    return {
        "azuredevops_agent_pool": resource_agent_pool(),
        "azuredevops_branch_policy_build_validation": resource_branch_policy_build_validation(),
        "azuredevops_branch_policy_comment_resolution": resource_branch_policy_comment_resolution(),
        "azuredevops_branch_policy_min_reviewers": resource_branch_policy_min_reviewers(),
    }


def configure(
    config: Config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AggregatedClient:
    """
    Build the client handed to every lifecycle operation.

    Raises:
        ConfigError: The organization URL or personal access token is missing.
    """
    validate_config(config)
    logger.info(f"Configuring Azure DevOps provider for {config.azure_devops.org_service_url}")
    return create_aggregated_client(config.azure_devops, transport=transport)
