"""
Shared fixtures: an in-memory Azure DevOps server and clients bound to it.
"""

import httpx
import pytest
import pytest_asyncio

from azdo_provider.config import AzureDevOpsConfig
from azdo_provider.services.client import create_aggregated_client
from tests.mock_server.app import create_app


@pytest.fixture
def mock_app():
    """Fresh mock Azure DevOps server."""
    return create_app()


@pytest.fixture
def mock_state(mock_app):
    """The mock server's in-memory state."""
    return mock_app.state.mock


@pytest.fixture
def azdo_config():
    return AzureDevOpsConfig(
        org_service_url="https://dev.azure.com/testorg",
        personal_access_token="test-pat",
    )


@pytest_asyncio.fixture
async def clients(mock_app, azdo_config):
    """Aggregated client talking to the mock server."""
    aggregated = create_aggregated_client(
        azdo_config, transport=httpx.ASGITransport(app=mock_app)
    )
    yield aggregated
    await aggregated.close()
