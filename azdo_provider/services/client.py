"""
Azure DevOps REST client.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

from azdo_provider.config import AzureDevOpsConfig
from azdo_provider.errors import AzureDevOpsError, NotFoundError
from azdo_provider.models.agent_pool import TaskAgentPool
from azdo_provider.models.policy import PolicyConfiguration

logger = logging.getLogger(__name__)


class AzureDevOpsClient:
    """Connection to an Azure DevOps organization."""

    def __init__(
        self,
        config: AzureDevOpsConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.base_url = config.org_service_url.rstrip("/")
        self.timeout = config.timeout
        self.api_version = config.api_version
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=httpx.BasicAuth("", self.config.personal_access_token),
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """
        Send a request and decode the JSON response.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Path relative to the organization URL
            json: Request body
            params: Extra query parameters (api-version is always added)

        Returns:
            The decoded response body, or None for an empty response.

        Raises:
            NotFoundError: The API answered 404.
            AzureDevOpsError: Any other error status, a sign-in redirect, a body
                that is not JSON or a transport failure.
        """
        client = await self.get_client()

        query = {"api-version": self.api_version}
        if params:
            query.update(params)

        logger.debug(f"{method} {path}")
        try:
            response = await client.request(method, path, json=json, params=query)
        except httpx.HTTPError as e:
            raise AzureDevOpsError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            if response.status_code == 404:
                raise NotFoundError(message, status_code=404)
            raise AzureDevOpsError(message, status_code=response.status_code)

        if response.status_code == 203:
            # Azure DevOps answers a rejected PAT with a sign-in page
            raise AzureDevOpsError(
                f"{method} {path} was redirected to sign-in, check the personal access token (status 203)",
                status_code=203,
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise AzureDevOpsError(
                f"{method} {path} returned a non-JSON response (status {response.status_code})",
                status_code=response.status_code,
            ) from e

    async def get_connection_data(self) -> dict:
        """Fetch connection data for the authenticated user."""
        return await self.send("GET", "/_apis/connectionData")


def _error_message(response: httpx.Response) -> str:
    """Extract the error message from an error response."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return f"{data['message']} (status {response.status_code})"
    text = response.text.strip()
    if text:
        return f"{text} (status {response.status_code})"
    return f"HTTP {response.status_code}"


def _parse_response(model, data: Any, method: str, path: str):
    """Build a model from a response body, failing with AzureDevOpsError."""
    if not isinstance(data, dict):
        raise AzureDevOpsError(
            f"{method} {path} returned an unexpected response: expected an object"
        )
    try:
        return model.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise AzureDevOpsError(f"{method} {path} returned an unexpected response: {e}") from e


class PolicyClient:
    """Policy configuration endpoints."""

    def __init__(self, connection: AzureDevOpsClient):
        self.connection = connection

    @staticmethod
    def _path(project: str, configuration_id: Optional[int] = None) -> str:
        path = f"/{quote(project, safe='')}/_apis/policy/configurations"
        if configuration_id is not None:
            path = f"{path}/{configuration_id}"
        return path

    async def create_policy_configuration(
        self, configuration: PolicyConfiguration, project: str
    ) -> PolicyConfiguration:
        path = self._path(project)
        data = await self.connection.send("POST", path, json=configuration.to_dict())
        return _parse_response(PolicyConfiguration, data, "POST", path)

    async def get_policy_configuration(
        self, project: str, configuration_id: int
    ) -> PolicyConfiguration:
        path = self._path(project, configuration_id)
        data = await self.connection.send("GET", path)
        return _parse_response(PolicyConfiguration, data, "GET", path)

    async def update_policy_configuration(
        self, configuration: PolicyConfiguration, project: str, configuration_id: int
    ) -> PolicyConfiguration:
        path = self._path(project, configuration_id)
        data = await self.connection.send("PUT", path, json=configuration.to_dict())
        return _parse_response(PolicyConfiguration, data, "PUT", path)

    async def delete_policy_configuration(self, project: str, configuration_id: int) -> None:
        await self.connection.send("DELETE", self._path(project, configuration_id))


class TaskAgentClient:
    """Agent pool endpoints."""

    def __init__(self, connection: AzureDevOpsClient):
        self.connection = connection

    @staticmethod
    def _path(pool_id: Optional[int] = None) -> str:
        path = "/_apis/distributedtask/pools"
        if pool_id is not None:
            path = f"{path}/{pool_id}"
        return path

    async def add_agent_pool(self, pool: TaskAgentPool) -> TaskAgentPool:
        path = self._path()
        data = await self.connection.send("POST", path, json=pool.to_dict())
        return _parse_response(TaskAgentPool, data, "POST", path)

    async def get_agent_pool(self, pool_id: int) -> TaskAgentPool:
        path = self._path(pool_id)
        data = await self.connection.send("GET", path)
        return _parse_response(TaskAgentPool, data, "GET", path)

    async def update_agent_pool(self, pool_id: int, pool: TaskAgentPool) -> TaskAgentPool:
        path = self._path(pool_id)
        data = await self.connection.send("PATCH", path, json=pool.to_dict())
        return _parse_response(TaskAgentPool, data, "PATCH", path)

    async def delete_agent_pool(self, pool_id: int) -> None:
        await self.connection.send("DELETE", self._path(pool_id))


@dataclass
class AggregatedClient:
    """The per-provider set of clients handed to every lifecycle operation."""
    connection: AzureDevOpsClient
    policy_client: PolicyClient
    task_agent_client: TaskAgentClient

    async def close(self):
        await self.connection.close()


def create_aggregated_client(
    config: AzureDevOpsConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AggregatedClient:
    """Build the clients sharing one connection."""
    connection = AzureDevOpsClient(config, transport=transport)
    return AggregatedClient(
        connection=connection,
        policy_client=PolicyClient(connection),
        task_agent_client=TaskAgentClient(connection),
    )
