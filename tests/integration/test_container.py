"""Integration tests for the agent container."""

import httpx
import pytest
from dishka import AsyncContainer
from opentelemetry import metrics, trace

from agentkit.configs.agent import AgentConfig
from agentkit.configs.features import FeatureFlagsConfig
from agentkit.configs.health import HealthCheckConfig
from agentkit.configs.hosting import HostConfig
from agentkit.configs.http import HttpClientConfig
from agentkit.configs.observability import ObservabilityConfig
from agentkit.configs.server import ServerConfig
from agentkit.dependencies.dishka.agent import make_agent_container
from agentkit.web.health.checkers.registry import HealthCheckRegistry
from agentkit.web.health.core.status import HealthStatusPolicy
from tests.utils import CountingBackgroundService


@pytest.mark.asyncio
async def test_config_sections(container: AsyncContainer, agent_config: AgentConfig) -> None:
    """Test the config and its sections are provided."""
    assert await container.get(AgentConfig) is agent_config
    assert await container.get(ObservabilityConfig) is agent_config.observability
    assert await container.get(HealthCheckConfig) is agent_config.health
    assert await container.get(ServerConfig) is agent_config.server
    assert await container.get(HttpClientConfig) is agent_config.http_client
    assert await container.get(HostConfig) is agent_config.host
    assert await container.get(FeatureFlagsConfig) is agent_config.features


@pytest.mark.asyncio
async def test_health_infrastructure(container: AsyncContainer) -> None:
    """Test the policy and the registry are application singletons."""
    policy = await container.get(HealthStatusPolicy)
    registry = await container.get(HealthCheckRegistry)

    assert policy == HealthStatusPolicy.default()
    assert len(registry) == 0
    assert await container.get(HealthCheckRegistry) is registry


@pytest.mark.asyncio
async def test_http_client(agent_config: AgentConfig) -> None:
    """Test the shared HTTP client is closed with the container."""
    container = make_agent_container(agent_config)
    client = await container.get(httpx.AsyncClient)

    assert client.follow_redirects is True
    assert client.is_closed is False

    await container.close()

    assert client.is_closed is True


@pytest.mark.asyncio
async def test_telemetry(container: AsyncContainer) -> None:
    """Test the tracer and the meter are provided."""
    assert isinstance(await container.get(trace.Tracer), trace.Tracer)
    assert isinstance(await container.get(metrics.Meter), metrics.Meter)


@pytest.mark.asyncio
async def test_application_providers(container: AsyncContainer) -> None:
    """Test application providers are added to the container."""
    assert isinstance(await container.get(CountingBackgroundService), CountingBackgroundService)
