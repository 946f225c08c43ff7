"""Agent providers."""

from collections.abc import AsyncGenerator

import httpx
from dishka import AsyncContainer, Provider, Scope, from_context, make_async_container, provide
from opentelemetry import metrics, trace

from agentkit.configs.agent import AgentConfig
from agentkit.configs.features import FeatureFlagsConfig
from agentkit.configs.health import HealthCheckConfig
from agentkit.configs.hosting import HostConfig
from agentkit.configs.http import HttpClientConfig
from agentkit.configs.observability import ObservabilityConfig
from agentkit.configs.server import ServerConfig
from agentkit.version import APPLICATION_NAME, APPLICATION_VERSION
from agentkit.web.health.checkers.registry import HealthCheckRegistry
from agentkit.web.health.core.status import HealthStatusPolicy
from agentkit.web.http.client import create_http_client


class AgentConfigProvider(Provider):
    """Provides the agent config and its sections."""

    agent_config = from_context(provides=AgentConfig, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def observability_config(self, agent_config: AgentConfig) -> ObservabilityConfig:
        """Observability config."""
        return agent_config.observability

    @provide(scope=Scope.APP)
    def health_config(self, agent_config: AgentConfig) -> HealthCheckConfig:
        """Health check config."""
        return agent_config.health

    @provide(scope=Scope.APP)
    def server_config(self, agent_config: AgentConfig) -> ServerConfig:
        """Server config."""
        return agent_config.server

    @provide(scope=Scope.APP)
    def http_client_config(self, agent_config: AgentConfig) -> HttpClientConfig:
        """HTTP client config."""
        return agent_config.http_client

    @provide(scope=Scope.APP)
    def host_config(self, agent_config: AgentConfig) -> HostConfig:
        """Host config."""
        return agent_config.host

    @provide(scope=Scope.APP)
    def feature_flags(self, agent_config: AgentConfig) -> FeatureFlagsConfig:
        """Feature flags."""
        return agent_config.features


class AgentProvider(Provider):
    """Provides the health, HTTP and telemetry infrastructure of the agent."""

    @provide(scope=Scope.APP)
    def health_status_policy(self) -> HealthStatusPolicy:
        """Health status policy shared by the health endpoints."""
        return HealthStatusPolicy.default()

    @provide(scope=Scope.APP)
    def health_check_registry(self) -> HealthCheckRegistry:
        """Registry of the application's health checkers.

        Register checkers for external services, databases, etc. here.
        """
        return HealthCheckRegistry()

    @provide(scope=Scope.APP)
    async def http_client(self, http_client_config: HttpClientConfig) -> AsyncGenerator[httpx.AsyncClient]:
        """Shared outgoing HTTP client, closed with the container."""
        async with create_http_client(http_client_config) as client:
            yield client

    @provide(scope=Scope.APP)
    def tracer(self) -> trace.Tracer:
        """Application tracer."""
        return trace.get_tracer(APPLICATION_NAME, APPLICATION_VERSION)

    @provide(scope=Scope.APP)
    def meter(self) -> metrics.Meter:
        """Application meter."""
        return metrics.get_meter(APPLICATION_NAME, APPLICATION_VERSION)


def make_agent_container(config: AgentConfig, *providers: Provider) -> AsyncContainer:
    """Create the agent container.

    Args:
        config: The agent config.
        *providers: Providers of the application services.

    Returns:
        The async container. Close it with `await container.close()`.

    """
    return make_async_container(
        AgentConfigProvider(),
        AgentProvider(),
        *providers,
        context={AgentConfig: config},
    )
