"""Conftest."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from dishka import AsyncContainer, Provider, Scope, provide

from agentkit.configs.agent import AgentConfig
from agentkit.dependencies.dishka.agent import make_agent_container
from tests.utils import CountingBackgroundService


class MockProvider(Provider):
    """Mock provider of an application service."""

    @provide(scope=Scope.APP)
    async def counting_service(self) -> CountingBackgroundService:
        """Counting background service."""
        return CountingBackgroundService()


@pytest.fixture
def agent_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> AgentConfig:
    """Agent config isolated from the process environment and working directory."""
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("APP_ENVIRONMENT", raising=False)
    monkeypatch.setenv("APP_CONFIG_DIR", str(tmp_path))
    return AgentConfig.from_env()


@pytest_asyncio.fixture
async def container(agent_config: AgentConfig) -> AsyncGenerator[AsyncContainer]:
    """Test container."""
    container = make_agent_container(agent_config, MockProvider())
    yield container
    await container.close()
