"""Conftest for health check integration tests."""

from __future__ import annotations

import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agentkit.configs.health import HealthCheckConfig
from agentkit.entrypoints.fastapi import FastAPIEntrypoint
from agentkit.entrypoints.plugins.fastapi import FastAPIHealthCheckPlugin
from agentkit.web.health.checkers.abstract import HealthCheckMetadata, HealthCheckResult
from agentkit.web.health.checkers.registry import HealthCheckRegistry
from agentkit.web.health.core.status import EndpointPurpose, HealthStatusPolicy


class SimpleHealthChecker:
    """Simple health checker for testing."""

    def __init__(
        self,
        name: str,
        is_healthy: bool = True,
        critical: bool = True,
        error: str | None = None,
    ) -> None:
        """Initialize simple health checker.

        Args:
            name: Name of the checker.
            is_healthy: Whether the check should be healthy.
            critical: Whether the check is critical.
            error: Error message if unhealthy.

        """
        self.name = name
        self._is_healthy = is_healthy
        self._critical = critical
        self._error = error

    async def __call__(self) -> HealthCheckResult:
        """Execute the health check."""
        return HealthCheckResult(
            metadata=HealthCheckMetadata(
                name=self.name,
                critical=self._critical,
                description=f"Test checker: {self.name}",
            ),
            is_healthy=self._is_healthy,
            error=self._error,
        )


@pytest_asyncio.fixture
async def empty_app() -> FastAPI:
    """Empty FastAPI app fixture."""
    return FastAPI()


@pytest_asyncio.fixture
async def pass_pass_fail_soft() -> list[SimpleHealthChecker]:
    """Two passing critical checkers and one failing non-critical checker."""
    return [
        SimpleHealthChecker(name="database"),
        SimpleHealthChecker(name="queue"),
        SimpleHealthChecker(name="cache", is_healthy=False, critical=False, error="Cache unreachable"),
    ]


def create_registry(
    checkers: list[SimpleHealthChecker] | None = None,
    purposes: tuple[EndpointPurpose, ...] = (EndpointPurpose.READINESS,),
) -> HealthCheckRegistry:
    """Helper to register checkers under their names."""
    registry = HealthCheckRegistry()
    for checker in checkers or []:
        registry.add(checker.name, checker, purposes=purposes)
    return registry


def create_test_client(
    registry: HealthCheckRegistry | None = None,
    policy: HealthStatusPolicy | None = None,
    config: HealthCheckConfig | None = None,
) -> TestClient:
    """Helper to create a test client with the health endpoints bound."""
    entrypoint = FastAPIEntrypoint(app=FastAPI()).use_plugin(
        FastAPIHealthCheckPlugin(registry=registry, policy=policy, config=config)
    )
    return TestClient(entrypoint.get_app())
