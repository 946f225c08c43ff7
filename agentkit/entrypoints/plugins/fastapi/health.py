"""FastAPI health plugin."""

from functools import partial
from typing import Any

from agentkit.configs.health import HealthCheckConfig
from agentkit.entrypoints.fastapi import FastAPIEntrypoint
from agentkit.entrypoints.plugins.abstract import AbstractEntrypointPlugin
from agentkit.web.health.checkers.registry import HealthCheckRegistry
from agentkit.web.health.core.status import EndpointPurpose, HealthStatus, HealthStatusPolicy
from agentkit.web.health.handlers.fastapi import FastAPIHealthCheckResponse, fastapi_health_check_handler_factory

_STATUS_DESCRIPTIONS = {
    HealthStatus.HEALTHY: "Service is healthy",
    HealthStatus.DEGRADED: "Service is degraded",
    HealthStatus.UNHEALTHY: "Service is unhealthy",
}


class FastAPIHealthCheckPlugin(AbstractEntrypointPlugin[FastAPIEntrypoint]):
    """Plugin for adding liveness and readiness endpoints to FastAPI entrypoints.

    Both endpoints run the checkers registered for their purpose and share one
    `HealthStatusPolicy`, which decides the status code of each endpoint.

    Example:
        ```python
        registry = HealthCheckRegistry().add("database", db_checker)
        config = HealthCheckConfig(timeout_seconds=5.0)
        entrypoint = FastAPIEntrypoint(app=app).use_plugin(
            FastAPIHealthCheckPlugin(registry, HealthStatusPolicy.default(), config)
        )
        ```

    """

    def __init__(
        self,
        registry: HealthCheckRegistry | None = None,
        policy: HealthStatusPolicy | None = None,
        config: HealthCheckConfig | None = None,
    ) -> None:
        """Initialize the health check plugin.

        Args:
            registry: Registered health checkers. If None, both endpoints report healthy.
            policy: Status-to-outcome policy. If None, uses `HealthStatusPolicy.default()`.
            config: Configuration for the health check endpoints. If None, uses default configuration.

        """
        self._registry = registry or HealthCheckRegistry()
        self._policy = policy or HealthStatusPolicy.default()
        self._config = config or HealthCheckConfig()

    def _openapi_responses(self, purpose: EndpointPurpose) -> dict[int | str, dict[str, Any]]:
        responses: dict[int | str, dict[str, Any]] = {}
        for status in HealthStatus:
            status_code = self._policy.outcome(purpose, status).http_status_code
            description = _STATUS_DESCRIPTIONS[status]
            if status_code in responses:
                description = f"{responses[status_code]['description']} or {description.lower()}"
            responses[status_code] = {"model": FastAPIHealthCheckResponse, "description": description}
        return responses

    def apply(self, component: FastAPIEntrypoint) -> FastAPIEntrypoint:
        """Apply the health check endpoints to the entrypoint.

        Args:
            component: The FastAPI entrypoint to configure.

        Returns:
            The configured entrypoint.

        """
        app = component.get_app()

        routes = (
            (
                EndpointPurpose.LIVENESS,
                self._config.liveness_route_path,
                "Liveness check",
                "Check whether the process is alive or should be restarted",
            ),
            (
                EndpointPurpose.READINESS,
                self._config.readiness_route_path,
                "Readiness check",
                "Check whether the service should receive new traffic",
            ),
        )

        for purpose, path, summary, description in routes:
            handler = fastapi_health_check_handler_factory(
                purpose,
                checkers=partial(self._registry.named_checkers_for, purpose),
                config=self._config,
                policy=self._policy,
            )
            app.add_api_route(
                path,
                handler,
                methods=["GET"],
                response_model=FastAPIHealthCheckResponse,
                responses=self._openapi_responses(purpose),
                summary=summary,
                description=description,
                tags=["health"],
            )

        return component
