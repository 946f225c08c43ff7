"""FastAPI health check handlers."""

from collections.abc import Callable, Coroutine
from typing import Any, Literal, Protocol

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from agentkit.configs.health import HealthCheckConfig
from agentkit.web.health.checkers.abstract import HealthCheckResult
from agentkit.web.health.checkers.executor import Checkers, HealthCheckExecutor
from agentkit.web.health.core.status import EndpointPurpose, HealthStatus, HealthStatusPolicy, OutcomeCode


class FastAPIHealthCheckResponseItem(BaseModel):
    """Individual health check result in the response.

    Attributes:
        name: Name of the health checker.
        status: Status of this check (healthy or unhealthy).
        description: Description of the check.
        error: Error message if unhealthy.
        duration_ms: Duration in milliseconds.
        details: Additional details.

    """

    name: str = Field(description="Name of the health checker.")
    status: Literal["healthy", "unhealthy"] = Field(description="Status of this check.")
    description: str | None = Field(default=None, description="Description of the check.")
    error: str | None = Field(default=None, description="Error message if unhealthy.")
    duration_ms: float | None = Field(default=None, description="Duration in milliseconds.")
    details: dict[str, Any] | None = Field(default=None, description="Additional details.")


class FastAPIHealthCheckResponse(BaseModel):
    """Default FastAPI health check response schema.

    Attributes:
        status: Overall health status (healthy, unhealthy, or degraded).
        purpose: What the endpoint answers (liveness or readiness).
        outcome: Outcome code the policy assigned to the status.
        checks: Individual check results, or None if checks were not performed or details are disabled.

    """

    status: HealthStatus = Field(description="Overall health status.")
    purpose: EndpointPurpose = Field(description="What the endpoint answers.")
    outcome: OutcomeCode = Field(description="Outcome code assigned to the status.")
    checks: list[FastAPIHealthCheckResponseItem] | None = Field(default=None, description="Individual check results.")


class HealthCheckResponseFactory(Protocol):
    """Protocol for creating health check response bodies."""

    async def __call__(
        self,
        purpose: EndpointPurpose,
        overall_status: HealthStatus,
        outcome: OutcomeCode,
        results: list[HealthCheckResult] | None = None,
    ) -> FastAPIHealthCheckResponse:
        """Create a health check response body.

        Args:
            purpose: What the endpoint answers.
            overall_status: The aggregated health status.
            outcome: The outcome code the policy assigned to the status.
            results: Individual health check results, or None if they are not reported.

        Returns:
            The response body.

        """
        ...


async def fastapi_default_health_check_response_factory(
    purpose: EndpointPurpose,
    overall_status: HealthStatus,
    outcome: OutcomeCode,
    results: list[HealthCheckResult] | None = None,
) -> FastAPIHealthCheckResponse:
    """Default health check response factory.

    Creates a standard JSON body with overall status and individual check results.
    """
    return FastAPIHealthCheckResponse(
        status=overall_status,
        purpose=purpose,
        outcome=outcome,
        checks=[
            FastAPIHealthCheckResponseItem(
                name=result.metadata.name,
                status="healthy" if result.is_healthy else "unhealthy",
                description=result.metadata.description,
                error=result.error,
                duration_ms=result.duration_ms,
                details=result.metadata.details,
            )
            for result in results
        ]
        if results
        else None,
    )


def fastapi_health_check_handler_factory(
    purpose: EndpointPurpose,
    checkers: Checkers | Callable[[], Checkers] | None = None,
    config: HealthCheckConfig | None = None,
    policy: HealthStatusPolicy | None = None,
    response_factory: HealthCheckResponseFactory | None = None,
) -> Callable[[Request], Coroutine[Any, Any, JSONResponse]]:
    """Create a FastAPI health check handler for one endpoint purpose.

    The handler executes the checkers, aggregates their results into a
    `HealthStatus` and answers with the HTTP status code of the outcome the
    policy assigns to that status for the purpose.

    Args:
        purpose: What the endpoint answers, liveness or readiness.
        checkers: Health checkers to execute, or a mapping of registered names to checkers,
            or a callable returning either on every request.
            If None or empty, the status is healthy.
        config: Configuration for the health check endpoint. If None, uses defaults.
        policy: Status-to-outcome policy. If None, uses `HealthStatusPolicy.default()`.
        response_factory: Custom response body factory. If None, uses the default factory.

    Returns:
        FastAPI route handler function.

    Example:
        ```python
        policy = HealthStatusPolicy.default()
        app.add_api_route(
            "/health/ready",
            fastapi_health_check_handler_factory(EndpointPurpose.READINESS, [db_checker], policy=policy),
        )
        ```

    """
    config = config or HealthCheckConfig()
    policy = policy or HealthStatusPolicy.default()
    response_factory = response_factory or fastapi_default_health_check_response_factory

    executor = HealthCheckExecutor(
        timeout_seconds=config.timeout_seconds,
        execute_parallel=config.execute_parallel,
    )

    def resolve_checkers() -> Checkers:
        if checkers is None:
            return ()
        if callable(checkers):
            return checkers()
        return checkers

    async def health_handler(request: Request) -> JSONResponse:  # noqa: ARG001
        """Health check handler."""
        current_checkers = resolve_checkers()

        if not current_checkers:
            overall_status = HealthStatus.HEALTHY
            results = None
        else:
            results = await executor.execute(current_checkers)
            overall_status = executor.aggregate_status(results)

        outcome = policy.outcome(purpose, overall_status)
        response = await response_factory(
            purpose,
            overall_status,
            outcome,
            results if config.include_details else None,
        )

        return JSONResponse(
            content=response.model_dump(mode="json"),
            status_code=outcome.http_status_code,
        )

    return health_handler
