"""Health check configuration."""

from pydantic import BaseModel, Field


class HealthCheckConfig(BaseModel):
    """Configuration for the health check endpoints.

    Status codes are not configured here: they follow from the
    `HealthStatusPolicy` bound to the endpoints.

    Attributes:
        liveness_route_path: Liveness endpoint path.
        readiness_route_path: Readiness endpoint path.
        timeout_seconds: Timeout for all health checks of one request.
        execute_parallel: Whether to execute checks in parallel.
        include_details: Whether to include individual check details.

    """

    liveness_route_path: str = Field(default="/health/live", description="Liveness endpoint path.")
    readiness_route_path: str = Field(default="/health/ready", description="Readiness endpoint path.")
    timeout_seconds: float | None = Field(default=None, gt=0, description="Timeout for all health checks.")
    execute_parallel: bool = Field(default=True, description="Whether to execute checks in parallel.")
    include_details: bool = Field(default=True, description="Whether to include individual check details.")
