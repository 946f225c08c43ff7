"""Health check exceptions."""

from agentkit.components.abstract import ComponentInconsistencyError


class HealthPolicyConfigurationError(ComponentInconsistencyError):
    """Health policy configuration error.

    Raised when a health status policy table is incomplete or refers to
    endpoint purposes, health statuses or outcome codes it does not know.

    """


class HealthCheckRegistrationError(ComponentInconsistencyError):
    """Raised when a health checker cannot be registered."""
