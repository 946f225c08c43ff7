"""Health status enumeration and the status-to-outcome policy."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Self

from agentkit.enums.base import BaseEnum
from agentkit.web.health.core.exceptions import HealthPolicyConfigurationError


class HealthStatus(BaseEnum):
    """Health status enumeration.

    Values:
        HEALTHY: All checks passed successfully.
        UNHEALTHY: At least one critical check failed.
        DEGRADED: Some non-critical checks failed, but service is operational.
    """

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"  # Some checks failed but service is operational


class EndpointPurpose(BaseEnum):
    """What a health endpoint answers.

    Values:
        LIVENESS: Should this process be restarted?
        READINESS: Should this process receive new traffic?
    """

    LIVENESS = "liveness"
    READINESS = "readiness"


class OutcomeCode(BaseEnum):
    """Result code reported by a health endpoint."""

    SUCCESS = "success"
    SUCCESS_WITH_CAVEAT = "success_with_caveat"
    DEPENDENCY_FAILED = "dependency_failed"
    UNAVAILABLE = "unavailable"

    @property
    def http_status_code(self) -> int:
        """HTTP status code used by the web layer for this outcome."""
        return _HTTP_STATUS_CODES[self]

    @property
    def is_success(self) -> bool:
        """Whether callers should treat the outcome as passing."""
        return self in (OutcomeCode.SUCCESS, OutcomeCode.SUCCESS_WITH_CAVEAT)


_HTTP_STATUS_CODES: Mapping[OutcomeCode, int] = MappingProxyType(
    {
        OutcomeCode.SUCCESS: 200,
        OutcomeCode.SUCCESS_WITH_CAVEAT: 200,
        OutcomeCode.DEPENDENCY_FAILED: 424,
        OutcomeCode.UNAVAILABLE: 503,
    }
)


class HealthStatusPolicy:
    """Immutable mapping from (endpoint purpose, health status) to outcome code.

    The table is validated on construction: it must hold exactly one outcome for
    every combination of `EndpointPurpose` and `HealthStatus`. Build it once at
    startup and hand it to whatever binds the health endpoints.

    Example:
        ```python
        policy = HealthStatusPolicy.default()
        policy.liveness_outcome(HealthStatus.DEGRADED)  # OutcomeCode.SUCCESS
        policy.readiness_outcome(HealthStatus.DEGRADED)  # OutcomeCode.DEPENDENCY_FAILED
        ```

    """

    __slots__ = ("_table",)

    def __init__(self, table: Mapping[EndpointPurpose, Mapping[HealthStatus, OutcomeCode]]) -> None:
        """Initialize the policy.

        Args:
            table: Outcome per health status, per endpoint purpose.

        Raises:
            HealthPolicyConfigurationError: If the table is not total or holds unknown keys or values.

        """
        self._table: Mapping[EndpointPurpose, Mapping[HealthStatus, OutcomeCode]] = MappingProxyType(
            {purpose: MappingProxyType(dict(outcomes)) for purpose, outcomes in self._validate(table).items()}
        )

    @classmethod
    def default(cls) -> Self:
        """Create the default policy.

        Liveness stays successful while degraded so the process can heal itself,
        readiness fails on degraded so traffic drains away from the instance.
        """
        return cls(
            {
                # degraded passes liveness
                EndpointPurpose.LIVENESS: {
                    HealthStatus.HEALTHY: OutcomeCode.SUCCESS,
                    HealthStatus.DEGRADED: OutcomeCode.SUCCESS,
                    HealthStatus.UNHEALTHY: OutcomeCode.UNAVAILABLE,
                },
                # degraded fails readiness
                EndpointPurpose.READINESS: {
                    HealthStatus.HEALTHY: OutcomeCode.SUCCESS,
                    HealthStatus.DEGRADED: OutcomeCode.DEPENDENCY_FAILED,
                    HealthStatus.UNHEALTHY: OutcomeCode.UNAVAILABLE,
                },
            }
        )

    @staticmethod
    def _validate(
        table: Mapping[EndpointPurpose, Mapping[HealthStatus, OutcomeCode]],
    ) -> Mapping[EndpointPurpose, Mapping[HealthStatus, OutcomeCode]]:
        unknown_purposes = [purpose for purpose in table if not isinstance(purpose, EndpointPurpose)]
        if unknown_purposes:
            raise HealthPolicyConfigurationError(f"Unknown endpoint purposes: {unknown_purposes}")

        missing_purposes = [purpose for purpose in EndpointPurpose if purpose not in table]
        if missing_purposes:
            raise HealthPolicyConfigurationError(f"No outcomes configured for purposes: {missing_purposes}")

        for purpose, outcomes in table.items():
            unknown_statuses = [status for status in outcomes if not isinstance(status, HealthStatus)]
            if unknown_statuses:
                raise HealthPolicyConfigurationError(f"Unknown health statuses for {purpose}: {unknown_statuses}")

            missing_statuses = [status for status in HealthStatus if status not in outcomes]
            if missing_statuses:
                raise HealthPolicyConfigurationError(f"No {purpose} outcome for health statuses: {missing_statuses}")

            invalid_outcomes = [outcome for outcome in outcomes.values() if not isinstance(outcome, OutcomeCode)]
            if invalid_outcomes:
                raise HealthPolicyConfigurationError(f"Invalid {purpose} outcome codes: {invalid_outcomes}")

        return table

    def outcome(self, purpose: EndpointPurpose, status: HealthStatus) -> OutcomeCode:
        """Get the outcome code for a health status at an endpoint purpose.

        Raises:
            HealthPolicyConfigurationError: If the purpose or status is not part of the table.

        """
        # StrEnum members hash like their values, plain strings must not match them
        if not isinstance(purpose, EndpointPurpose) or not isinstance(status, HealthStatus):
            raise HealthPolicyConfigurationError(f"No outcome configured for {purpose!r} / {status!r}")
        try:
            return self._table[purpose][status]
        except (KeyError, TypeError) as e:
            raise HealthPolicyConfigurationError(f"No outcome configured for {purpose!r} / {status!r}") from e

    def liveness_outcome(self, status: HealthStatus) -> OutcomeCode:
        """Get the liveness outcome for a health status."""
        return self.outcome(EndpointPurpose.LIVENESS, status)

    def readiness_outcome(self, status: HealthStatus) -> OutcomeCode:
        """Get the readiness outcome for a health status."""
        return self.outcome(EndpointPurpose.READINESS, status)

    def as_dict(self) -> dict[EndpointPurpose, dict[HealthStatus, OutcomeCode]]:
        """Get a mutable copy of the table."""
        return {purpose: dict(outcomes) for purpose, outcomes in self._table.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HealthStatusPolicy):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(
            tuple(
                sorted(
                    (purpose, status, outcome)
                    for purpose, outcomes in self._table.items()
                    for status, outcome in outcomes.items()
                )
            )
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_dict()!r})"
