"""Registry of named health checkers."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Self

from agentkit.web.health.checkers.abstract import AbstractHealthChecker
from agentkit.web.health.core.exceptions import HealthCheckRegistrationError
from agentkit.web.health.core.status import EndpointPurpose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthCheckRegistration:
    """A registered health checker.

    Attributes:
        name: Unique name of the checker.
        checker: The health checker.
        purposes: Endpoint purposes the checker contributes to.

    """

    name: str
    checker: AbstractHealthChecker
    purposes: frozenset[EndpointPurpose]


class HealthCheckRegistry:
    """Holds the health checkers of the application.

    Checkers contribute to readiness only unless told otherwise: a failing
    dependency should take the instance out of rotation, not restart it.

    Example:
        ```python
        registry = HealthCheckRegistry()
        registry.add("database", db_checker)
        registry.add("event_loop", loop_checker, purposes=[EndpointPurpose.LIVENESS, EndpointPurpose.READINESS])

        readiness_checkers = registry.checkers_for(EndpointPurpose.READINESS)
        ```

    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._registrations: dict[str, HealthCheckRegistration] = {}

    def add(
        self,
        name: str,
        checker: AbstractHealthChecker,
        purposes: Iterable[EndpointPurpose] = (EndpointPurpose.READINESS,),
    ) -> Self:
        """Register a health checker.

        Args:
            name: Unique name of the checker.
            checker: The health checker.
            purposes: Endpoint purposes the checker contributes to.

        Returns:
            Self for method chaining.

        Raises:
            HealthCheckRegistrationError: If the name is taken or no valid purposes are given.

        """
        if name in self._registrations:
            raise HealthCheckRegistrationError(f"Health checker {name!r} is already registered")

        purposes = frozenset(purposes)
        if not purposes:
            raise HealthCheckRegistrationError(f"Health checker {name!r} must be registered for at least one purpose")

        unknown = [purpose for purpose in purposes if not isinstance(purpose, EndpointPurpose)]
        if unknown:
            raise HealthCheckRegistrationError(f"Health checker {name!r} has unknown purposes: {unknown}")

        self._registrations[name] = HealthCheckRegistration(name=name, checker=checker, purposes=purposes)
        logger.debug("Registered health checker %s for %s", name, sorted(purposes))
        return self

    def remove(self, name: str) -> None:
        """Unregister a health checker. Unknown names are ignored."""
        self._registrations.pop(name, None)

    def checkers_for(self, purpose: EndpointPurpose) -> list[AbstractHealthChecker]:
        """Get the checkers contributing to an endpoint purpose, in registration order."""
        return [
            registration.checker for registration in self._registrations.values() if purpose in registration.purposes
        ]

    def named_checkers_for(self, purpose: EndpointPurpose) -> dict[str, AbstractHealthChecker]:
        """Get the checkers contributing to an endpoint purpose by registered name, in registration order."""
        return {
            registration.name: registration.checker
            for registration in self._registrations.values()
            if purpose in registration.purposes
        }

    @property
    def registrations(self) -> list[HealthCheckRegistration]:
        """Get all registrations, in registration order."""
        return list(self._registrations.values())

    def __len__(self) -> int:
        return len(self._registrations)

    def __contains__(self, name: object) -> bool:
        return name in self._registrations
