"""Utils for tests."""

import asyncio
from typing import Any

from agentkit.background.service import AbstractBackgroundService
from agentkit.entrypoints.abstract import AbstractEntrypoint
from agentkit.web.health.checkers.abstract import HealthCheckMetadata, HealthCheckResult


class MockHealthChecker:
    """Mock health checker for testing."""

    def __init__(
        self,
        name: str,
        is_healthy: bool = True,
        delay: float = 0.0,
        error: str | None = None,
        critical: bool = True,
        duration_ms: float | None = None,
        raise_exception: bool = False,
        exception_type: type[Exception] = Exception,
    ) -> None:
        """Initialize mock health checker.

        Args:
            name: Name of the checker.
            is_healthy: Whether the check should be healthy.
            delay: Delay in seconds before returning result.
            error: Error message if unhealthy.
            critical: Whether the check is critical.
            duration_ms: Duration to set in result (if None, will be measured).
            raise_exception: Whether to raise an exception instead of returning result.
            exception_type: Type of exception to raise.

        """
        self.name = name
        self._is_healthy = is_healthy
        self._delay = delay
        self._error = error
        self._critical = critical
        self._duration_ms = duration_ms
        self._raise_exception = raise_exception
        self._exception_type = exception_type
        self.call_count = 0

    async def __call__(self, *args: Any, **kwargs: Any) -> HealthCheckResult:  # noqa: ARG002
        """Execute the health check."""
        self.call_count += 1

        if self._delay > 0:
            await asyncio.sleep(self._delay)

        if self._raise_exception:
            raise self._exception_type(self._error or "Mock exception")

        return HealthCheckResult(
            metadata=HealthCheckMetadata(
                name=self.name,
                critical=self._critical,
                description=f"Mock checker for {self.name}",
            ),
            is_healthy=self._is_healthy,
            error=self._error,
            duration_ms=self._duration_ms,
        )


class RecordingEntrypoint(AbstractEntrypoint):
    """Entrypoint that records its lifecycle calls into a shared journal."""

    def __init__(
        self,
        name: str,
        journal: list[str],
        run_forever: bool = False,
        fail_on: str | None = None,
        shutdown_delay: float = 0.0,
    ) -> None:
        """Initialize the entrypoint.

        Args:
            name: Name used in the journal.
            journal: Shared list the calls are appended to.
            run_forever: Whether run() blocks until cancelled.
            fail_on: Lifecycle step ("startup", "run" or "shutdown") that raises RuntimeError.
            shutdown_delay: Seconds shutdown() sleeps before returning.

        """
        self._name = name
        self._journal = journal
        self._run_forever = run_forever
        self._fail_on = fail_on
        self._shutdown_delay = shutdown_delay

    @property
    def name(self) -> str:
        """Name of the entrypoint."""
        return self._name

    def _record(self, step: str) -> None:
        self._journal.append(f"{self._name}.{step}")
        if self._fail_on == step:
            raise RuntimeError(f"{self._name} failed on {step}")

    async def startup(self) -> None:
        """Startup."""
        self._record("startup")

    async def run(self) -> None:
        """Run."""
        self._record("run")
        if self._run_forever:
            await asyncio.Event().wait()

    async def shutdown(self) -> None:
        """Shutdown."""
        if self._shutdown_delay:
            await asyncio.sleep(self._shutdown_delay)
        self._record("shutdown")


class FailingBackgroundService(AbstractBackgroundService):
    """Background service whose execute() raises."""

    def __init__(self) -> None:
        """Initialize the service."""
        self.stopped = False

    async def execute(self) -> None:
        """Fail."""
        raise RuntimeError("background service failed")

    async def stop(self) -> None:
        """Record the stop."""
        self.stopped = True


class CountingBackgroundService(AbstractBackgroundService):
    """Background service that counts its iterations until cancelled."""

    def __init__(self, interval: float = 0.01) -> None:
        """Initialize the service."""
        self.interval = interval
        self.iterations = 0
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        """Record the start."""
        self.started = True

    async def execute(self) -> None:
        """Count forever."""
        while True:
            self.iterations += 1
            await asyncio.sleep(self.interval)

    async def stop(self) -> None:
        """Record the stop."""
        self.stopped = True
