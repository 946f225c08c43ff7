"""Health check executor with timeout and parallel execution support."""

import asyncio
import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from agentkit.web.health.checkers.abstract import (
    AbstractHealthChecker,
    HealthCheckMetadata,
    HealthCheckResult,
)
from agentkit.web.health.core.status import HealthStatus

logger = logging.getLogger(__name__)

TIMEOUT_ERROR_MESSAGE = "Health check timed out"

type Checkers = Sequence[AbstractHealthChecker] | Mapping[str, AbstractHealthChecker]


class HealthCheckExecutor:
    """Executes health checks and reduces their results to a `HealthStatus`.

    A checker never breaks the request that runs it: exceptions, timeouts and
    unexpected return values all become unhealthy results carrying the
    checker's metadata.

    Example:
        ```python
        executor = HealthCheckExecutor(timeout_seconds=5.0)
        results = await executor.execute([db_checker, upstream_checker])
        overall_status = executor.aggregate_status(results)
        ```

    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        execute_parallel: bool = True,
    ) -> None:
        """Initialize the health check executor.

        Args:
            timeout_seconds: Maximum time in seconds to wait for the checks to complete.
                If None, no timeout is applied.
            execute_parallel: Whether to execute checks in parallel.
                If False, checks are executed sequentially and the timeout applies per check.

        """
        self.timeout_seconds = timeout_seconds
        self.execute_parallel = execute_parallel

    async def execute(self, checkers: Checkers) -> list[HealthCheckResult]:
        """Execute health checks.

        Args:
            checkers: Health checkers to execute, or a mapping of registered names to checkers.
                Results of named checkers carry the registered name, whatever the checker calls itself.

        Returns:
            One result per checker, in the order of `checkers`.

        """
        if not checkers:
            return []

        named: list[tuple[str | None, AbstractHealthChecker]] = (
            list(checkers.items())
            if isinstance(checkers, Mapping)
            else [(None, checker) for checker in checkers]
        )

        if self.execute_parallel:
            return await self._execute_parallel(named)
        return [
            await self._run_checker(checker, index, name, self.timeout_seconds)
            for index, (name, checker) in enumerate(named)
        ]

    async def _execute_parallel(
        self, named: Sequence[tuple[str | None, AbstractHealthChecker]]
    ) -> list[HealthCheckResult]:
        runs = asyncio.gather(*(self._run_checker(checker, index, name) for index, (name, checker) in enumerate(named)))
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await runs
        except TimeoutError:
            # The whole batch shares one deadline
            logger.warning("Health checks timed out after %s seconds", self.timeout_seconds)
            return [
                self._failed_result(checker, index, name, TIMEOUT_ERROR_MESSAGE)
                for index, (name, checker) in enumerate(named)
            ]

    async def _run_checker(
        self,
        checker: AbstractHealthChecker,
        index: int,
        name: str | None = None,
        timeout_seconds: float | None = None,
    ) -> HealthCheckResult:
        start_time = time.perf_counter()
        try:
            async with asyncio.timeout(timeout_seconds):
                result = await checker()
        except TimeoutError:
            return self._failed_result(checker, index, name, TIMEOUT_ERROR_MESSAGE)
        except Exception as e:
            logger.warning("Health checker %s raised an exception", name or repr(checker), exc_info=e)
            return self._failed_result(checker, index, name, str(e))

        if not isinstance(result, HealthCheckResult):
            return self._failed_result(checker, index, name, f"Unexpected result type: {type(result)}")

        if name is not None and result.metadata.name != name:
            result.metadata = result.metadata.model_copy(update={"name": name})
        if result.duration_ms is None:
            result.duration_ms = (time.perf_counter() - start_time) * 1000
        return result

    @classmethod
    def _failed_result(cls, checker: Any, index: int, name: str | None, error: str) -> HealthCheckResult:
        metadata = cls._get_checker_metadata(checker, index)
        if name is not None:
            metadata = metadata.model_copy(update={"name": name})
        return HealthCheckResult(metadata=metadata, is_healthy=False, error=error)

    @staticmethod
    def _get_checker_metadata(checker: Any, index: int) -> HealthCheckMetadata:
        """Describe a checker that produced no result of its own.

        Uses the checker's `metadata`, else its `name` and `critical` attributes,
        else a positional name. Checkers are critical unless they say otherwise.
        """
        metadata = getattr(checker, "metadata", None)
        if isinstance(metadata, HealthCheckMetadata):
            return metadata

        name = getattr(checker, "name", None)
        if isinstance(name, str):
            return HealthCheckMetadata(name=name, critical=getattr(checker, "critical", True) is not False)

        return HealthCheckMetadata(name=f"checker_{index}", critical=True)

    @staticmethod
    def aggregate_status(results: Sequence[HealthCheckResult]) -> HealthStatus:
        """Reduce results to the worst status among them.

        Any failed critical check makes the service UNHEALTHY, any other failed
        check makes it DEGRADED. No results at all is HEALTHY.
        """
        failures = [result for result in results if not result.is_healthy]
        if any(result.metadata.critical for result in failures):
            return HealthStatus.UNHEALTHY
        if failures:
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY
