"""Entrypoints for the application."""

import asyncio
import logging
from asyncio import TaskGroup
from collections.abc import Sequence
from typing import Self

from agentkit.configs.hosting import BackgroundServiceExceptionBehavior, HostConfig
from agentkit.entrypoints.abstract import AbstractEntrypoint, EntrypointInconsistencyError
from agentkit.entrypoints.background import BackgroundServiceEntrypoint
from agentkit.observability.utils import observe_exception

logger = logging.getLogger(__name__)


class AgentHost:
    """Agent host.

    Orchestrates multiple entrypoints with proper lifecycle management, including
    startup, execution, and graceful shutdown. Handles errors and ensures proper
    resource cleanup.

    Lifecycle:
        1. Validation - Validates all entrypoints before starting
        2. Startup - Calls startup() on all entrypoints, in order unless configured to start concurrently
        3. Execution - Runs all entrypoints concurrently using TaskGroup
        4. Shutdown - Calls shutdown() on all started entrypoints within the shutdown timeout,
           concurrently unless configured to stop in reverse order

    A failing background service is logged and reported while the other entrypoints
    keep running, unless `background_service_exception_behavior` is `stop_host`.

    Example:
        ```python
        from agentkit.entrypoints import AgentHost
        from agentkit.entrypoints.background import BackgroundServiceEntrypoint
        from agentkit.entrypoints.fastapi import FastAPIEntrypoint

        host = AgentHost(config.host)
        host.add_entrypoint(fastapi_entrypoint).add_entrypoint(BackgroundServiceEntrypoint(service))
        await host.run_entrypoints()
        ```

    """

    def __init__(self, config: HostConfig | None = None) -> None:
        """Initialize the host.

        Args:
            config: Host lifecycle configuration. If None, uses default configuration.

        """
        self._config = config or HostConfig()
        self._entrypoints: list[AbstractEntrypoint] = []
        self._tasks: list[asyncio.Task[None]] = []
        self._stop_requested = False

    @property
    def entrypoints(self) -> list[AbstractEntrypoint]:
        """Entrypoints orchestrated by the host."""
        return list(self._entrypoints)

    def add_entrypoint(self, entrypoint: AbstractEntrypoint) -> Self:
        """Add an entrypoint to be orchestrated.

        Args:
            entrypoint: The entrypoint to add.

        Returns:
            Self for method chaining.

        Raises:
            EntrypointInconsistencyError: If entrypoint validation fails.

        """
        self._validate_entrypoint(entrypoint)
        self._entrypoints.append(entrypoint)
        return self

    def _validate_entrypoint(self, entrypoint: AbstractEntrypoint) -> None:
        try:
            entrypoint.validate()
        except Exception as e:
            raise EntrypointInconsistencyError(f"Entrypoint {entrypoint.name} validation failed") from e

    def _status(self, message: str, *args: object) -> None:
        if not self._config.suppress_status_messages:
            logger.info(message, *args)

    def stop(self) -> None:
        """Request the host to stop.

        Running entrypoints are cancelled and shut down, then `run_entrypoints`
        returns. A stop requested while the host is starting takes effect as soon
        as startup completes.
        """
        self._status("Host is stopping")
        self._stop_requested = True
        self._cancel_tasks()

    def _cancel_tasks(self, keep: asyncio.Task[None] | None = None) -> None:
        for task in self._tasks:
            if task is not keep:
                task.cancel()

    async def run_entrypoints(self, entrypoints: Sequence[AbstractEntrypoint] | None = None) -> None:
        """Run the entrypoints with full lifecycle management.

        The run ends when `stop()` is called, when an entrypoint other than a
        background service returns, or when every background service has returned.

        Args:
            entrypoints: Optional list of entrypoints to run. If None, uses
                entrypoints added via add_entrypoint(). If provided, replaces
                any previously added entrypoints.

        Raises:
            EntrypointInconsistencyError: If any entrypoint validation fails.
            ExceptionGroup: If entrypoints fail during startup or execution.

        """
        if entrypoints is not None:
            self._entrypoints = list(entrypoints)

        if not self._entrypoints:
            logger.warning("No entrypoints to run")
            return

        for entrypoint in self._entrypoints:
            self._validate_entrypoint(entrypoint)

        self._stop_requested = False
        started = await self._startup()

        self._status("Host started with entrypoints: %s", ", ".join(entrypoint.name for entrypoint in started))

        try:
            if not self._stop_requested:
                async with TaskGroup() as task_group:
                    self._tasks = [
                        task_group.create_task(self._run_entrypoint(entrypoint), name=entrypoint.name)
                        for entrypoint in started
                    ]
        except* Exception:
            logger.exception("Error during entrypoint execution")
            raise
        finally:
            self._tasks = []
            await self._shutdown(started)
            self._status("Host stopped")

    async def _startup(self) -> list[AbstractEntrypoint]:
        started: list[AbstractEntrypoint] = []
        startup_errors: list[Exception] = []

        if self._config.services_start_concurrently:
            results = await asyncio.gather(
                *(entrypoint.startup() for entrypoint in self._entrypoints), return_exceptions=True
            )
            for entrypoint, result in zip(self._entrypoints, results, strict=True):
                if isinstance(result, Exception):
                    startup_errors.append(result)
                elif isinstance(result, BaseException):
                    raise result
                else:
                    started.append(entrypoint)
        else:
            for entrypoint in self._entrypoints:
                try:
                    await entrypoint.startup()
                except Exception as e:
                    startup_errors.append(e)
                    break
                started.append(entrypoint)

        if startup_errors:
            logger.error("Host failed to start, shutting down started entrypoints")
            shutdown_errors = await self._shutdown(started)
            if shutdown_errors:
                raise ExceptionGroup("Errors during startup and shutdown", startup_errors + shutdown_errors)
            raise ExceptionGroup("Errors during startup", startup_errors)

        return started

    async def _run_entrypoint(self, entrypoint: AbstractEntrypoint) -> None:
        try:
            await entrypoint.run()
        except Exception as e:
            if (
                isinstance(entrypoint, BackgroundServiceEntrypoint)
                and self._config.background_service_exception_behavior == BackgroundServiceExceptionBehavior.IGNORE
            ):
                logger.exception("Background service %s failed, the host keeps running", entrypoint.name)
                observe_exception(e)
                return
            raise

        if not isinstance(entrypoint, BackgroundServiceEntrypoint):
            # The host lives as long as its server
            self._status("Entrypoint %s exited, stopping the host", entrypoint.name)
            self._cancel_tasks(keep=asyncio.current_task())

    async def _shutdown(self, entrypoints: Sequence[AbstractEntrypoint]) -> list[Exception]:
        shutdown_errors: list[Exception] = []

        async def shutdown_one(entrypoint: AbstractEntrypoint) -> None:
            try:
                await entrypoint.shutdown()
            except Exception as e:
                logger.exception("Entrypoint %s failed to shut down", entrypoint.name)
                shutdown_errors.append(e)

        try:
            async with asyncio.timeout(self._config.shutdown_timeout_seconds):
                if self._config.services_stop_concurrently:
                    await asyncio.gather(*(shutdown_one(entrypoint) for entrypoint in entrypoints))
                else:
                    for entrypoint in reversed(entrypoints):
                        await shutdown_one(entrypoint)
        except TimeoutError as e:
            logger.error("Entrypoints did not shut down within %s seconds", self._config.shutdown_timeout_seconds)  # noqa: TRY400
            shutdown_errors.append(e)

        return shutdown_errors
