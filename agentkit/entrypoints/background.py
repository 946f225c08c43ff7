"""Background service entrypoint."""

import logging

from agentkit.background.service import AbstractBackgroundService
from agentkit.entrypoints.abstract import AbstractEntrypoint, EntrypointInconsistencyError

logger = logging.getLogger(__name__)


class BackgroundServiceEntrypoint(AbstractEntrypoint):
    """Runs an `AbstractBackgroundService` as an entrypoint.

    Example:
        ```python
        host = AgentHost(config.host).add_entrypoint(BackgroundServiceEntrypoint(HeartbeatService(client)))
        await host.run_entrypoints()
        ```

    """

    def __init__(self, service: AbstractBackgroundService) -> None:
        """Initialize the entrypoint.

        Args:
            service: The background service to run.

        """
        self._service = service
        self._started = False

    @property
    def name(self) -> str:
        """Name of the hosted service."""
        return self._service.name

    @property
    def service(self) -> AbstractBackgroundService:
        """The hosted service."""
        return self._service

    async def startup(self) -> None:
        """Start the service."""
        await self._service.start()
        self._started = True
        logger.debug("Background service %s has been started", self.name)

    async def run(self) -> None:
        """Execute the service.

        Raises:
            EntrypointInconsistencyError: If entrypoint was not started via startup().

        """
        if not self._started:
            raise EntrypointInconsistencyError("Background service entrypoint must be started before run()")

        await self._service.execute()
        logger.info("Background service %s has completed", self.name)

    async def shutdown(self) -> None:
        """Stop the service. Idempotent."""
        if not self._started:
            return

        self._started = False
        await self._service.stop()
        logger.debug("Background service %s has been stopped", self.name)
