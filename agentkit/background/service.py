"""Background services."""

import abc


class AbstractBackgroundService(abc.ABC):
    """Long-running unit of work hosted by the agent.

    Example:
        ```python
        class HeartbeatService(AbstractBackgroundService):
            def __init__(self, client: httpx.AsyncClient) -> None:
                self._client = client

            async def execute(self) -> None:
                while True:
                    await self._client.post("https://control.example/heartbeat")
                    await asyncio.sleep(30)
        ```

    """

    @property
    def name(self) -> str:
        """Name of the service used in logs."""
        return type(self).__name__

    async def start(self) -> None:  # noqa: B027
        """Prepare the service before `execute` is scheduled."""

    @abc.abstractmethod
    async def execute(self) -> None:
        """Do the work. Cancelled when the host stops."""

    async def stop(self) -> None:  # noqa: B027
        """Release the resources of the service."""
