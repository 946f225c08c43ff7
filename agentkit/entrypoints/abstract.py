"""Abstract entrypoint."""

from types import TracebackType
from typing import Self

from agentkit.components.abstract import ComponentInconsistencyError


class AbstractEntrypoint:
    """Abstract entrypoint.

    Defines the interface that all entrypoints implement. Entrypoints are
    runnable components that are orchestrated together by `AgentHost`.

    Lifecycle:
        1. validate() - Called before startup() to check configuration
        2. startup() - Called before run() to initialize resources
        3. run() - Main execution method that runs the entrypoint
        4. shutdown() - Called after run() completes or is cancelled to cleanup resources

    Example:
        ```python
        class MyEntrypoint(AbstractEntrypoint):
            async def startup(self) -> None:
                # Initialize resources
                pass

            async def run(self) -> None:
                # Main execution logic
                pass

            async def shutdown(self) -> None:
                # Cleanup resources
                pass
        ```

    """

    @property
    def name(self) -> str:
        """Name of the entrypoint used in logs."""
        return type(self).__name__

    def validate(self) -> None:
        """Validate the entrypoint configuration.

        Raises:
            EntrypointInconsistencyError: If configuration is invalid.

        """

    async def startup(self) -> None:
        """Startup the entrypoint.

        Raises:
            EntrypointInconsistencyError: If configuration is invalid.

        """

    async def shutdown(self) -> None:
        """Shutdown the entrypoint.

        Called after run() completes or is cancelled. Should be idempotent
        and safe to call multiple times.

        """

    async def run(self) -> None:
        """Run the entrypoint.

        This method is called after startup() and should be overridden by subclasses.
        """

    async def __aenter__(self) -> Self:
        """Enter context manager."""
        await self.startup()
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        """Exit context manager."""
        await self.shutdown()


class EntrypointInconsistencyError(ComponentInconsistencyError):
    """Entrypoint inconsistency error.

    Raised when an entrypoint is misconfigured, has missing dependencies,
    or is used out of lifecycle order.

    Example:
        ```python
        raise EntrypointInconsistencyError("FastAPI entrypoint must be started via startup() before run()")
        ```

    """

    def __init__(self, message: str) -> None:
        """Initialize the entrypoint inconsistency error.

        Args:
            message: Error message describing the inconsistency.

        """
        super().__init__(message)
