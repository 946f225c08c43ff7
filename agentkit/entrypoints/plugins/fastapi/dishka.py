"""FastAPI Dishka plugin."""

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka as setup_dishka_fastapi

from agentkit.entrypoints.fastapi import FastAPIEntrypoint
from agentkit.entrypoints.plugins.abstract import AbstractEntrypointPlugin


class FastAPIDishkaPlugin(AbstractEntrypointPlugin[FastAPIEntrypoint]):
    """Plugin for adding Dishka dependency injection to FastAPI entrypoints.

    Example:
        ```python
        container = make_agent_container(config)
        entrypoint = FastAPIEntrypoint(app=app).use_plugin(FastAPIDishkaPlugin(container))
        ```

    """

    def __init__(self, container: AsyncContainer) -> None:
        """Initialize the Dishka plugin.

        Args:
            container: The Dishka async container instance.

        """
        self._container = container

    def get_container(self) -> AsyncContainer:
        """Get the Dishka container instance."""
        return self._container

    def apply(self, component: FastAPIEntrypoint) -> FastAPIEntrypoint:
        """Apply Dishka to the entrypoint.

        Args:
            component: The FastAPI entrypoint to configure.

        Returns:
            The configured entrypoint.

        """
        setup_dishka_fastapi(self._container, component.get_app())
        return component
