"""FastAPI entrypoint."""

import asyncio

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Self

from dishka import AsyncContainer
from fastapi import FastAPI
from uvicorn import Config, Server

from agentkit.configs.server import ServerConfig
from agentkit.entrypoints.abstract import AbstractEntrypoint, EntrypointInconsistencyError
from agentkit.entrypoints.plugins.abstract import AbstractEntrypointPlugin
from agentkit.entrypoints.plugins.registry import PluginRegistry


class AgentServer(Server):
    """Uvicorn server that leaves signal handling to the agent.

    `Agent.run` turns SIGINT and SIGTERM into `AgentHost.stop()`, so every
    entrypoint shuts down the same way.
    """

    @contextmanager
    def capture_signals(self) -> Generator[None]:
        yield


class FastAPIEntrypoint(AbstractEntrypoint):
    """FastAPI entrypoint implementation with plugin system.

    Provides a builder-pattern interface for configuring and running FastAPI applications
    using plugins for dependency injection, observability and health checks.

    Example:
        ```python
        from fastapi import FastAPI
        from agentkit.entrypoints.fastapi import FastAPIEntrypoint
        from agentkit.entrypoints.plugins.fastapi import (
            FastAPIDishkaPlugin,
            FastAPIHealthCheckPlugin,
            FastAPIObservabilityPlugin,
        )

        app = FastAPI()
        entrypoint = (
            FastAPIEntrypoint(app=app)
            .use_plugin(FastAPIDishkaPlugin(container))
            .use_plugin(FastAPIObservabilityPlugin(observability))
            .use_plugin(FastAPIHealthCheckPlugin(registry, policy))
        )

        async with entrypoint:
            await entrypoint.run()
        ```

    """

    def __init__(self, app: FastAPI, server_config: ServerConfig | None = None) -> None:
        """Initialize the FastAPI entrypoint.

        Args:
            app: The FastAPI application instance.
            server_config: Optional server configuration. If None, uses default configuration.

        """
        self._app = app
        self._server_config = server_config or ServerConfig()
        self._server: Server | None = None
        self._plugin_registry = PluginRegistry()

    def use_plugin(self, plugin: AbstractEntrypointPlugin[Self]) -> Self:
        """Register and apply a plugin to the entrypoint.

        Args:
            plugin: The plugin to add and apply.

        Returns:
            Self for method chaining.

        """
        self._plugin_registry.add(plugin)
        return plugin.apply(self)

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app

    def get_container(self) -> AsyncContainer:
        """Get the Dishka container set up by `FastAPIDishkaPlugin`.

        Raises:
            EntrypointInconsistencyError: If the Dishka plugin has not been applied.

        """
        # Imported here, the plugin module imports this one
        from agentkit.entrypoints.plugins.fastapi.dishka import FastAPIDishkaPlugin  # noqa: PLC0415

        dishka_plugin = self._plugin_registry.get_plugin(FastAPIDishkaPlugin)
        if dishka_plugin is None:
            raise EntrypointInconsistencyError("FastAPIDishkaPlugin must be applied to access the container")
        return dishka_plugin.get_container()

    @property
    def plugin_registry(self) -> PluginRegistry:
        """Get the plugin registry for plugin discovery."""
        return self._plugin_registry

    async def startup(self) -> None:
        """Startup the FastAPI entrypoint.

        Initializes the uvicorn server and prepares it for execution.
        """
        self._server = AgentServer(
            Config(
                self._app,
                host=self._server_config.host,
                port=self._server_config.port,
                log_config=None,
            )
        )

    async def shutdown(self) -> None:
        """Shutdown the FastAPI entrypoint.

        Asks a running server to exit. Idempotent.
        """
        if self._server is not None:
            self._server.should_exit = True

    async def run(self, *args: Any, **kwargs: Any) -> None:
        """Run the FastAPI entrypoint.

        Starts the uvicorn server and serves the FastAPI application.
        This method runs until the server exits or the task is cancelled.

        Args:
            *args: The arguments to pass to the Server serve method.
            **kwargs: The keyword arguments to pass to the Server serve method.

        Raises:
            EntrypointInconsistencyError: If entrypoint was not started via startup().

        """
        if self._server is None:
            raise EntrypointInconsistencyError("FastAPI entrypoint must be started via startup() before run()")

        try:
            await self._server.serve(*args, **kwargs)
        except asyncio.CancelledError:
            # Stopped by the host, close the listeners and drain open connections first
            if self._server.started:
                await self._server.shutdown()
            raise
