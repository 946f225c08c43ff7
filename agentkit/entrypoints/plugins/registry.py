"""Plugin registry for entrypoint plugin discovery."""

from collections.abc import Iterator
from typing import Any, cast

from agentkit.entrypoints.plugins.abstract import AbstractEntrypointPlugin


class PluginRegistry:
    """Read-only registry for plugin discovery.

    Example:
        ```python
        dishka_plugin = entrypoint.plugin_registry.get_plugin(FastAPIDishkaPlugin)
        if dishka_plugin is not None:
            container = dishka_plugin.get_container()
        ```

    """

    def __init__(self) -> None:
        """Initialize the plugin registry."""
        self._plugins: list[AbstractEntrypointPlugin[Any]] = []

    def add(self, plugin: AbstractEntrypointPlugin[Any]) -> None:
        """Add a plugin to the registry.

        Called by the entrypoint when a plugin is applied. Plugins keep the
        order they were applied in.

        Args:
            plugin: The plugin to register.

        """
        self._plugins.append(plugin)

    def has_plugin(self, plugin_type: type[AbstractEntrypointPlugin[Any]]) -> bool:
        """Check if a plugin of the given type is registered."""
        return any(isinstance(plugin, plugin_type) for plugin in self._plugins)

    def get_plugin[T_Plugin: AbstractEntrypointPlugin[Any]](self, plugin_type: type[T_Plugin]) -> T_Plugin | None:
        """Get the first registered plugin of the given type.

        Args:
            plugin_type: The plugin class to retrieve.

        Returns:
            The plugin instance if found, None otherwise.

        """
        for plugin in self._plugins:
            if isinstance(plugin, plugin_type):
                return cast("T_Plugin", plugin)
        return None

    def get_all_plugins(self) -> Iterator[AbstractEntrypointPlugin[Any]]:
        """Get all registered plugins in the order they were added."""
        return iter(self._plugins)
