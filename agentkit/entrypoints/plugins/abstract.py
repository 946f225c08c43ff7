"""Abstract plugin protocol."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from agentkit.entrypoints.abstract import AbstractEntrypoint


class AbstractEntrypointPlugin[T_Entrypoint: AbstractEntrypoint](Protocol):
    """Base protocol for entrypoint plugins.

    Plugins are reusable feature modules that can be applied to entrypoints
    to add functionality without modifying the entrypoint code.

    Example:
        ```python
        class MyPlugin:
            def apply(self, component: FastAPIEntrypoint) -> FastAPIEntrypoint:
                component.get_app().add_api_route("/version", version_handler)
                return component
        ```

    """

    def apply(self, component: T_Entrypoint) -> T_Entrypoint:
        """Apply the plugin to an entrypoint.

        Args:
            component: The entrypoint to configure.

        Returns:
            The configured entrypoint (usually the same instance for method chaining).

        """
        ...
