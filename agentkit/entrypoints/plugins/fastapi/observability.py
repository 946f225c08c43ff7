"""FastAPI observability plugin."""

from agentkit.entrypoints.fastapi import FastAPIEntrypoint
from agentkit.entrypoints.plugins.abstract import AbstractEntrypointPlugin
from agentkit.exceptions.handlers.fastapi import fastapi_unknown_exception_handler_with_observability
from agentkit.observability.setupper import ObservabilitySetupper


class FastAPIObservabilityPlugin(AbstractEntrypointPlugin[FastAPIEntrypoint]):
    """Plugin for adding tracing, metrics and error reporting to FastAPI entrypoints.

    Example:
        ```python
        observability = ObservabilitySetupper(config.observability).setup_logging().setup_tracing()
        entrypoint = FastAPIEntrypoint(app=app).use_plugin(FastAPIObservabilityPlugin(observability))
        ```

    """

    def __init__(self, observability: ObservabilitySetupper, observe_unhandled_exceptions: bool = True) -> None:
        """Initialize the observability plugin.

        Args:
            observability: The observability setupper.
            observe_unhandled_exceptions: Whether unhandled exceptions are recorded on the
                current span and reported to Sentry before the 500 response is sent.

        """
        self._observability = observability
        self._observe_unhandled_exceptions = observe_unhandled_exceptions

    def apply(self, component: FastAPIEntrypoint) -> FastAPIEntrypoint:
        """Apply observability to the entrypoint.

        Args:
            component: The FastAPI entrypoint to configure.

        Returns:
            The configured component.

        """
        app = component.get_app()
        self._observability.instrument_fastapi(app)

        if self._observe_unhandled_exceptions:
            app.add_exception_handler(Exception, fastapi_unknown_exception_handler_with_observability)

        return component
