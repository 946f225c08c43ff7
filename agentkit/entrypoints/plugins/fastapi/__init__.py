"""FastAPI entrypoint plugins."""

from agentkit.entrypoints.plugins.fastapi.dishka import FastAPIDishkaPlugin
from agentkit.entrypoints.plugins.fastapi.health import FastAPIHealthCheckPlugin
from agentkit.entrypoints.plugins.fastapi.observability import FastAPIObservabilityPlugin

__all__ = [
    "FastAPIDishkaPlugin",
    "FastAPIHealthCheckPlugin",
    "FastAPIObservabilityPlugin",
]
