"""Agent composition root."""

import asyncio
import logging
import signal
from collections.abc import Sequence
from dataclasses import dataclass

from dishka import AsyncContainer, Provider
from fastapi import FastAPI

from agentkit.background.service import AbstractBackgroundService
from agentkit.configs.agent import AgentConfig
from agentkit.dependencies.dishka.agent import make_agent_container
from agentkit.entrypoints import AgentHost
from agentkit.entrypoints.background import BackgroundServiceEntrypoint
from agentkit.entrypoints.fastapi import FastAPIEntrypoint
from agentkit.entrypoints.plugins.fastapi import (
    FastAPIDishkaPlugin,
    FastAPIHealthCheckPlugin,
    FastAPIObservabilityPlugin,
)
from agentkit.observability.setupper import ObservabilitySetupper
from agentkit.version import APPLICATION_NAME, APPLICATION_VERSION
from agentkit.web.health.checkers.registry import HealthCheckRegistry
from agentkit.web.health.core.status import HealthStatusPolicy

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class Agent:
    """A composed agent, ready to run."""

    config: AgentConfig
    container: AsyncContainer
    observability: ObservabilitySetupper
    host: AgentHost
    app: FastAPI

    async def run(self) -> None:
        """Run the host until it stops, then close the container and flush telemetry.

        SIGINT and SIGTERM stop the host, which shuts every entrypoint down.
        """
        loop = asyncio.get_running_loop()
        for signal_number in STOP_SIGNALS:
            loop.add_signal_handler(signal_number, self.host.stop)
        try:
            await self.host.run_entrypoints()
        finally:
            for signal_number in STOP_SIGNALS:
                loop.remove_signal_handler(signal_number)
            await self.container.close()
            self.observability.shutdown()


async def build_agent(
    config: AgentConfig,
    *providers: Provider,
    services: Sequence[AbstractBackgroundService | type[AbstractBackgroundService]] = (),
) -> Agent:
    """Compose the agent.

    Sets up logging, tracing, metrics and Sentry, builds the container, binds
    the liveness and readiness endpoints and hosts the background services.

    Args:
        config: The agent config.
        *providers: Providers of the application services.
        services: Background services, as instances or as types resolved from the container.

    Returns:
        The composed agent.

    """
    observability = (
        ObservabilitySetupper(
            config.observability,
            service_name=APPLICATION_NAME,
            service_version=APPLICATION_VERSION,
            environment=config.environment,
        )
        .setup_logging()
        .setup_sentry()
        .setup_tracing()
        .setup_metrics()
        .instrument_httpx()
    )

    container = make_agent_container(config, *providers)

    app = FastAPI(title=APPLICATION_NAME, version=APPLICATION_VERSION or "0.0.0")
    fastapi_entrypoint = (
        FastAPIEntrypoint(app=app, server_config=config.server)
        .use_plugin(FastAPIDishkaPlugin(container))
        .use_plugin(FastAPIObservabilityPlugin(observability))
        .use_plugin(
            FastAPIHealthCheckPlugin(
                registry=await container.get(HealthCheckRegistry),
                policy=await container.get(HealthStatusPolicy),
                config=config.health,
            )
        )
    )

    host = AgentHost(config.host).add_entrypoint(fastapi_entrypoint)
    for service in services:
        instance = await container.get(service) if isinstance(service, type) else service
        host.add_entrypoint(BackgroundServiceEntrypoint(instance))

    logger.info("Agent has been built for the %s environment", config.environment)

    return Agent(config=config, container=container, observability=observability, host=host, app=app)


async def run_agent(
    config: AgentConfig | None = None,
    *providers: Provider,
    services: Sequence[AbstractBackgroundService | type[AbstractBackgroundService]] = (),
) -> None:
    """Build and run the agent until it is stopped."""
    agent = await build_agent(config or AgentConfig.from_env(), *providers, services=services)
    await agent.run()


def main() -> None:
    """Run the agent from the command line."""
    try:
        asyncio.run(run_agent())
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Agent crashed")
        raise SystemExit(1) from None
