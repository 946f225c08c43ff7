"""Agent config."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from agentkit.configs.base import BaseConfig
from agentkit.configs.features import FeatureFlagsConfig
from agentkit.configs.health import HealthCheckConfig
from agentkit.configs.hosting import HostConfig
from agentkit.configs.http import HttpClientConfig
from agentkit.configs.observability import ObservabilityConfig
from agentkit.configs.server import ServerConfig

ENV_PREFIX = "APP_"
DEVELOPMENT_ENV_PREFIX = "DEV_APP_"
ENVIRONMENT_VARIABLE = "APP_ENVIRONMENT"
CONFIG_DIR_VARIABLE = "APP_CONFIG_DIR"
DEVELOPMENT_ENVIRONMENT = "Development"
DEFAULT_ENVIRONMENT = "Production"
FEATURES_FILE_NAME = "features.json"


def get_environment_name() -> str:
    """Get the environment name, e.g. "Development", "Staging" or "Production"."""
    return os.environ.get(ENVIRONMENT_VARIABLE, DEFAULT_ENVIRONMENT)


def get_config_dir() -> Path:
    """Get the directory holding the features files."""
    return Path(os.environ.get(CONFIG_DIR_VARIABLE, "."))


def get_features_files(environment: str, config_dir: Path) -> list[Path]:
    """Get the features files in ascending priority: later files override earlier ones."""
    return [config_dir / FEATURES_FILE_NAME, config_dir / f"features.{environment}.json"]


class AgentConfig(BaseConfig):
    """Agent configuration.

    Sources, highest priority first:
        1. Init arguments.
        2. `DEV_APP_*` environment variables, only in the "Development" environment.
        3. `APP_*` environment variables, nested with `__` (e.g. `APP_SERVER__PORT=9000`).
        4. `features.<Environment>.json`.
        5. `features.json`.

    Both features files are optional and looked up in `APP_CONFIG_DIR`
    (defaults to the working directory).

    Example:
        ```python
        config = AgentConfig.from_env()
        if config.is_development:
            ...
        ```

    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: str = Field(default_factory=get_environment_name, description="The environment name.")
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    health: HealthCheckConfig = Field(default_factory=HealthCheckConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    http_client: HttpClientConfig = Field(default_factory=HttpClientConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    features: FeatureFlagsConfig = Field(default_factory=FeatureFlagsConfig)

    @property
    def is_development(self) -> bool:
        """Whether the agent runs in the development environment."""
        return self.environment == DEVELOPMENT_ENVIRONMENT

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order the configuration sources."""
        environment = get_environment_name()
        sources: list[PydanticBaseSettingsSource] = [init_settings]

        if environment == DEVELOPMENT_ENVIRONMENT:
            sources.append(
                EnvSettingsSource(settings_cls, env_prefix=DEVELOPMENT_ENV_PREFIX, env_nested_delimiter="__")
            )

        sources.append(env_settings)
        sources.append(
            JsonConfigSettingsSource(
                settings_cls, json_file=get_features_files(environment, get_config_dir()), deep_merge=True
            )
        )
        return tuple(sources)
