"""Application name and version."""

from importlib.metadata import PackageNotFoundError, version

APPLICATION_NAME = "agentkit"

try:
    APPLICATION_VERSION: str | None = version(APPLICATION_NAME)
except PackageNotFoundError:
    APPLICATION_VERSION = None
