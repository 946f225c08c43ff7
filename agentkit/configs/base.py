"""Base config."""

from typing import Self

from pydantic_settings import BaseSettings


class BaseConfig(BaseSettings):
    """Base config.

    Subclasses declare their own sources and prefixes, `from_env` is the single
    place the application reads them from.
    """

    @classmethod
    def from_env(cls) -> Self:
        """Load the config from its configured sources."""
        return cls()
