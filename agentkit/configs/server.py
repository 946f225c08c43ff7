"""Server config."""

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """HTTP server configuration.

    Attributes:
        host: The host to bind the server to.
        port: The port to bind the server to.

    """

    host: str = Field(default="0.0.0.0", description="The host to bind the server to.")  # noqa: S104
    port: int = Field(default=8000, ge=0, le=65535, description="The port to bind the server to.")
