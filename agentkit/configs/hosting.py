"""Host config."""

from pydantic import BaseModel, Field

from agentkit.enums.base import BaseEnum


class BackgroundServiceExceptionBehavior(BaseEnum):
    """What the host does when a background service fails.

    Values:
        IGNORE: Log and report the failure, keep the other entrypoints running.
        STOP_HOST: Stop the host.
    """

    IGNORE = "ignore"
    STOP_HOST = "stop_host"


class HostConfig(BaseModel):
    """Host lifecycle configuration.

    Attributes:
        shutdown_timeout_seconds: Time given to entrypoints to shut down.
        background_service_exception_behavior: What happens when a background service fails.
        services_start_concurrently: Whether entrypoints start concurrently.
        services_stop_concurrently: Whether entrypoints stop concurrently.
        suppress_status_messages: Whether lifecycle status messages are suppressed.

    """

    shutdown_timeout_seconds: float = Field(default=5.0, gt=0, description="Time given to entrypoints to shut down.")
    background_service_exception_behavior: BackgroundServiceExceptionBehavior = Field(
        default=BackgroundServiceExceptionBehavior.IGNORE,
        description="What happens when a background service fails.",
    )
    services_start_concurrently: bool = Field(default=False, description="Whether entrypoints start concurrently.")
    services_stop_concurrently: bool = Field(default=True, description="Whether entrypoints stop concurrently.")
    suppress_status_messages: bool = Field(
        default=False, description="Whether lifecycle status messages are suppressed."
    )
