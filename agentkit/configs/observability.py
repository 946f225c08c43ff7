"""Observability config."""

import os
from typing import Self

from pydantic import BaseModel, Field, model_validator

OTEL_ENDPOINT_ENVIRONMENT_VARIABLE = "OTEL_EXPORTER_OTLP_ENDPOINT"


def get_enable_otel_exporter() -> bool:
    """Get if otel exporters are enabled by the standard environment."""
    return OTEL_ENDPOINT_ENVIRONMENT_VARIABLE in os.environ


class OpenTelemetrySignalConfig(BaseModel):
    """Exporter configuration of a single OpenTelemetry signal (traces, metrics or logs).

    Attributes:
        enabled: Whether the OTLP exporter is enabled.
            Defaults to whether "OTEL_EXPORTER_OTLP_ENDPOINT" is set.
        endpoint: OTLP collector endpoint. If None, the exporter reads the standard
            "OTEL_EXPORTER_OTLP_*" environment variables.
        headers: Headers sent with every export request.
        timeout_seconds: Export request timeout in seconds.

    """

    enabled: bool = Field(default_factory=get_enable_otel_exporter, description="Whether the exporter is enabled.")
    endpoint: str | None = Field(default=None, description="OTLP collector endpoint.")
    headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with every export request.")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Export request timeout in seconds.")

    @model_validator(mode="after")
    def _require_endpoint(self) -> Self:
        if self.enabled and self.endpoint is None and not get_enable_otel_exporter():
            msg = f"An endpoint is required for an enabled exporter, set it or {OTEL_ENDPOINT_ENVIRONMENT_VARIABLE}"
            raise ValueError(msg)
        return self

    @property
    def joined_headers(self) -> str:
        """Headers in the `key=value,key2=value2` form used by OTEL_EXPORTER_OTLP_HEADERS."""
        return ",".join(f"{key}={value}" for key, value in self.headers.items())


class ObservabilityConfig(BaseModel):
    """Observability configuration.

    This config is used to configure the observability.

    Attributes:
        service_name (str | None): The name of the service. Defaults to the distribution name.
        service_namespace (str): The namespace of the service.
        log_level (str): The level of the root logger. Defaults to "INFO".
        tracing (OpenTelemetrySignalConfig): Span exporter config.
        metrics (OpenTelemetrySignalConfig): Metric exporter config.
        logging (OpenTelemetrySignalConfig): Log exporter config.
        metrics_export_interval_seconds (float): How often metrics are exported.
        enable_runtime_metrics (bool): Whether to collect process and runtime metrics
            (CPU, memory, threads, garbage collection). Defaults to True.
        enable_console_tracer (bool): Whether to enable the console tracer. Defaults to False.
        enable_console_metrics (bool): Whether to enable the console metrics. Defaults to False.
        enable_console_logs (bool): Whether to enable the console logs exporter. Defaults to False.
        suppress_httpx_logs (bool): Whether to suppress the httpx logs. Defaults to True.
        sentry_dsn (str | None): Sentry DSN. Sentry is only initialized when set.

    """

    service_name: str | None = Field(default=None, description="The name of the service.")
    service_namespace: str = Field(default="agentkit", description="The namespace of the service.")
    log_level: str = Field(default="INFO", description="The level of the root logger.")

    tracing: OpenTelemetrySignalConfig = Field(default_factory=OpenTelemetrySignalConfig)
    metrics: OpenTelemetrySignalConfig = Field(default_factory=OpenTelemetrySignalConfig)
    logging: OpenTelemetrySignalConfig = Field(default_factory=OpenTelemetrySignalConfig)
    metrics_export_interval_seconds: float = Field(default=60.0, gt=0, description="Metric export interval.")
    enable_runtime_metrics: bool = Field(default=True, description="Whether to collect process and runtime metrics.")

    enable_console_tracer: bool = Field(default=False, description="Whether to enable the console tracer.")
    enable_console_metrics: bool = Field(default=False, description="Whether to enable the console metrics.")
    enable_console_logs: bool = Field(default=False, description="Whether to enable the console logs.")

    suppress_httpx_logs: bool = Field(default=True, description="Whether to suppress the httpx logs.")

    sentry_dsn: str | None = Field(default=None, description="Sentry DSN.")
