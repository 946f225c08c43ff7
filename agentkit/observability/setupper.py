"""Observability setup for the application."""

import logging
import uuid
from typing import Self

import sentry_sdk
from fastapi import FastAPI
from opentelemetry import _logs as logs
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.system_metrics import SystemMetricsInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, ConsoleLogExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_INSTANCE_ID,
    SERVICE_NAME,
    SERVICE_NAMESPACE,
    SERVICE_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from sentry_sdk.integrations.opentelemetry import SentrySpanProcessor

from agentkit.configs.observability import ObservabilityConfig
from agentkit.observability.logfmt import AgentLogfmtFormatter, configure_structlog

logger = logging.getLogger(__name__)


class ObservabilitySetupper:
    """Observability setupper.

    Example:
        ```python
        observability = (
            ObservabilitySetupper(config.observability, service_name="agent", environment=config.environment)
            .setup_logging()
            .setup_tracing()
            .setup_metrics()
            .instrument_httpx()
        )
        ...
        observability.shutdown()
        ```

    """

    def __init__(
        self,
        config: ObservabilityConfig | None = None,
        service_name: str | None = None,
        service_version: str | None = None,
        environment: str | None = None,
    ) -> None:
        """Initialize the observability setupper.

        Args:
            config: The observability config.
            If None, the default observability config will be used.
            See `agentkit.configs.observability.ObservabilityConfig` for more details.
            service_name: The name of the service to create the resource with.
            The config's service name takes precedence.
            The resource itself can be overwritten with the `ObservabilitySetupper.with_resource` method.
            service_version: The version of the service.
            environment: The deployment environment name.

        """
        self._config = config or ObservabilityConfig()
        self._environment = environment
        service_name = self._config.service_name or service_name
        self._resource = Resource.create(
            attributes={SERVICE_INSTANCE_ID: str(uuid.uuid4())}
            | ({SERVICE_NAMESPACE: self._config.service_namespace} if self._config.service_namespace else {})
            | ({SERVICE_NAME: service_name} if service_name else {})
            | ({SERVICE_VERSION: service_version} if service_version else {})
            | ({DEPLOYMENT_ENVIRONMENT: environment} if environment else {})
        )

        self._logger_provider: LoggerProvider | None = None
        self._tracer_provider: TracerProvider | None = None
        self._meter_provider: MeterProvider | None = None
        self._runtime_metrics_instrumented = False

    def instrument_httpx(self) -> Self:
        """Instrument httpx."""
        HTTPXClientInstrumentor().instrument()

        logger.info("httpx has been instrumented")

        if self._config.suppress_httpx_logs:
            logging.getLogger("httpx").setLevel(logging.WARNING)
            logging.getLogger("httpcore").setLevel(logging.WARNING)
            logger.info("httpx logs have been suppressed")

        return self

    def instrument_fastapi(self, app: FastAPI) -> Self:
        """Instrument FastAPI."""
        uvicorn_loggers = ["uvicorn", "uvicorn.error", "uvicorn.access"]

        for logger_name in uvicorn_loggers:
            uvicorn_logger = logging.getLogger(logger_name)

            for handler in uvicorn_logger.handlers[:]:
                uvicorn_logger.removeHandler(handler)

            uvicorn_logger.propagate = True

        FastAPIInstrumentor.instrument_app(app, tracer_provider=self._tracer_provider, meter_provider=self._meter_provider)

        logger.info("FastAPI has been instrumented")

        return self

    def with_resource(self, resource: Resource) -> Self:
        """Set the resource for the observability.

        Args:
            resource: The resource to use for the observability.
            See `opentelemetry.sdk.resources.Resource` for more details.

        """
        self._resource = resource
        return self

    def get_resource(self) -> Resource:
        """Get the resource for the observability."""
        return self._resource

    def setup_logging(self, level: int | str | None = None, formatter: logging.Formatter | None = None) -> Self:
        """Setup logging.

        This method will setup the logging for the observability.
        It will add a console handler to the root logger and set the level of
        the root logger to the level passed as an argument. Loggers from
        `structlog.get_logger()` are routed through the same handler.

        Args:
            level: The level to set for the root logger.
                Defaults to the configured `log_level`.
            formatter: The formatter to use for the console handler.
                If None, `AgentLogfmtFormatter` is used.
                See `agentkit.observability.logfmt.AgentLogfmtFormatter` for more details.

        """
        LoggingInstrumentor().instrument()

        root_logger = logging.getLogger()
        root_logger.setLevel(level if level is not None else self._config.log_level.upper())

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter or AgentLogfmtFormatter(environment=self._environment))
        root_logger.addHandler(console_handler)
        configure_structlog(environment=self._environment)

        logger_provider = LoggerProvider(resource=self._resource)

        if self._config.enable_console_logs:
            logger_provider.add_log_record_processor(BatchLogRecordProcessor(ConsoleLogExporter()))
            logger.info("Enabled console logs exporter")

        if self._config.logging.enabled:
            exporter = OTLPLogExporter(
                endpoint=self._config.logging.endpoint,
                headers=self._config.logging.headers or None,
                timeout=self._config.logging.timeout_seconds,
            )
            logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
            logger.info("Enabled opentelemetry logs exporter")

        logs.set_logger_provider(logger_provider)

        self._logger_provider = logger_provider

        otel_handler = LoggingHandler(logger_provider=logger_provider)
        root_logger.addHandler(otel_handler)

        logger.info("Logging has been setup")

        return self

    def get_logger_provider(self) -> LoggerProvider | None:
        """Get the logger provider for the observability.

        Returns:
            LoggerProvider | None: The logger provider for the observability.
            If None, the logger provider has not been setup.

        """
        return self._logger_provider

    def setup_sentry(self) -> Self:
        """Initialize Sentry if a DSN is configured."""
        if not self._config.sentry_dsn:
            logger.debug("Sentry DSN is not configured, skipping Sentry setup")
            return self

        sentry_sdk.init(
            dsn=self._config.sentry_dsn,
            environment=self._environment,
            instrumenter="otel",
        )
        logger.info("Sentry has been setup")

        return self

    def setup_tracing(self) -> Self:
        """Setup tracing.

        This method will setup the tracing for the observability.

        See `agentkit.configs.observability.ObservabilityConfig` for more details.
        """
        tracer_provider = TracerProvider(resource=self._resource)

        if self._config.sentry_dsn:
            tracer_provider.add_span_processor(SentrySpanProcessor())

        if self._config.enable_console_tracer:
            tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Enabled console span exporter")

        if self._config.tracing.enabled:
            exporter = OTLPSpanExporter(
                endpoint=self._config.tracing.endpoint,
                headers=self._config.tracing.headers or None,
                timeout=self._config.tracing.timeout_seconds,
            )
            tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
            logger.info("Enabled opentelemetry span exporter")

        trace.set_tracer_provider(tracer_provider)

        self._tracer_provider = tracer_provider

        logger.info("Tracing has been setup")

        return self

    def get_tracer_provider(self) -> TracerProvider | None:
        """Get the tracer provider for the observability.

        Returns:
            TracerProvider | None: The tracer provider for the observability.
            If None, the tracer provider has not been setup.

        """
        return self._tracer_provider

    def setup_metrics(self) -> Self:
        """Setup metrics.

        This method will setup the metrics for the observability.
        See `agentkit.configs.observability.ObservabilityConfig` for more details.
        """
        metric_readers: list[MetricReader] = []
        export_interval_millis = self._config.metrics_export_interval_seconds * 1000

        if self._config.enable_console_metrics:
            metric_readers.append(
                PeriodicExportingMetricReader(ConsoleMetricExporter(), export_interval_millis=export_interval_millis)
            )
            logger.info("Enabled console metrics exporter")

        if self._config.metrics.enabled:
            exporter = OTLPMetricExporter(
                endpoint=self._config.metrics.endpoint,
                headers=self._config.metrics.headers or None,
                timeout=self._config.metrics.timeout_seconds,
            )
            metric_readers.append(
                PeriodicExportingMetricReader(exporter, export_interval_millis=export_interval_millis)
            )
            logger.info("Enabled opentelemetry metrics exporter")

        meter_provider = MeterProvider(resource=self._resource, metric_readers=metric_readers)
        metrics.set_meter_provider(meter_provider)

        if self._config.enable_runtime_metrics:
            SystemMetricsInstrumentor().instrument(meter_provider=meter_provider)
            self._runtime_metrics_instrumented = True
            logger.info("Enabled runtime metrics")

        logger.info("Metrics have been setup")

        self._meter_provider = meter_provider

        return self

    def get_meter_provider(self) -> MeterProvider | None:
        """Get the meter provider for the observability.

        Returns:
            MeterProvider | None: The meter provider for the observability.
            If None, the meter provider has not been setup.

        """
        return self._meter_provider

    def shutdown(self) -> None:
        """Flush and shut down the providers that have been setup."""
        if self._runtime_metrics_instrumented:
            SystemMetricsInstrumentor().uninstrument()
            self._runtime_metrics_instrumented = False
        if self._tracer_provider is not None:
            self._tracer_provider.shutdown()
        if self._meter_provider is not None:
            self._meter_provider.shutdown()
        if self._logger_provider is not None:
            self._logger_provider.shutdown()

        logger.debug("Observability providers have been shut down")
