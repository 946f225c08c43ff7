"""Unit tests for observability setup and the outgoing HTTP client."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_INSTANCE_ID, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import StatusCode

from agentkit.configs.http import HttpClientConfig
from agentkit.configs.observability import ObservabilityConfig
from agentkit.observability.setupper import ObservabilitySetupper
from agentkit.observability.utils import observe_exception
from agentkit.web.http.client import create_http_client

TIMEOUT_SECONDS = 2.5
RETRY_ATTEMPTS = 2
HTTP_OK = 200
HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVICE_UNAVAILABLE = 503


class TestObservabilitySetupper:
    """Test ObservabilitySetupper."""

    def test_resource(self) -> None:
        """Test the resource describes the service and its environment."""
        setupper = ObservabilitySetupper(service_name="agent", service_version="1.2.3", environment="Staging")

        attributes = setupper.get_resource().attributes

        assert attributes[SERVICE_NAME] == "agent"
        assert attributes[SERVICE_VERSION] == "1.2.3"
        assert attributes[DEPLOYMENT_ENVIRONMENT] == "Staging"
        assert attributes[SERVICE_INSTANCE_ID]

    def test_configured_service_name_wins(self) -> None:
        """Test the configured service name overrides the default one."""
        setupper = ObservabilitySetupper(ObservabilityConfig(service_name="configured"), service_name="default")

        assert setupper.get_resource().attributes[SERVICE_NAME] == "configured"

    def test_sentry_skipped_without_dsn(self) -> None:
        """Test Sentry is not initialized without a DSN."""
        with patch("agentkit.observability.setupper.sentry_sdk.init") as init:
            ObservabilitySetupper().setup_sentry()

        init.assert_not_called()

    def test_sentry_initialized_with_dsn(self) -> None:
        """Test Sentry is initialized with the DSN and the environment."""
        config = ObservabilityConfig(sentry_dsn="https://key@sentry.example/1")
        with patch("agentkit.observability.setupper.sentry_sdk.init") as init:
            ObservabilitySetupper(config, environment="Staging").setup_sentry()

        init.assert_called_once_with(dsn="https://key@sentry.example/1", environment="Staging", instrumenter="otel")

    def test_tracing_and_shutdown(self) -> None:
        """Test the tracer provider is created and shut down."""
        setupper = ObservabilitySetupper().setup_tracing()
        provider = setupper.get_tracer_provider()

        assert isinstance(provider, TracerProvider)
        assert setupper.get_meter_provider() is None

        setupper.shutdown()

    def test_runtime_metrics_enabled(self) -> None:
        """Test process and runtime metrics are collected with the meter provider."""
        with patch("agentkit.observability.setupper.SystemMetricsInstrumentor") as instrumentor:
            setupper = ObservabilitySetupper().setup_metrics()
            setupper.shutdown()

        instrumentor.return_value.instrument.assert_called_once_with(meter_provider=setupper.get_meter_provider())
        instrumentor.return_value.uninstrument.assert_called_once_with()

    def test_runtime_metrics_disabled(self) -> None:
        """Test runtime metrics are skipped when disabled."""
        config = ObservabilityConfig(enable_runtime_metrics=False)
        with patch("agentkit.observability.setupper.SystemMetricsInstrumentor") as instrumentor:
            setupper = ObservabilitySetupper(config).setup_metrics()
            setupper.shutdown()

        instrumentor.assert_not_called()


class TestObserveException:
    """Test observe_exception."""

    def test_records_on_span_and_reports(self) -> None:
        """Test the exception is recorded on the current span and sent to Sentry."""
        provider = TracerProvider()
        tracer = provider.get_tracer(__name__)
        error = RuntimeError("boom")

        with (
            patch("agentkit.observability.utils.sentry_sdk.capture_exception") as capture,
            tracer.start_as_current_span("request", record_exception=False, set_status_on_exception=False) as span,
        ):
            observe_exception(error)

        capture.assert_called_once_with(error)
        assert span.status.status_code == StatusCode.ERROR
        assert span.events[0].name == "exception"
        provider.shutdown()


class TestCreateHttpClient:
    """Test create_http_client."""

    @pytest.mark.asyncio
    async def test_configuration(self) -> None:
        """Test the client follows the configuration."""
        config = HttpClientConfig(timeout_seconds=TIMEOUT_SECONDS, follow_redirects=False)

        async with create_http_client(config, base_url="https://upstream.example") as client:
            assert client.timeout == httpx.Timeout(TIMEOUT_SECONDS)
            assert client.follow_redirects is False
            assert client.base_url.host == "upstream.example"

        assert client.is_closed is True

    @pytest.mark.asyncio
    async def test_transport_is_used(self) -> None:
        """Test requests go through the configured client."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"path": request.url.path})

        async with create_http_client(transport=httpx.MockTransport(handler)) as client:
            response = await client.get("https://upstream.example/ping")

        assert response.json() == {"path": "/ping"}

    @pytest.mark.asyncio
    async def test_transient_status_is_retried(self) -> None:
        """Test a request answered with 503 is replayed until it succeeds."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            if len(calls) == 1:
                return httpx.Response(503, text="busy")
            return httpx.Response(200, json={"ok": True})

        config = HttpClientConfig(retry_backoff_seconds=0)
        async with create_http_client(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("https://upstream.example/ping")

        assert response.status_code == HTTP_OK
        assert response.json() == {"ok": True}
        assert calls == ["GET", "GET"]

    @pytest.mark.asyncio
    async def test_last_response_returned_when_retries_exhausted(self) -> None:
        """Test the last transient response is returned once the attempts run out."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            return httpx.Response(429, text="slow down")

        config = HttpClientConfig(retry_attempts=RETRY_ATTEMPTS, retry_backoff_seconds=0)
        async with create_http_client(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("https://upstream.example/ping")

        assert response.status_code == HTTP_TOO_MANY_REQUESTS
        assert response.text == "slow down"
        assert len(calls) == RETRY_ATTEMPTS + 1

    @pytest.mark.asyncio
    async def test_non_idempotent_requests_are_not_retried(self) -> None:
        """Test a POST answered with 503 is not replayed."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            return httpx.Response(503)

        config = HttpClientConfig(retry_backoff_seconds=0)
        async with create_http_client(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.post("https://upstream.example/jobs", json={"id": 1})

        assert response.status_code == HTTP_SERVICE_UNAVAILABLE
        assert calls == ["POST"]

    @pytest.mark.asyncio
    async def test_network_errors_are_retried(self) -> None:
        """Test a request failing with a network error is replayed."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            if len(calls) == 1:
                raise httpx.ReadError("connection reset", request=request)
            return httpx.Response(200)

        config = HttpClientConfig(retry_backoff_seconds=0)
        async with create_http_client(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("https://upstream.example/ping")

        assert response.status_code == HTTP_OK
        assert calls == ["GET", "GET"]
