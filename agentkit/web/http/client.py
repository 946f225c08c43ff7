"""Outgoing HTTP client."""

import logging
from types import TracebackType
from typing import Self

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential_jitter,
)

from agentkit.configs.http import HttpClientConfig

logger = logging.getLogger(__name__)


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    # Attempts exhausted: hand back the last response, or raise the last error
    return retry_state.outcome.result()  # type: ignore[union-attr]


class RetryingTransport(httpx.AsyncBaseTransport):
    """Transport replaying requests that failed transiently.

    Idempotent requests answered with a retryable status code (408, 429 and
    5xx by default), or failing with a timeout or a network error, are replayed
    with exponential backoff and jitter. Once the attempts are exhausted the
    last response is returned, or the last error raised.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport, config: HttpClientConfig) -> None:
        """Initialize the transport.

        Args:
            transport: The transport sending each attempt.
            config: Retry settings.

        """
        self._transport = transport
        self._config = config

    def _is_retryable(self, response: httpx.Response) -> bool:
        return response.status_code in self._config.retry_status_codes

    async def _send(self, request: httpx.Request) -> httpx.Response:
        response = await self._transport.handle_async_request(request)
        if self._is_retryable(response):
            # Release the connection before the next attempt, the body stays readable
            await response.aread()
        return response

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, replaying it while it fails transiently."""
        if self._config.retry_attempts == 0 or request.method not in self._config.retry_methods:
            return await self._transport.handle_async_request(request)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.retry_attempts + 1),
            wait=wait_exponential_jitter(
                initial=self._config.retry_backoff_seconds,
                max=self._config.retry_max_backoff_seconds,
                jitter=self._config.retry_backoff_seconds,
            ),
            retry=(
                retry_if_result(self._is_retryable)
                | retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError))
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            retry_error_callback=_last_outcome,
        )
        return await retrying(self._send, request)

    async def __aenter__(self) -> Self:
        await self._transport.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        await self._transport.__aexit__(exc_type, exc_value, traceback)

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._transport.aclose()


def create_http_client(
    config: HttpClientConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: object,
) -> httpx.AsyncClient:
    """Create the shared outgoing HTTP client.

    Failed connection attempts are retried by the connection pool. Idempotent
    requests answered with a transient failure are replayed by `RetryingTransport`.

    Args:
        config: HTTP client configuration. If None, uses default configuration.
        transport: Transport replacing the connection pool, e.g. `httpx.MockTransport` in tests.
            Requests sent through it are still replayed.
        **kwargs: Extra keyword arguments passed to `httpx.AsyncClient`.

    Returns:
        The client. The caller owns it and closes it with `aclose()`.

    """
    config = config or HttpClientConfig()
    if transport is None:
        limits = httpx.Limits(
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_keepalive_connections,
        )
        transport = httpx.AsyncHTTPTransport(retries=config.connect_retries, limits=limits)

    return httpx.AsyncClient(
        transport=RetryingTransport(transport, config),
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=config.follow_redirects,
        **kwargs,  # type: ignore[arg-type]
    )
