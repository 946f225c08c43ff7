"""HTTP client config."""

from pydantic import BaseModel, Field

DEFAULT_RETRY_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE", "TRACE"})


class HttpClientConfig(BaseModel):
    """Configuration of the shared outgoing HTTP client.

    Attributes:
        timeout_seconds: Timeout applied to connect, read, write and pool acquisition.
        connect_retries: How many times a failed connection attempt is retried.
        max_connections: Maximum number of concurrent connections.
        max_keepalive_connections: Maximum number of idle keep-alive connections.
        follow_redirects: Whether redirects are followed.
        retry_attempts: How many times a request answered with a transient failure is replayed.
            0 disables request retries.
        retry_backoff_seconds: Delay before the first replay, doubled on every further one.
        retry_max_backoff_seconds: Upper bound of the delay between replays.
        retry_status_codes: Response status codes that are replayed.
        retry_methods: Request methods that are replayed.

    """

    timeout_seconds: float = Field(default=30.0, gt=0, description="Request timeout in seconds.")
    connect_retries: int = Field(default=3, ge=0, description="Retries of failed connection attempts.")
    max_connections: int = Field(default=100, gt=0, description="Maximum number of concurrent connections.")
    max_keepalive_connections: int = Field(default=20, ge=0, description="Maximum number of idle connections.")
    follow_redirects: bool = Field(default=True, description="Whether redirects are followed.")

    retry_attempts: int = Field(default=3, ge=0, description="Replays of requests that failed transiently.")
    retry_backoff_seconds: float = Field(default=2.0, ge=0, description="Delay before the first replay.")
    retry_max_backoff_seconds: float = Field(default=30.0, ge=0, description="Maximum delay between replays.")
    retry_status_codes: frozenset[int] = Field(
        default=DEFAULT_RETRY_STATUS_CODES, description="Response status codes that are replayed."
    )
    retry_methods: frozenset[str] = Field(default=IDEMPOTENT_METHODS, description="Request methods that are replayed.")
