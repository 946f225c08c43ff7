"""Observability utilities."""

import sentry_sdk
from opentelemetry import trace


def observe_exception(exc: BaseException) -> None:
    """Record the exception on the current span and report it to Sentry."""

    span = trace.get_current_span()
    span.record_exception(exc)
    span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc)))
    sentry_sdk.capture_exception(exc)
