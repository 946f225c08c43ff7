"""Logfmt formatter."""

import getpass
import socket
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from agentkit.configs.agent import get_environment_name

# Record attributes injected by the OpenTelemetry logging instrumentation
_OTEL_RECORD_ATTRS = ("otelTraceID", "otelSpanID", "otelTraceSampled", "otelServiceName")
_INVALID_TRACE_ID = "0"
# Set on the record by `logging.Formatter.format`
_FORMATTER_RECORD_ATTRS = ("message", "asctime")


def _get_user_name() -> str | None:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


class ProcessContextAdder:
    """Add the machine name, environment name and user name of the process."""

    def __init__(self, environment: str | None = None) -> None:
        self._fields = {
            key: value
            for key, value in (
                ("machine", socket.gethostname()),
                ("env", environment or get_environment_name()),
                ("user", _get_user_name()),
            )
            if value is not None
        }

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> EventDict:  # noqa: ARG002
        for key, value in self._fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:  # noqa: ARG001
    """Replace the OpenTelemetry record attributes with `trace_id` and `span_id`.

    Records logged outside of a span carry the zero trace id and get no trace fields.
    """
    for key in _OTEL_RECORD_ATTRS:
        event_dict.pop(key, None)

    record = event_dict.get("_record")
    trace_id = getattr(record, "otelTraceID", None)
    if trace_id and trace_id != _INVALID_TRACE_ID:
        event_dict["trace_id"] = trace_id
        event_dict["span_id"] = getattr(record, "otelSpanID", None)
    return event_dict


def drop_formatter_attrs(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:  # noqa: ARG001
    """Drop the attributes other formatters leave on a shared record."""
    for key in _FORMATTER_RECORD_ATTRS:
        event_dict.pop(key, None)
    return event_dict


def shared_processors(environment: str | None = None) -> list[Processor]:
    """Processors run on both stdlib and structlog events before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", key="time"),
        ProcessContextAdder(environment),
        structlog.processors.format_exc_info,
    ]


class AgentLogfmtFormatter(structlog.stdlib.ProcessorFormatter):
    """Formats log records as logfmt lines.

    Each line carries the timestamp, level, logger and message, the record's
    `extra` fields, the OpenTelemetry trace context injected by
    `LoggingInstrumentor`, and the machine name, environment name and user name
    of the process. Exceptions are rendered as an `exception` field holding the
    traceback.

    Example:
        ```
        time=2024-05-01T10:00:00.000000Z level=info logger=agentkit.hosting msg="Host started" machine=web-1 env=Production
        ```

    """

    def __init__(self, environment: str | None = None) -> None:
        """Initialize the formatter.

        Args:
            environment: Environment name added to every line. Defaults to the configured environment.

        """
        super().__init__(
            foreign_pre_chain=[structlog.stdlib.ExtraAdder(), drop_formatter_attrs, *shared_processors(environment)],
            processors=[
                add_trace_context,
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.EventRenamer("msg"),
                structlog.processors.LogfmtRenderer(key_order=["time", "level", "logger", "msg"], drop_missing=True),
            ],
        )


def configure_structlog(environment: str | None = None) -> None:
    """Route structlog loggers through the standard library handlers.

    Events logged with `structlog.get_logger()` end up formatted by
    `AgentLogfmtFormatter` like every other record.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors(environment),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
