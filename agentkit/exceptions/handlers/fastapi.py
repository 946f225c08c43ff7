"""Default exception handlers for FastAPI application."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from agentkit.exceptions.schemas.fastapi import FastAPIErrorSchema
from agentkit.observability.utils import observe_exception

logger = logging.getLogger(__name__)


async def fastapi_unknown_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unknown exceptions.

    Args:
        request: The request.
        exc: The exception.

    Returns:
        JSONResponse: JSON serialized FastAPIErrorSchema.

    """
    logger.exception("Unknown exception occurred while handling %s %s", request.method, request.url.path, exc_info=exc)

    error_schema = FastAPIErrorSchema(
        error_code="UNKNOWN_EXCEPTION",
        detail="Unknown exception occurred",
        additional_info={},
    ).model_dump(mode="json")

    return JSONResponse(status_code=500, content=error_schema)


async def fastapi_unknown_exception_handler_with_observability(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unknown exceptions that also reports them to tracing and Sentry.

    Args:
        request: The request.
        exc: The exception.

    Returns:
        JSONResponse: JSON serialized FastAPIErrorSchema.

    """
    observe_exception(exc)
    return await fastapi_unknown_exception_handler(request, exc)
