"""API errors and the JSON body every failure is rendered as.

Controllers raise subclasses of ``APIError``; the handlers registered by
``register_exception_handlers`` turn them, request validation failures and
anything unexpected into::

    {"error": "<kind>", "detail": "<message>", "context": {...}}

Example:
    raise EventNotFoundError(event_id)
    raise BadRequestError(detail="Unknown performance for this event", performance_ids=[7])
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None


class APIError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500
    error: str = "internal_error"
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: str | None = None,
        error_code: str | None = None,
        **context: Any,
    ) -> None:
        self.detail = detail or type(self).detail
        self.error_code = error_code
        self.context = context or None
        super().__init__(self.detail)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.error,
            detail=self.detail,
            error_code=self.error_code,
            context=self.context,
        )


class NotFoundError(APIError):
    status_code = 404
    error = "not_found"
    detail = "Resource not found"


class EventNotFoundError(NotFoundError):
    """No event with the requested id."""

    def __init__(self, event_id: str) -> None:
        super().__init__(detail="Event not found", event_id=event_id)


class BadRequestError(APIError):
    status_code = 400
    error = "bad_request"
    detail = "Invalid request"


class ServiceUnavailableError(APIError):
    status_code = 503
    error = "service_unavailable"
    detail = "Service temporarily unavailable"


class DatabaseError(APIError):
    status_code = 500
    error = "database_error"
    detail = "Database operation failed"


def _render(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.warning(
        "%s %s -> %d %s: %s",
        request.method, request.url.path, exc.status_code, exc.error, exc.detail,
    )
    return _render(exc.status_code, exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with the offending fields listed under ``context.errors``."""
    errors = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.info("%s %s -> 422 validation_error: %s", request.method, request.url.path, errors)
    detail = errors[0]["msg"] if errors else "Invalid request body"
    return _render(422, ErrorResponse(error="validation_error", detail=detail, context={"errors": errors}))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return _render(500, ErrorResponse(error="internal_error", detail=APIError.detail))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
