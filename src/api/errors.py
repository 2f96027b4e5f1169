"""Wire-level error taxonomy and the exception handlers that render it.

Every error response has the shape ``{"errors": [{"message": ..., "field"?: ...}]}``.
Anything outside the taxonomy is logged in full and reported as a generic
500 so internal detail never reaches the client.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as FastAPIValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


@dataclass(frozen=True)
class FieldError:
    """A single failed field check.

    Attributes:
        field: Name of the payload field.
        message: Human-readable failure message.
        value: The rejected input (kept server-side, never serialized).
    """

    field: str
    message: str
    value: Any = None


class ServiceError(Exception):
    """Base exception for errors with a stable wire representation."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def serialize(self) -> list[dict[str, str]]:
        """Render the error entries sent to the client."""
        return [{"message": self.message}]


class RequestValidationError(ServiceError):
    """Raised when one or more request fields fail validation."""

    status_code = 400

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__("Invalid request parameters")

    def serialize(self) -> list[dict[str, str]]:
        return [{"message": e.message, "field": e.field} for e in self.errors]


class BadRequestError(ServiceError):
    """Raised when a request breaks a domain rule."""

    status_code = 400


class NotAuthorizedError(ServiceError):
    """Raised when a guarded route has no authenticated identity."""

    status_code = 401

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when no route matches the request."""

    status_code = 404

    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(message)


class UnhandledError(ServiceError):
    """Stands in for any unexpected failure on the wire."""

    status_code = 500

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message)


def error_response(error: ServiceError) -> JSONResponse:
    """Build the JSON response for a service error."""
    return JSONResponse(
        status_code=error.status_code,
        content={"errors": error.serialize()},
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render taxonomy errors raised by routes and dependencies."""
    logger.info(
        "request_rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
    )
    return error_response(exc)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unmatched routes, bad methods)."""
    if exc.status_code == 404:
        return error_response(NotFoundError())

    error = ServiceError(str(exc.detail))
    error.status_code = exc.status_code
    return error_response(error)


async def framework_validation_handler(
    request: Request, exc: FastAPIValidationError
) -> JSONResponse:
    """Render FastAPI's own parameter validation as a 400."""
    errors = [
        FieldError(
            field=".".join(str(part) for part in err.get("loc", ())[1:]) or "request",
            message=str(err.get("msg", "Invalid value")),
        )
        for err in exc.errors()
    ]
    return error_response(RequestValidationError(errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their detail from the client."""
    logger.error(
        "unhandled_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(UnhandledError())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error translators on an application."""
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        StarletteHTTPException,
        http_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        FastAPIValidationError,
        framework_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
