"""
Error kinds surfaced to API callers, and the FastAPI handlers that render them.

Every error response has the same JSON shape:

    {"success": false, "error": "<message>"}

Services raise these instead of `HTTPException` so the message and status for
each failure kind live in one place.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# PostgreSQL SQLSTATE codes we translate into client errors.
NOT_NULL_VIOLATION = "23502"
DATA_EXCEPTION_CLASS = "22"

MISSING_FIELDS_MESSAGE = "Missing required fields."
INVALID_FORMAT_MESSAGE = "Invalid data format. Ensure dates are YYYY-MM-DD."
INTERNAL_ERROR_MESSAGE = "Internal server error. Check server logs for details."

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(ApiError):
    """
    Failure reported by the database driver.

    `sqlstate` is kept for logging; `status_code` is decided from it.
    """

    def __init__(self, message: str, *, status_code: int | None = None, sqlstate: str | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.sqlstate = sqlstate

    @classmethod
    def from_driver_error(cls, exc: Exception) -> "StoreError":
        sqlstate = getattr(exc, "sqlstate", None)
        if sqlstate == NOT_NULL_VIOLATION:
            return cls(MISSING_FIELDS_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST, sqlstate=sqlstate)
        if sqlstate and sqlstate.startswith(DATA_EXCEPTION_CLASS):
            return cls(INVALID_FORMAT_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST, sqlstate=sqlstate)
        # asyncpg raises a ValueError subclass when it cannot encode an argument
        # (e.g. an id outside int4) before the query reaches the server.
        if isinstance(exc, ValueError):
            return cls(INVALID_FORMAT_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)
        return cls(INTERNAL_ERROR_MESSAGE, sqlstate=sqlstate)


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if isinstance(exc, StoreError):
        if exc.status_code >= 500:
            logger.error(
                "store_error method=%s path=%s sqlstate=%s",
                request.method,
                request.url.path,
                exc.sqlstate,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.warning(
                "store_rejected method=%s path=%s sqlstate=%s",
                request.method,
                request.url.path,
                exc.sqlstate,
            )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_invalid method=%s path=%s errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid data format."),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR_MESSAGE),
    )


def install_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
