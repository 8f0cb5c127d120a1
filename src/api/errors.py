"""Boundary translation from errors to HTTP responses.

All error bodies share one shape: ``{"message": "..."}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.model.errors import (
    AuthenticationError,
    DomainError,
    DuplicateError,
    NotFoundError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_JSON_MESSAGE = "Invalid JSON format"
INVALID_BODY_MESSAGE = "Invalid request body"
ROUTE_NOT_FOUND_MESSAGE = "Route not found"

# Checked in order; the first matching class wins.
STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(error: DomainError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _message(text: str, status_code: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": text}, headers=headers)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        # Store details stay in the logs
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "errorType": type(exc).__name__},
            exc_info=exc.__cause__ or exc,
        )
        return _message(INTERNAL_ERROR_MESSAGE, status_code)

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _message(exc.message, status_code, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body parse failures: malformed JSON or wrongly typed fields."""
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        return _message(INVALID_JSON_MESSAGE, status.HTTP_400_BAD_REQUEST)
    logger.debug("Request body rejected", extra={"path": request.url.path, "errors": str(exc.errors())[:500]})
    return _message(INVALID_BODY_MESSAGE, status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # A known path with the wrong method counts as an unmatched route
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED or (
        exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found"
    ):
        return _message(ROUTE_NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
    return _message(str(exc.detail), exc.status_code, getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return _message(INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
