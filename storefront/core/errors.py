# storefront/core/errors.py
"""
Error taxonomy and the handlers that turn it into JSON responses.

Every error leaving the API has the body ``{"error": <message>}``.
Validation and upload errors carry their specific message; anything
unexpected is logged and reported as a generic 500.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class StorefrontError(Exception):
    """Base class for errors with a well-defined HTTP translation."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def client_message(self) -> str:
        return self.message


class ValidationError(StorefrontError):
    """Missing or malformed required input."""

    status_code = status.HTTP_400_BAD_REQUEST


class UploadError(ValidationError):
    """Uploaded file violates the count, type or size rules."""

    @property
    def client_message(self) -> str:
        return f"File upload error: {self.message}"


class NotFoundError(StorefrontError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(StorefrontError):
    """I/O failure in the datastore or the media store. Never retried."""

    @property
    def client_message(self) -> str:
        return INTERNAL_ERROR_MESSAGE


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.client_message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
