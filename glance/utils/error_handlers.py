"""
Centralized Error Handling

Translates third-party failures (OpenAI/LiteLLM, SQLAlchemy, boto, Chroma)
into GlanceException subclasses, and registers the FastAPI handlers that
render every error as {"error": <message>, "code": <kind>}.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from openai import APIError, APITimeoutError, RateLimitError
from sqlalchemy.exc import IntegrityError, OperationalError
import logging
import traceback

from glance.core.exceptions import (
    GlanceException,
    QuotaExceededError,
    RateLimitExceededError,
    StorageError,
    UpstreamError,
)
from glance.utils.sanitize import sanitize_string

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Translate library exceptions into GlanceException subclasses"""

    @staticmethod
    def handle_llm_error(error: Exception, provider: str = "openai") -> UpstreamError:
        """
        Handle OpenAI / LiteLLM API errors

        LiteLLM exceptions subclass the OpenAI ones, so one mapping covers both.

        Args:
            error: Exception raised by the completion or embedding call
            provider: Provider name for logging

        Returns:
            QuotaExceededError for rate limit / quota errors, UpstreamError otherwise
        """
        if isinstance(error, RateLimitError):
            logger.warning(f"{provider} quota or rate limit exceeded: {sanitize_string(str(error))}")
            return QuotaExceededError()

        if isinstance(error, APITimeoutError):
            logger.warning(f"{provider} API timeout: {error}")
            return UpstreamError("The language model request timed out. Please try again.")

        if isinstance(error, APIError):
            # Some providers report exhausted credit as a plain API error
            if getattr(error, "code", None) == "insufficient_quota":
                logger.warning(f"{provider} quota exhausted")
                return QuotaExceededError()
            logger.error(f"{provider} API error: {sanitize_string(str(error))}")
            return UpstreamError("The language model service returned an error. Please try again.")

        logger.error(f"Unknown {provider} error: {sanitize_string(str(error))}")
        return UpstreamError()

    @staticmethod
    def handle_vector_db_error(error: Exception) -> UpstreamError:
        """Vector database (Chroma) failures"""
        logger.error(f"Vector database error: {type(error).__name__}: {error}")
        return UpstreamError("The vector database is unavailable. Please try again.")

    @staticmethod
    def handle_database_error(error: Exception) -> StorageError:
        """
        Handle database errors

        Args:
            error: SQLAlchemy exception

        Returns:
            StorageError with a client-safe message
        """
        details = str(error.orig) if hasattr(error, 'orig') else str(error)

        if isinstance(error, IntegrityError):
            logger.warning(f"Database integrity error: {details}")
            return StorageError("Data integrity violation. Duplicate entry or constraint failed.")

        if isinstance(error, OperationalError):
            logger.error(f"Database operational error: {details}")
            return StorageError("Database connection or operational error.")

        logger.error(f"Database error: {details}")
        return StorageError("Database error occurred.")

    @staticmethod
    def handle_storage_error(error: Exception) -> StorageError:
        """Object storage (S3) failures"""
        logger.error(f"Object storage error: {type(error).__name__}: {error}")
        return StorageError("Failed to store file")

    @staticmethod
    def handle_generic_error(error: Exception) -> dict:
        """
        Handle generic/unknown errors

        The traceback stays in the server log; the client gets a generic message.
        """
        logger.error(f"Unexpected error: {error}\n{traceback.format_exc()}")
        return {
            "error": GlanceException.default_message,
            "code": GlanceException.code,
        }


def error_response(status_code: int, message: str, code: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code},
        headers=headers,
    )


# Global exception handlers for FastAPI

async def glance_exception_handler(request: Request, exc: GlanceException):
    """FastAPI exception handler for GlanceException and subclasses"""
    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after)}
    elif isinstance(exc, QuotaExceededError):
        headers = {"Retry-After": "60"}

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")

    return error_response(exc.status_code, exc.message, exc.code, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), not 422"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field} {first.get('msg', '')}".strip()
    logger.info(f"Validation error on {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message, "validation_error")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (unknown path, wrong method) in the common error shape"""
    code = "not_found" if exc.status_code == 404 else "http_error"
    return error_response(exc.status_code, str(exc.detail), code, getattr(exc, "headers", None))


async def generic_error_handler(request: Request, exc: Exception):
    """FastAPI exception handler for generic errors"""
    error_data = ErrorHandler.handle_generic_error(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_data
    )


# Setup function for FastAPI app
def setup_error_handlers(app):
    """
    Setup global error handlers for FastAPI app

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(GlanceException, glance_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    logger.info("Error handlers registered")
