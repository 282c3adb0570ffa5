"""
Custom exceptions for Glance API

Every exception carries the HTTP status and a stable error code; the
handlers in glance.utils.error_handlers turn them into {"error", "code"} bodies.
"""

from typing import Optional


class GlanceException(Exception):
    """Base exception for Glance"""

    status_code = 500
    code = "internal_error"
    default_message = "An unexpected error occurred. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GlanceException):
    """Bad input, detected before any side effect"""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class AuthenticationError(GlanceException):
    """Missing or invalid caller identity"""

    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class NotFoundError(GlanceException):
    """Missing resource, or a resource owned by someone else"""

    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class RateLimitExceededError(GlanceException):
    """Caller exceeded its request quota"""

    status_code = 429
    code = "rate_limit_exceeded"
    default_message = "Too many requests. Please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 60):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamError(GlanceException):
    """Third-party API (LLM, embeddings, vector database) failure"""

    status_code = 503
    code = "upstream_error"
    default_message = "An upstream service failed. Please try again."
    retryable = False


class QuotaExceededError(UpstreamError):
    """Upstream quota or rate limit exhausted"""

    status_code = 429
    code = "quota_exceeded"
    default_message = "API quota exceeded. Please try again later."
    retryable = True


class EmptyResponseError(UpstreamError):
    """Completion API returned no content"""

    status_code = 502
    code = "empty_response"
    default_message = "No response received from the language model"


class StorageError(GlanceException):
    """Blob storage or database operation failure"""

    status_code = 500
    code = "storage_error"
    default_message = "Storage operation failed"


class ExtractionError(GlanceException):
    """Unreadable PDF or no extractable text"""

    status_code = 500
    code = "extraction_error"
    default_message = "Failed to extract text from PDF"
