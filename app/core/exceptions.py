"""
Custom exception handlers and error types
"""

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.exceptions import RequestValidationError
import logging
import traceback
from typing import Optional

logger = logging.getLogger(__name__)


class ImageSearchServiceError(Exception):
    """Base exception for the image search service"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ConfigurationError(ImageSearchServiceError):
    """Exception raised when configuration is invalid"""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, "CONFIGURATION_ERROR")
        self.config_key = config_key


class BatchValidationError(ImageSearchServiceError):
    """Raised when a batch request is malformed as a whole (nothing is dispatched)"""

    def __init__(self, message: str):
        super().__init__(message, "BATCH_VALIDATION_ERROR")


class SearchError(ImageSearchServiceError):
    """Base exception for a single failed image search"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, error_code or "SEARCH_ERROR")
        self.status_code = status_code


class RetryableSearchError(SearchError):
    """Failure that should be retried with the next credential"""


class ProviderTransportError(RetryableSearchError):
    """Connection error or timeout while talking to the provider"""

    def __init__(self, message: str):
        super().__init__(message, "PROVIDER_TRANSPORT_ERROR")


class QuotaExceededError(RetryableSearchError):
    """Provider rejected the credential because of quota or rate limiting"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, "QUOTA_EXCEEDED", status_code)


class ProviderHTTPError(SearchError):
    """Provider answered with a non-success status that rotation cannot fix"""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message, "PROVIDER_HTTP_ERROR", status_code)
        self.body = body


class MalformedPayloadError(SearchError):
    """Provider answered 200 with a body that is not a search payload"""

    def __init__(self, message: str):
        super().__init__(message, "MALFORMED_PAYLOAD", 200)


class CredentialsExhaustedError(SearchError):
    """Every credential in the pool failed with a retryable error"""

    def __init__(self, attempts: int, last_error: Optional[SearchError] = None):
        super().__init__(
            f"all provider credentials exhausted after {attempts} attempts",
            "CREDENTIALS_EXHAUSTED",
        )
        self.attempts = attempts
        self.last_error = last_error


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or wrongly shaped JSON body"""
    logger.warning(f"Validation error: {exc.errors()}")
    return PlainTextResponse("invalid json", status_code=400)


async def batch_validation_exception_handler(
    request: Request, exc: BatchValidationError
):
    """Request-level batch errors (e.g. queries/categories count mismatch)"""
    logger.warning(f"Batch rejected: {exc.message}")
    return PlainTextResponse(exc.message, status_code=400)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.error(f"Unexpected error: {type(exc).__name__}: {str(exc)}")
    logger.error(f"Traceback: {traceback.format_exc()}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": {
                "error": "Internal server error",
                "details": "An unexpected error occurred",
            }
        },
    )
