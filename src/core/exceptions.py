"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Not found errors (404)
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Store errors (503)
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class RequestValidationFailedError(AppException):
    """One or more request parameters are invalid."""

    def __init__(self, details: list[dict[str, Any]]) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Invalid request parameters",
            status_code=400,
            details=details,
        )


class ServiceUnavailableError(AppException):
    """The document store could not serve the request.

    ``reason`` carries the driver message for the logs; it is never sent
    to the client.
    """

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(
            error_code=ErrorCode.SERVICE_UNAVAILABLE,
            message="Service temporarily unavailable",
            status_code=503,
            details="Database operation failed",
        )
