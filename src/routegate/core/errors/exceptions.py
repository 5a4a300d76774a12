"""Domain exceptions for the rate limiter.

These exceptions represent rate limiting failures and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidConfigurationError(AppException):
    """Raised when a route limit has a non-positive threshold or window.

    The registry is left untouched when this is raised.

    Example:
        raise InvalidConfigurationError(
            "threshold must be a positive integer",
            field="threshold",
            value=0,
        )
    """

    message = "Invalid rate limit configuration"
    error_code = "invalid_configuration"
    status_code = 500

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
            details["value"] = value
        super().__init__(message=message, details=details, **kwargs)


class StoreUnavailableError(AppException):
    """Raised when the shared counter store cannot be reached in time.

    Distinct from a denial: the caller cannot know whether the
    increment was applied.

    Example:
        raise StoreUnavailableError(details={"operation": "increment"})
    """

    message = "Rate limit store unavailable"
    error_code = "store_unavailable"
    status_code = 503


class RateLimitError(AppException):
    """Raised when rate limit is exceeded.

    Example:
        raise RateLimitError(
            "Too many requests",
            details={"route": "/api/search", "limit": 10}
        )
    """

    message = "Rate limit exceeded"
    error_code = "rate_limit_exceeded"
    status_code = 429
