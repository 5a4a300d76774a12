"""Error handling module with RFC 7807 Problem Details."""

from routegate.core.errors.exceptions import (
    AppException,
    InvalidConfigurationError,
    RateLimitError,
    StoreUnavailableError,
)
from routegate.core.errors.handlers import (
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "InvalidConfigurationError",
    # Handlers
    "ProblemDetail",
    "RateLimitError",
    "StoreUnavailableError",
    "register_exception_handlers",
]
