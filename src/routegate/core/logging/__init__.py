"""Logging module with structured logging and request tracking."""

from routegate.core.logging.config import configure_logging
from routegate.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
