"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

from enum import StrEnum


# Window used when a caller supplies a threshold but no window
# (largest TTL a signed 32-bit store client accepts).
UNLIMITED_WINDOW_SECONDS = 2**31 - 1

# Redis key namespace for counters
DEFAULT_KEY_PREFIX = "ratelimit"

# Store round-trip timeout
DEFAULT_STORE_TIMEOUT_SECONDS = 0.5

# Redis connection pool
DEFAULT_REDIS_MAX_CONNECTIONS = 50


class FailMode(StrEnum):
    """Behaviour of a check when the shared store is unreachable.

    CLOSED surfaces the store error to the caller; OPEN allows the call.
    """

    CLOSED = "closed"
    OPEN = "open"
