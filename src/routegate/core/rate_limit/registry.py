"""Route limit registry.

Holds the route -> RouteLimit mapping. Entries come from the static
configuration at startup or are registered on first dynamic use; they
are never removed for the lifetime of the process.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from routegate.core.errors import InvalidConfigurationError


logger = structlog.get_logger()


def _require_positive(field: str, value: int) -> None:
    # bool is an int subclass; True must not pass as a threshold of 1
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfigurationError(
            f"{field} must be a positive integer",
            field=field,
            value=value,
        )


@dataclass(frozen=True)
class RouteLimit:
    """Fixed-window limit for one route.

    Attributes:
        route: Route identifier, also the counter key suffix in the store
        threshold: Maximum operations allowed per window
        window_seconds: Window width; the counter key's TTL
    """

    route: str
    threshold: int
    window_seconds: int

    def __post_init__(self) -> None:
        if not self.route:
            raise InvalidConfigurationError(
                "route must be a non-empty string", field="route", value=self.route
            )
        _require_positive("threshold", self.threshold)
        _require_positive("window_seconds", self.window_seconds)


class RouteRegistry:
    """Mapping of route identifiers to their limits.

    Reads are plain dict lookups. Dynamic registration takes a lock so
    that the first writer for a route wins and every concurrent caller
    gets that same entry back.
    """

    def __init__(self) -> None:
        self._limits: dict[str, RouteLimit] = {}
        self._lock = threading.Lock()

    def __contains__(self, route: object) -> bool:
        return route in self._limits

    def __len__(self) -> int:
        return len(self._limits)

    def routes(self) -> list[str]:
        """Return a sorted snapshot of registered route identifiers."""
        return sorted(self._limits)

    def load_static(self, limits: Iterable[RouteLimit]) -> None:
        """Insert static limits unconditionally.

        Meant to run once at startup, before any lookups happen.

        Args:
            limits: Limits from the static configuration, in order
        """
        for limit in limits:
            self._limits[limit.route] = limit
            logger.debug(
                "route_limit_loaded",
                route=limit.route,
                threshold=limit.threshold,
                window_seconds=limit.window_seconds,
            )

    def lookup(self, route: str) -> RouteLimit | None:
        """Return the limit registered for a route, if any."""
        return self._limits.get(route)

    def register_if_absent(
        self,
        route: str,
        threshold: int,
        window_seconds: int,
    ) -> RouteLimit:
        """Register a limit for a route unless one already exists.

        When the route is already registered, the given threshold and
        window are discarded and the existing limit is returned.

        Args:
            route: Route identifier
            threshold: Maximum operations per window
            window_seconds: Window width in seconds

        Returns:
            The limit in force for the route

        Raises:
            InvalidConfigurationError: If threshold or window is not positive
        """
        existing = self._limits.get(route)
        if existing is not None:
            return existing

        candidate = RouteLimit(
            route=route, threshold=threshold, window_seconds=window_seconds
        )

        with self._lock:
            existing = self._limits.get(route)
            if existing is not None:
                return existing
            self._limits[route] = candidate

        logger.debug(
            "route_limit_registered",
            route=route,
            threshold=threshold,
            window_seconds=window_seconds,
        )
        return candidate
