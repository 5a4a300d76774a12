"""Rate limiting decorator for per-route configuration.

Registers a limit for an endpoint the first time it is called, for
routes that are not part of the static configuration.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from fastapi import Request
from starlette.responses import Response

from routegate.core.rate_limit.engine import RateDecisionEngine
from routegate.core.rate_limit.responses import rate_limited_response


P = ParamSpec("P")
T = TypeVar("T")


def rate_limit(
    threshold: int,
    window: int | None = None,
    route: str | None = None,
) -> Callable[
    [Callable[P, Awaitable[T]]], Callable[P, Awaitable[T | Response]]
]:
    """Decorator to apply a dynamic rate limit to a route.

    The first call registers the limit; a route that is already known
    (statically or from an earlier registration) keeps its limit.

    Args:
        threshold: Maximum requests allowed in window
        window: Time window in seconds (default: unlimited)
        route: Route identifier (default: "METHOD path", distinct from the
            bare path the middleware checks so a request is counted once)

    Returns:
        Decorated function with rate limiting

    Example:
        @router.post("/reports/export")
        @rate_limit(threshold=5, window=60)
        async def export(request: Request):
            ...
    """

    def decorator(
        func: Callable[P, Awaitable[T]],
    ) -> Callable[P, Awaitable[T | Response]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | Response:
            # Find Request in args or kwargs
            request: Request | None = None
            for arg in args:
                if isinstance(arg, Request):
                    request = arg
                    break
            if request is None:
                req_from_kwargs = kwargs.get("request")
                if isinstance(req_from_kwargs, Request):
                    request = req_from_kwargs

            if request is None:
                # No request found, skip rate limiting
                return await func(*args, **kwargs)

            engine: RateDecisionEngine = request.app.state.rate_engine
            result = await engine.evaluate(
                route or f"{request.method} {request.url.path}",
                threshold=threshold,
                window_seconds=window,
            )

            if not result.allowed:
                return rate_limited_response(request, result)

            return await func(*args, **kwargs)

        return wrapper

    return decorator
