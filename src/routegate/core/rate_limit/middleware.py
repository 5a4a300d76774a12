"""Rate limiting middleware for statically configured routes.

Checks every request path against the engine. Paths without a
configured limit pass through unrestricted.
"""

from typing import ClassVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from routegate.core.errors import StoreUnavailableError
from routegate.core.errors.handlers import problem_response
from routegate.core.rate_limit.engine import RateDecisionEngine, RateLimitResult
from routegate.core.rate_limit.responses import rate_limited_response


class RouteRateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware that enforces route limits on incoming requests.

    The engine is read from `request.app.state.rate_engine`, which the
    application lifespan sets up. Restricted responses carry
    X-RateLimit-* headers.
    """

    # Paths to exclude from rate limiting
    EXCLUDED_PATHS: ClassVar[set[str]] = {
        "/health/live",
        "/health/ready",
        "/docs",
        "/redoc",
        "/openapi.json",
    }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and apply rate limiting.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response with rate limit headers
        """
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        engine: RateDecisionEngine = request.app.state.rate_engine

        try:
            result = await engine.evaluate(request.url.path)
        except StoreUnavailableError as exc:
            # Raised before call_next, so the app's exception handlers
            # never see it.
            return problem_response(request, exc)

        if not result.allowed:
            return rate_limited_response(request, result)

        response = await call_next(request)
        if result.restricted:
            _add_headers(response, result)
        return response


def _add_headers(response: Response, result: RateLimitResult) -> None:
    response.headers["X-RateLimit-Limit"] = str(result.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)
