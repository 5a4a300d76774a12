"""429 response shared by the middleware and the decorator."""

from starlette.requests import Request
from starlette.responses import JSONResponse

from routegate.core.errors import RateLimitError
from routegate.core.errors.handlers import problem_response
from routegate.core.rate_limit.engine import RateLimitResult


def rate_limited_response(request: Request, result: RateLimitResult) -> JSONResponse:
    """Build an RFC 7807 Too Many Requests response for a denied check."""
    exc = RateLimitError(
        f"Rate limit exceeded for {result.route}. "
        f"Limit: {result.limit} requests per window.",
        details={"route": result.route, "limit": result.limit},
    )
    return problem_response(
        request,
        exc,
        headers={
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": "0",
        },
    )
