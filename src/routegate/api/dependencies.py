"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from routegate.core.rate_limit import RateDecisionEngine


def get_rate_engine(request: Request) -> RateDecisionEngine:
    """Return the engine created by the application lifespan."""
    return request.app.state.rate_engine


# Type alias for rate engine dependency
RateEngine = Annotated[RateDecisionEngine, Depends(get_rate_engine)]
