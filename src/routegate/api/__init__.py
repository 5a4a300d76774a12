"""HTTP API package."""

from routegate.api.router import api_router


__all__ = ["api_router"]
