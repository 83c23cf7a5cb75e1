"""REST API routers."""

from .health import health_router
from .mcp import mcp_router

__all__ = [
    "health_router",
    "mcp_router",
]
