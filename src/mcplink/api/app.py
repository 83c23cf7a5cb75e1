"""REST API application factory."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mcplink.api.errors import setup_error_handlers
from mcplink.api.middleware import RequestIDMiddleware
from mcplink.api.routers import health_router, mcp_router
from mcplink.config.models import APIConfig

if TYPE_CHECKING:
    from mcplink.logging import MCPLinkLogger
    from mcplink.mcp import MCPClientManager

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[None]]


def create_rest_app(
    manager: "MCPClientManager",
    config: APIConfig | None = None,
    logger: "MCPLinkLogger | None" = None,
    lifespan: Lifespan | None = None,
) -> FastAPI:
    """Create FastAPI application with all routes.

    Args:
        manager: Connection manager the routes operate on
        config: REST API configuration (defaults to APIConfig())
        logger: Optional logger
        lifespan: Optional startup/shutdown context (see MCPLinkApplication)

    Returns:
        Configured FastAPI application
    """
    config = config or APIConfig()

    app = FastAPI(
        title=config.title,
        version=config.version,
        docs_url=config.docs_path if config.docs_enabled else None,
        redoc_url=None,
        openapi_url=config.openapi_path if config.docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.manager = manager
    app.state.config = config
    app.state.logger = logger

    # First added is innermost
    app.add_middleware(RequestIDMiddleware, logger=logger)
    if config.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    setup_error_handlers(app)

    app.include_router(health_router, prefix=config.prefix)
    app.include_router(mcp_router, prefix=config.prefix)

    return app
