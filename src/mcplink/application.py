"""mcplink Application - wires configuration, logging, metrics, the
connection manager and the REST API together.

Typical embedding:

    app = MCPLinkApplication("mcplink.yaml")
    await app.initialize()      # autoconnects configured servers
    ...
    await app.shutdown()        # disconnects everything

or serve the REST API, whose lifespan drives both calls:

    await MCPLinkApplication().start()
"""

import asyncio
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TextIO, TypeVar

from fastapi import FastAPI

from mcplink.api import create_rest_app
from mcplink.config import ConfigLoader, MCPLinkConfig
from mcplink.errors import create_error, describe_exception
from mcplink.logging import LogConfig, MCPLinkLogger
from mcplink.mcp import ConnectionStore, MCPClientManager, SessionCache
from mcplink.telemetry import MCPLinkMetrics

T = TypeVar("T")


class MCPLinkApplication:
    """mcplink application orchestrator.

    Initialization sequence:

    1. Config loading
    2. Logger setup
    3. Metrics
    4. Connection store and manager
    5. REST API
    6. Autoconnect of configured servers (in ``initialize``)
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        log_output: TextIO | None = None,
        config: MCPLinkConfig | None = None,
    ):
        """Initialize application.

        Args:
            config_path: Path to config file (optional, see ConfigLoader.load)
            log_output: Output stream for logs (default: sys.stdout)
            config: Already loaded configuration; skips file loading
        """
        self._config_path = config_path
        self._log_output = log_output or sys.stdout
        self._built = False
        self._initialized = False

        self.config: MCPLinkConfig | None = config
        self.logger: MCPLinkLogger | None = None
        self.metrics: MCPLinkMetrics | None = None
        self.store: ConnectionStore | None = None
        self.manager: MCPClientManager | None = None
        self.rest_app: FastAPI | None = None

    def build(self) -> None:
        """Create every component without touching the network. Idempotent."""
        if self._built:
            return

        # 1. Config
        if self.config is None:
            self.config = ConfigLoader().load(self._config_path)
        config = self.config

        # 2. Logger
        self.logger = MCPLinkLogger(
            LogConfig(
                level=config.logging.level,
                format=config.logging.format,
                show_context=config.logging.options.show_context,
                truncate_at=config.logging.options.truncate_at,
                components={
                    "connection": config.logging.components.connection,
                    "store": config.logging.components.store,
                    "manager": config.logging.components.manager,
                    "api": config.logging.components.api,
                    "config": config.logging.components.config,
                },
                output=self._log_output,
            )
        )

        # 3. Metrics
        self.metrics = MCPLinkMetrics()

        # 4. Store + manager
        self.store = ConnectionStore(
            logger=self.logger,
            sessions=SessionCache(),
            client_name=config.manager.client_name,
            disconnect_timeout=config.manager.disconnect_timeout,
        )
        self.manager = MCPClientManager(
            self.store,
            logger=self.logger,
            metrics=self.metrics,
            connect_timeout=config.manager.connect_timeout,
        )

        # 5. REST API
        self.rest_app = create_rest_app(
            self.manager,
            config.api,
            logger=self.logger,
            lifespan=self._lifespan,
        )

        self._built = True

    async def initialize(self) -> None:
        """Build components and autoconnect configured servers.

        A server that fails to connect is logged and left with a failed
        status; it never aborts startup.
        """
        if self._initialized:
            return
        self.build()
        config, manager = self._require(self.config), self._require(self.manager)
        logger = self._require(self.logger)

        if config.autoconnect and config.servers:
            logger.info(
                "manager", f"Autoconnecting {len(config.servers)} configured MCP servers"
            )
            results = await asyncio.gather(
                *(manager.connect(server) for server in config.servers),
                return_exceptions=True,
            )
            for server, result in zip(config.servers, results, strict=True):
                if isinstance(result, BaseException):
                    logger.warn(
                        "manager",
                        f"Autoconnect of '{server.id}' failed: {describe_exception(result)}",
                        server_id=server.id,
                    )

        self._initialized = True

    async def shutdown(self) -> None:
        """Disconnect every server."""
        if not self._initialized:
            return

        if self.manager:
            await self.manager.disconnect_all()

        self._initialized = False

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        await self.initialize()
        try:
            yield
        finally:
            await self.shutdown()

    async def start(self) -> None:
        """Serve the REST API until the server is stopped."""
        import uvicorn

        self.build()
        api = self._require(self.config).api

        config = uvicorn.Config(
            self._require(self.rest_app),
            host=api.host,
            port=api.port,
            log_level="info",
        )
        server = uvicorn.Server(config)
        await server.serve()

    @staticmethod
    def _require(component: T | None) -> T:
        """Return a component created by ``build()``."""
        if component is None:
            raise create_error("INTERNAL_ERROR", detail="Application components are not built")
        return component
