"""MCP Client Manager - the facade other subsystems call.

Connect/disconnect/status go through the ConnectionStore. Capability calls
(tools, prompts, resources) resolve the live FastMCP client and forward
verbatim; results come back as the raw MCP result objects, unmodified.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import mcp.types
from fastmcp.client import Client

from mcplink.errors import ConnectTimeoutError, MCPLinkError, create_error
from mcplink.logging.logger import MCPLinkLogger
from mcplink.telemetry import MCPLinkMetrics, MetricLabels

from .connection import DEFAULT_CONNECT_TIMEOUT
from .store import ConnectionStore
from .types import ConnectionStatus, ServerConfig

T = TypeVar("T")


class MCPClientManager:
    """Manages all MCP server connections for the host process.

    No retries and no caching happen here: each call makes exactly one
    attempt and remote failures propagate as raised by the client.
    """

    def __init__(
        self,
        store: ConnectionStore,
        logger: MCPLinkLogger | None = None,
        metrics: MCPLinkMetrics | None = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ):
        """Initialize MCP client manager.

        Args:
            store: The process-wide connection store
            logger: Optional logger
            metrics: Optional metrics recorder
            connect_timeout: Default connect timeout in seconds
        """
        self._store = store
        self._logger = logger
        self._metrics = metrics
        self._connect_timeout = connect_timeout
        if metrics:
            metrics.observe_active_connections(lambda: len(self.connected_servers()))

    @property
    def store(self) -> ConnectionStore:
        return self._store

    # ─────────────────────────────────────────────────────────────────
    # Connection lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def connect(self, config: ServerConfig, timeout: float | None = None) -> ConnectionStatus:
        """Connect (or reconnect) a server.

        Args:
            config: Server configuration
            timeout: Connect timeout in seconds (defaults to the manager's)

        Returns:
            Status after a successful connect

        Raises:
            ConfigurationError: Bad transport spec
            ConnectTimeoutError: Handshake did not finish in time
            ConnectFailedError: Transport open or handshake failed
        """
        timeout = self._connect_timeout if timeout is None else timeout
        self._log_info(f"Connecting server '{config.id}' ({config.name})")
        start_time = time.monotonic()
        try:
            status = await self._store.connect_server(config, timeout)
        except ConnectTimeoutError:
            self._record_connect(config, MetricLabels.STATUS_TIMEOUT, start_time)
            raise
        except MCPLinkError:
            self._record_connect(config, MetricLabels.STATUS_ERROR, start_time)
            raise
        self._record_connect(config, MetricLabels.STATUS_SUCCESS, start_time)
        return status

    async def disconnect(self, server_id: str) -> None:
        """Disconnect a server. Safe to call for unknown or already disconnected ids.

        Raises:
            TeardownError: If closing failed; the server is disconnected anyway
        """
        self._log_info(f"Disconnecting server '{server_id}'")
        await self._store.disconnect_server(server_id)

    async def disconnect_all(self) -> None:
        """Disconnect every server. Used at shutdown."""
        self._log_info(f"Disconnecting {len(self._store.server_ids())} MCP servers")
        await self._store.disconnect_all()

    def status(self, server_id: str) -> ConnectionStatus:
        """Status of one server; not connected for ids never seen."""
        return self._store.get_status(server_id)

    def all_statuses(self) -> dict[str, ConnectionStatus]:
        """Status of every known server. Cheap enough for frequent polling."""
        return self._store.get_all_statuses()

    def connected_servers(self) -> list[str]:
        """Ids of servers with a usable client right now."""
        return [sid for sid in self._store.server_ids() if self._store.get_client(sid) is not None]

    # ─────────────────────────────────────────────────────────────────
    # Capability pass-through
    # ─────────────────────────────────────────────────────────────────

    async def list_tools(self, server_id: str) -> mcp.types.ListToolsResult:
        return await self._forward(server_id, "list_tools", lambda c: c.list_tools_mcp())

    async def call_tool(
        self,
        server_id: str,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> mcp.types.CallToolResult:
        """Call a tool on a connected server.

        A tool-level error comes back as a result with ``isError`` set; only
        protocol or transport failures raise.
        """
        return await self._forward(
            server_id,
            "call_tool",
            lambda c: c.call_tool_mcp(name=name, arguments=arguments or {}),
        )

    async def list_prompts(self, server_id: str) -> mcp.types.ListPromptsResult:
        return await self._forward(server_id, "list_prompts", lambda c: c.list_prompts_mcp())

    async def get_prompt(
        self,
        server_id: str,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> mcp.types.GetPromptResult:
        return await self._forward(
            server_id,
            "get_prompt",
            lambda c: c.get_prompt_mcp(name=name, arguments=arguments or {}),
        )

    async def list_resources(self, server_id: str) -> mcp.types.ListResourcesResult:
        return await self._forward(server_id, "list_resources", lambda c: c.list_resources_mcp())

    async def read_resource(self, server_id: str, uri: str) -> mcp.types.ReadResourceResult:
        return await self._forward(server_id, "read_resource", lambda c: c.read_resource_mcp(uri))

    async def _forward(
        self,
        server_id: str,
        operation: str,
        invoke: Callable[[Client], Awaitable[T]],
    ) -> T:
        """Run ``invoke`` against the server's live client.

        Raises:
            NotConnectedError: Before any I/O, if the server has no live client
        """
        client = self._store.get_client(server_id)
        if client is None:
            raise create_error("NOT_CONNECTED", server_id=server_id)

        try:
            result = await invoke(client)
        except Exception:
            if self._metrics:
                self._metrics.record_capability_call(operation, MetricLabels.STATUS_ERROR)
            raise
        if self._metrics:
            self._metrics.record_capability_call(operation, MetricLabels.STATUS_SUCCESS)
        return result

    def _record_connect(self, config: ServerConfig, status: str, start_time: float) -> None:
        if self._metrics:
            self._metrics.record_connect(
                config.transport.value, status, time.monotonic() - start_time
            )

    def _log_info(self, message: str) -> None:
        if self._logger:
            self._logger.info("manager", message)
