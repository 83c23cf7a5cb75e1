"""MCP Connection - manages a single MCP server connection.

Uses the FastMCP client library for the protocol itself (framing,
initialize handshake, request multiplexing). This module owns the
connect/disconnect sequence and the resulting status record.
"""

import asyncio
import time
from contextlib import AsyncExitStack

from fastmcp.client import Client
from fastmcp.client.transports import ClientTransport

from mcplink.errors import MCPLinkError, create_error, describe_exception
from mcplink.logging.logger import ConnectionLogger, MCPLinkLogger
from mcplink.types import ConnectionState

from .transport import create_transport
from .types import ConnectionStatus, ServerConfig

DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_DISCONNECT_TIMEOUT = 5.0


class MCPConnection:
    """Single MCP server connection.

    States: idle -> connecting -> connected, connecting -> failed,
    connected -> disconnecting -> idle. A connection object is never reused
    after a reconnect; the store replaces it with a fresh instance.
    """

    def __init__(
        self,
        config: ServerConfig,
        logger: MCPLinkLogger | None = None,
        client_name: str = "mcplink",
    ):
        """Initialize MCP connection.

        Args:
            config: Server configuration
            logger: Optional logger
            client_name: Client name announced during the handshake
        """
        self.config = config
        self._client_name = client_name
        self._log: ConnectionLogger | None = (
            logger.connection(config.id, config.transport.value) if logger else None
        )
        self._state = ConnectionState.IDLE
        self._status = ConnectionStatus.down()

        # Serializes connect/disconnect on this instance
        self._lock = asyncio.Lock()

        # Live only while connected
        self._transport: ClientTransport | None = None
        self._client: Client | None = None
        self._exit_stack: AsyncExitStack | None = None

    @property
    def server_id(self) -> str:
        return self.config.id

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        """Current status. A dropped session reads as not connected."""
        if self._state == ConnectionState.CONNECTED and not self._is_alive():
            return ConnectionStatus.down("Connection lost")
        return self._status

    def get_client(self) -> Client | None:
        """Return the live client, or None when it is not usable right now."""
        if self._state != ConnectionState.CONNECTED or not self._is_alive():
            return None
        return self._client

    def _is_alive(self) -> bool:
        return self._client is not None and bool(self._client.is_connected())

    async def connect(self, timeout: float = DEFAULT_CONNECT_TIMEOUT) -> None:
        """Open the transport and perform the MCP handshake.

        No-op when already connected.

        Args:
            timeout: Upper bound for transport open plus handshake, in seconds

        Raises:
            ConfigurationError: If the transport cannot be built from the config
            ConnectTimeoutError: If the attempt exceeds ``timeout``
            ConnectFailedError: On any transport or handshake failure
        """
        async with self._lock:
            if self._state == ConnectionState.CONNECTED:
                return

            self._state = ConnectionState.CONNECTING
            if self._log:
                self._log.connecting(timeout)
            start_time = time.monotonic()

            try:
                self._transport = create_transport(self.config)
            except MCPLinkError as e:
                self._mark_failed(str(e), start_time)
                raise

            self._client = Client(
                transport=self._transport,
                name=f"{self._client_name}-{self.server_id}",
            )
            self._exit_stack = AsyncExitStack()

            try:
                async with asyncio.timeout(timeout):
                    await self._exit_stack.enter_async_context(self._client)
            except TimeoutError as e:
                await self._release()
                self._mark_failed("timeout", start_time)
                raise create_error(
                    "CONNECT_TIMEOUT",
                    server_id=self.server_id,
                    timeout_seconds=timeout,
                ) from e
            except asyncio.CancelledError:
                await self._release()
                self._mark_failed("cancelled", start_time)
                raise
            except Exception as e:
                description = describe_exception(e)
                await self._release()
                self._mark_failed(description, start_time)
                raise create_error(
                    "CONNECT_FAILED",
                    server_id=self.server_id,
                    detail=description,
                ) from e

            self._state = ConnectionState.CONNECTED
            self._status = ConnectionStatus.up()
            if self._log:
                self._log.connected(_elapsed_ms(start_time))

    async def disconnect(self, timeout: float = DEFAULT_DISCONNECT_TIMEOUT) -> None:
        """Close the client and its transport.

        Idempotent: a no-op when nothing is open. The state always ends in
        idle and never reads as connected afterwards, even if teardown fails.

        Args:
            timeout: Maximum time to wait for a graceful close in seconds

        Raises:
            TeardownError: If closing reported an error (after the transition)
        """
        async with self._lock:
            if self._client is None and self._exit_stack is None:
                return

            self._state = ConnectionState.DISCONNECTING
            error: str | None = None
            try:
                if self._exit_stack:
                    async with asyncio.timeout(timeout):
                        await self._exit_stack.aclose()
            except TimeoutError:
                error = f"timeout ({timeout}s) during disconnect"
            except Exception as e:
                error = describe_exception(e)
            finally:
                self._exit_stack = None
                self._client = None
                await self._force_close_transport(timeout)
                self._state = ConnectionState.IDLE

            if error is None:
                self._status = ConnectionStatus.down()
                if self._log:
                    self._log.disconnected()
                return

            self._status = ConnectionStatus.down(error)
            if self._log:
                self._log.teardown_failed(error)
            raise create_error("TEARDOWN_FAILED", server_id=self.server_id, detail=error)

    def _mark_failed(self, error: str, start_time: float) -> None:
        self._state = ConnectionState.FAILED
        self._status = ConnectionStatus.down(error)
        if self._log:
            self._log.connect_failed(error, _elapsed_ms(start_time))

    async def _release(self) -> None:
        """Release a partially opened client and transport after a failed connect."""
        stack = self._exit_stack
        self._exit_stack = None
        self._client = None
        if stack:
            try:
                await stack.aclose()
            except Exception as e:
                if self._log:
                    self._log.teardown_failed(describe_exception(e))
        await self._force_close_transport(DEFAULT_DISCONNECT_TIMEOUT)

    async def _force_close_transport(self, timeout: float) -> None:
        """Close the transport, terminating a spawned subprocess if any."""
        transport = self._transport
        self._transport = None
        if transport is None:
            return
        try:
            async with asyncio.timeout(timeout):
                await transport.close()
        except Exception as e:
            if self._log:
                self._log.teardown_failed(describe_exception(e))


def _elapsed_ms(start_time: float) -> int:
    return int((time.monotonic() - start_time) * 1000)
