"""Connection store - the registry of live connections plus their session shadows.

One store is created per process and handed to the MCPClientManager (and
from there to request handlers). It is the only owner of MCPConnection
objects, which guarantees at most one live connection per server id.
"""

import asyncio
from collections.abc import Callable

from fastmcp.client import Client

from mcplink.errors import MCPLinkError, describe_exception
from mcplink.logging.logger import MCPLinkLogger

from .connection import DEFAULT_CONNECT_TIMEOUT, DEFAULT_DISCONNECT_TIMEOUT, MCPConnection
from .session import SessionCache
from .types import ConnectionStatus, ServerConfig

ConnectionFactory = Callable[[ServerConfig], MCPConnection]


class ConnectionStore:
    """Registry of MCP connections keyed by server id.

    Connect and disconnect for the same server id are serialized by a per-id
    lock; different ids never wait on each other. Status reads take no lock
    and work on snapshots of the maps.
    """

    def __init__(
        self,
        logger: MCPLinkLogger | None = None,
        sessions: SessionCache | None = None,
        connection_factory: ConnectionFactory | None = None,
        client_name: str = "mcplink",
        disconnect_timeout: float = DEFAULT_DISCONNECT_TIMEOUT,
    ):
        """Initialize the store.

        Args:
            logger: Optional logger
            sessions: Session cache (defaults to a new, empty one)
            connection_factory: Builds a connection for a config (defaults to MCPConnection)
            client_name: Client name announced during handshakes
            disconnect_timeout: Graceful close timeout per connection, in seconds
        """
        self._logger = logger
        self._sessions = sessions if sessions is not None else SessionCache()
        self._connection_factory = connection_factory or self._default_factory
        self._client_name = client_name
        self._disconnect_timeout = disconnect_timeout
        self._connections: dict[str, MCPConnection] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _default_factory(self, config: ServerConfig) -> MCPConnection:
        return MCPConnection(config, logger=self._logger, client_name=self._client_name)

    def _lock_for(self, server_id: str) -> asyncio.Lock:
        # Locks are kept for the store's lifetime so waiters never split across two locks
        if server_id not in self._locks:
            self._locks[server_id] = asyncio.Lock()
        return self._locks[server_id]

    @property
    def sessions(self) -> SessionCache:
        return self._sessions

    async def connect_server(
        self,
        config: ServerConfig,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> ConnectionStatus:
        """Connect a server, replacing any existing connection for its id.

        The existing connection is fully torn down first. The new connection
        becomes the registry entry and its status is shadowed in the session
        cache whether the attempt succeeds or fails.

        Args:
            config: Server configuration
            timeout: Connect timeout in seconds

        Returns:
            The new connection status

        Raises:
            ConfigurationError, ConnectFailedError, ConnectTimeoutError
        """
        async with self._lock_for(config.id):
            existing = self._connections.get(config.id)
            if existing is not None:
                try:
                    await existing.disconnect(self._disconnect_timeout)
                except MCPLinkError as e:
                    self._log_warn(f"Replaced connection for '{config.id}' did not close cleanly: {e}")

            connection = self._connection_factory(config)
            self._connections[config.id] = connection
            try:
                await connection.connect(timeout)
            finally:
                self._sessions.save(config.id, connection.status, config)
            return connection.status

    async def disconnect_server(self, server_id: str) -> None:
        """Disconnect a server and forget it.

        Removes the registry entry and the session shadow. Nothing to do
        beyond clearing the shadow when the id has no registry entry.

        Raises:
            TeardownError: If closing failed (the entry is removed regardless)
        """
        async with self._lock_for(server_id):
            connection = self._connections.get(server_id)
            try:
                if connection is not None:
                    await connection.disconnect(self._disconnect_timeout)
            finally:
                self._connections.pop(server_id, None)
                self._sessions.delete(server_id)

    async def disconnect_all(self) -> None:
        """Disconnect every server concurrently. Failures are logged per id."""
        server_ids = list(self._connections)
        if not server_ids:
            return

        results = await asyncio.gather(
            *(self.disconnect_server(server_id) for server_id in server_ids),
            return_exceptions=True,
        )
        for server_id, result in zip(server_ids, results, strict=True):
            if isinstance(result, BaseException):
                self._log_error(
                    f"Failed to disconnect '{server_id}': {describe_exception(result)}",
                    server_id=server_id,
                )

    def get_connection(self, server_id: str) -> MCPConnection | None:
        return self._connections.get(server_id)

    def get_client(self, server_id: str) -> Client | None:
        """Live client for a server, or None if it is not connected."""
        connection = self._connections.get(server_id)
        return connection.get_client() if connection else None

    def get_status(self, server_id: str) -> ConnectionStatus:
        """Status for one server. Never raises.

        Registry entry first, then the session shadow, else not connected.
        """
        connection = self._connections.get(server_id)
        if connection is not None:
            return connection.status
        record = self._sessions.load(server_id)
        if record is not None:
            return record.status
        return ConnectionStatus.down()

    def get_all_statuses(self) -> dict[str, ConnectionStatus]:
        """Status of every known server.

        Registry entries take precedence over session shadows for the same id.
        """
        statuses = {
            server_id: connection.status for server_id, connection in list(self._connections.items())
        }
        for record in self._sessions.load_all():
            statuses.setdefault(record.server_id, record.status)
        return statuses

    def server_ids(self) -> list[str]:
        """Ids with a registry entry."""
        return list(self._connections)

    def _log_warn(self, message: str, **context: object) -> None:
        if self._logger:
            self._logger.warn("store", message, **context)

    def _log_error(self, message: str, **context: object) -> None:
        if self._logger:
            self._logger.error("store", message, **context)
