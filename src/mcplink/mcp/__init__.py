"""mcplink MCP connection management."""

from .connection import MCPConnection
from .manager import MCPClientManager
from .session import SessionCache
from .store import ConnectionStore
from .transport import create_transport
from .types import (
    ConnectionStatus,
    HTTPSpec,
    ServerConfig,
    SessionRecord,
    SSESpec,
    StdioSpec,
)

__all__ = [
    # Connection
    "MCPConnection",
    "create_transport",
    # Shared state
    "ConnectionStore",
    "SessionCache",
    # Manager
    "MCPClientManager",
    # Types
    "ServerConfig",
    "StdioSpec",
    "HTTPSpec",
    "SSESpec",
    "ConnectionStatus",
    "SessionRecord",
]
