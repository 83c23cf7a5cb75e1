"""mcplink error types."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    CONFIG = "CONFIG"
    CONNECTION = "CONNECTION"
    SYSTEM = "SYSTEM"


@dataclass
class MCPLinkError(Exception):
    """Structured error with context. Base exception for all mcplink errors."""

    # Identity
    code: str  # e.g., "CONNECT_FAILED"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    retryable: bool = False  # Is a caller-side retry potentially useful?
    http_status: int = 500  # For REST API responses
    server_id: str | None = None  # Which server the error concerns

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "retryable": self.retryable,
            "server_id": self.server_id,
            "timestamp": self.timestamp.isoformat(),
        }


class ConfigurationError(MCPLinkError):
    """Bad or missing transport spec. Caller mistake, never retried."""


class ConnectFailedError(MCPLinkError):
    """Transport open or handshake failed. The caller may connect again."""


class ConnectTimeoutError(ConnectFailedError):
    """Connect attempt exceeded its timeout."""


class NotConnectedError(MCPLinkError):
    """Capability call against a server with no live connection."""


class TeardownError(MCPLinkError):
    """Closing a connection failed. The state transition still completed."""


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "MCP server '{server_id}' is not connected"
    error_class: type[MCPLinkError] = MCPLinkError
    detail_template: str | None = None
    suggestion_template: str | None = None
    default_retryable: bool = False
    default_http_status: int = 500
