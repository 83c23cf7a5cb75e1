"""mcplink error handling - structured errors with context."""

from .errors import (
    ConfigurationError,
    ConnectFailedError,
    ConnectTimeoutError,
    ErrorCategory,
    ErrorTemplate,
    MCPLinkError,
    NotConnectedError,
    TeardownError,
)
from .factory import ErrorFactory, create_error, describe_exception, get_error_factory
from .registry import ErrorRegistry

__all__ = [
    # Core error types
    "MCPLinkError",
    "ErrorCategory",
    "ErrorTemplate",
    "ConfigurationError",
    "ConnectFailedError",
    "ConnectTimeoutError",
    "NotConnectedError",
    "TeardownError",
    # Registry and factory
    "ErrorRegistry",
    "ErrorFactory",
    # Convenience functions
    "get_error_factory",
    "create_error",
    "describe_exception",
]
