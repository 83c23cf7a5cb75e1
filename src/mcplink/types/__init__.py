"""Shared types for mcplink.

Import from here rather than submodules:
    from mcplink.types import LogLevel, TransportKind
"""

from .enums import ConnectionState, LogFormat, LogLevel, TransportKind
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "TransportKind",
    "ConnectionState",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
