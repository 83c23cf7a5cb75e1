"""mcplink logger - component-scoped colored or JSON logging."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from mcplink.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from mcplink.types import LogFormat, LogLevel

DEFAULT_COMPONENTS = ("connection", "store", "manager", "api", "config")


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stdout)

    def __post_init__(self) -> None:
        """Enable every known component unless told otherwise."""
        if not self.components:
            self.components = {name: True for name in DEFAULT_COMPONENTS}


class MCPLinkLogger:
    """Main logger facade. Creates component-specific loggers."""

    _level_order = {
        LogLevel.DEBUG: 0,
        LogLevel.INFO: 1,
        LogLevel.WARN: 2,
        LogLevel.ERROR: 3,
    }

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()

    def connection(self, server_id: str, transport: str) -> "ConnectionLogger":
        """Get a logger scoped to one server connection.

        Args:
            server_id: Server identifier
            transport: Transport kind value

        Returns:
            ConnectionLogger instance
        """
        return ConnectionLogger(self, server_id, transport)

    def configure(self, config: LogConfig) -> None:
        """Update configuration (for hot-reload)."""
        self.config = config

    def debug(self, component: str, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, component, message, context or None)

    def info(self, component: str, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, component, message, context or None)

    def warn(self, component: str, message: str, **context: Any) -> None:
        self._log(LogLevel.WARN, component, message, context or None)

    def error(self, component: str, message: str, **context: Any) -> None:
        self._log(LogLevel.ERROR, component, message, context or None)

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (connection, store, manager, api, config)
            message: Log message
            context: Additional context data
        """
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "connection": GREEN,
            "store": ORANGE,
            "manager": MAGENTA,
            "api": CYAN,
            "config": LIGHT_BLUE,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_context:
            context_str = str(context)
            if len(context_str) > self.config.truncate_at:
                context_str = context_str[: self.config.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{context_str}{RESET}"

        print(output, file=self.config.output)


class ConnectionLogger:
    """Logger for the lifecycle events of one server connection."""

    def __init__(self, parent: MCPLinkLogger, server_id: str, transport: str):
        """Initialize connection logger.

        Args:
            parent: Parent MCPLinkLogger instance
            server_id: Server identifier
            transport: Transport kind value
        """
        self.parent = parent
        self.server_id = server_id
        self.transport = transport

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        context = {
            "server_id": self.server_id,
            "transport": self.transport,
            "event": event,
        }
        context.update(extra)
        return context

    def connecting(self, timeout: float) -> None:
        """Log start of a connect attempt."""
        self.parent._log(
            LogLevel.INFO,
            "connection",
            f"Connecting to MCP server '{self.server_id}' ({self.transport})",
            self._context("connecting", timeout_seconds=timeout),
        )

    def connected(self, duration_ms: int) -> None:
        """Log a completed handshake."""
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.INFO,
            "connection",
            f"Connected to MCP server '{self.server_id}' ({duration_s:.2f}s) ✓",
            self._context("connected", duration_ms=duration_ms),
        )

    def connect_failed(self, error: str, duration_ms: int) -> None:
        """Log a failed connect attempt."""
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.ERROR,
            "connection",
            f"Failed to connect to MCP server '{self.server_id}' ({duration_s:.2f}s): {error}",
            self._context("connect_failed", duration_ms=duration_ms, error=error),
        )

    def disconnected(self) -> None:
        """Log a clean disconnect."""
        self.parent._log(
            LogLevel.INFO,
            "connection",
            f"Disconnected from MCP server '{self.server_id}'",
            self._context("disconnected"),
        )

    def teardown_failed(self, error: str) -> None:
        """Log a teardown problem. The connection is still considered closed."""
        self.parent._log(
            LogLevel.WARN,
            "connection",
            f"Error while disconnecting MCP server '{self.server_id}': {error}",
            self._context("teardown_failed", error=error),
        )
