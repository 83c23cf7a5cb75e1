"""mcplink configuration data models."""

from dataclasses import dataclass, field

from mcplink.mcp.types import ServerConfig
from mcplink.types import LogFormat, LogLevel


@dataclass
class ManagerConfig:
    """Connection manager configuration."""

    connect_timeout: float = 30.0  # seconds, transport open + handshake
    disconnect_timeout: float = 5.0  # seconds, graceful close
    client_name: str = "mcplink"


@dataclass
class LoggingComponentsConfig:
    """Per-component logging switches."""

    connection: bool = True
    store: bool = True
    manager: bool = True
    api: bool = True
    config: bool = True


@dataclass
class LoggingOptionsConfig:
    """Logging options configuration."""

    show_context: bool = True
    truncate_at: int = 200


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)
    options: LoggingOptionsConfig = field(default_factory=LoggingOptionsConfig)


@dataclass
class APIConfig:
    """REST API configuration."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    # API
    prefix: str = "/api/v1"
    title: str = "mcplink REST API"
    version: str = "1.0.0"

    # Documentation
    docs_enabled: bool = True
    docs_path: str = "/docs"
    openapi_path: str = "/openapi.json"

    # CORS
    cors_enabled: bool = True
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class MCPLinkConfig:
    """Root configuration object."""

    manager: ManagerConfig = field(default_factory=ManagerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: APIConfig = field(default_factory=APIConfig)
    servers: list[ServerConfig] = field(default_factory=list)
    autoconnect: bool = False
