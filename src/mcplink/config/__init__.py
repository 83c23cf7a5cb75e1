"""mcplink configuration - loading, models and server definitions."""

from .loader import (
    ConfigLoader,
    deep_merge,
    load_config,
    resolve_env_vars,
)
from .models import (
    APIConfig,
    LoggingComponentsConfig,
    LoggingConfig,
    LoggingOptionsConfig,
    ManagerConfig,
    MCPLinkConfig,
)
from .servers import export_servers, generate_server_id, import_servers

__all__ = [
    # Config models
    "MCPLinkConfig",
    "ManagerConfig",
    "LoggingConfig",
    "LoggingComponentsConfig",
    "LoggingOptionsConfig",
    "APIConfig",
    # Loader
    "ConfigLoader",
    "load_config",
    "resolve_env_vars",
    "deep_merge",
    # Server definitions
    "import_servers",
    "export_servers",
    "generate_server_id",
]
