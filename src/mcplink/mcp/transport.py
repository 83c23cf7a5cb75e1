"""Transport factory - picks the FastMCP client transport for a server config.

Construction only: no process is spawned and no socket is opened here. The
transport opens when the owning Client connects, so configuration errors
surface before any connect-time failure can.
"""

from fastmcp.client.transports import (
    ClientTransport,
    SSETransport,
    StdioTransport,
    StreamableHttpTransport,
)

from mcplink.errors import create_error
from mcplink.types import TransportKind

from .types import ServerConfig


def create_transport(config: ServerConfig) -> ClientTransport:
    """Build the transport for ``config``.

    Args:
        config: Server definition

    Returns:
        StdioTransport, StreamableHttpTransport or SSETransport

    Raises:
        ConfigurationError: If the transport recipe for the declared kind is missing
            or the transport kind is not supported
    """
    if config.transport == TransportKind.STDIO:
        if config.stdio is None:
            raise _missing_spec(config, "stdio")
        return StdioTransport(
            command=config.stdio.command,
            args=list(config.stdio.args),
            env=dict(config.stdio.env) or None,
            # The subprocess must die with the client, never outlive a disconnect
            keep_alive=False,
        )

    if config.transport == TransportKind.STREAMABLE_HTTP:
        if config.http is None:
            raise _missing_spec(config, "http")
        return StreamableHttpTransport(url=config.http.url, headers=dict(config.http.headers))

    if config.transport == TransportKind.SSE:
        if config.sse is None:
            raise _missing_spec(config, "sse")
        return SSETransport(url=config.sse.url, headers=dict(config.sse.headers))

    raise create_error(
        "CONFIG_INVALID",
        server_id=config.id,
        detail=f"Unsupported transport type: {config.transport}",
    )


def _missing_spec(config: ServerConfig, spec_name: str) -> Exception:
    return create_error(
        "CONFIG_INVALID",
        server_id=config.id,
        detail=f"{spec_name} config is required for {config.transport.value} transport",
    )
