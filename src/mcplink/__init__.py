"""mcplink - managed connections to remote MCP servers.

Keeps named connections to MCP servers over stdio, streamable HTTP or SSE,
tracks their status and passes tool, prompt and resource calls through.
"""

from mcplink.application import MCPLinkApplication

__version__ = "0.1.0"
__all__ = ["__version__", "MCPLinkApplication"]
