"""mcplink REST API module."""

from mcplink.api.app import create_rest_app

__all__ = [
    "create_rest_app",
]
