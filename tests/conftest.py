"""
Pytest configuration and shared fixtures for mcplink tests.
"""

import io
import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from mcplink.logging import LogConfig, MCPLinkLogger
from mcplink.mcp.types import ServerConfig
from mcplink.types import LogFormat, LogLevel

# =============================================================================
# Server Config Fixtures
# =============================================================================


@pytest.fixture
def stdio_config() -> ServerConfig:
    """A stdio server definition."""
    return ServerConfig.from_dict(
        {
            "id": "s1",
            "name": "Local files",
            "transport": "stdio",
            "stdio": {"command": "npx", "args": ["-y", "server-filesystem", "/tmp"]},
        }
    )


@pytest.fixture
def http_config() -> ServerConfig:
    """A streamable-http server definition."""
    return ServerConfig.from_dict(
        {
            "id": "s2",
            "name": "Remote",
            "transport": "streamable-http",
            "http": {"url": "https://mcp.example.com/mcp", "headers": {"Authorization": "Bearer t"}},
        }
    )


@pytest.fixture
def make_config() -> Callable[..., ServerConfig]:
    """Factory for stdio server definitions with a given id."""

    def _make(server_id: str, command: str = "echo") -> ServerConfig:
        return ServerConfig.from_dict(
            {"id": server_id, "name": server_id, "transport": "stdio", "stdio": {"command": command}}
        )

    return _make


# =============================================================================
# Logger Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def json_logger(log_output: io.StringIO) -> MCPLinkLogger:
    """Logger writing JSON lines to an in-memory stream at DEBUG level."""
    return MCPLinkLogger(LogConfig(level=LogLevel.DEBUG, format=LogFormat.JSON, output=log_output))


# =============================================================================
# Client Fixtures
# =============================================================================


def make_mock_client(connected: bool = True) -> MagicMock:
    """MagicMock standing in for a fastmcp Client.

    Entering the context succeeds and ``is_connected`` reports ``connected``.
    """
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    client.is_connected = MagicMock(return_value=connected)
    for name in (
        "list_tools_mcp",
        "call_tool_mcp",
        "list_prompts_mcp",
        "get_prompt_mcp",
        "list_resources_mcp",
        "read_resource_mcp",
    ):
        setattr(client, name, AsyncMock())
    return client


@pytest.fixture
def mock_client() -> MagicMock:
    return make_mock_client()


@pytest.fixture
def client_factory() -> Callable[..., MagicMock]:
    """Factory for mock clients, for tests that need more than one."""
    return make_mock_client


@pytest.fixture
def log_records(log_output: io.StringIO) -> Callable[[], list[dict[str, Any]]]:
    """Parsed JSON log lines written so far."""

    def _records() -> list[dict[str, Any]]:
        return [json.loads(line) for line in log_output.getvalue().splitlines() if line.strip()]

    return _records


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "integration: Tests that spawn real MCP server processes")
