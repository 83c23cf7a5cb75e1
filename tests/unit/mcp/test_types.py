"""Tests for MCP connection types."""

from datetime import UTC, datetime

import pytest

from mcplink.errors import ConfigurationError
from mcplink.mcp.types import (
    ConnectionStatus,
    HTTPSpec,
    ServerConfig,
    SSESpec,
    StdioSpec,
)
from mcplink.types import TransportKind


class TestServerConfig:
    """Tests for ServerConfig construction and validation."""

    def test_stdio_config(self):
        """Test a valid stdio definition."""
        config = ServerConfig(
            id="s1",
            name="files",
            transport=TransportKind.STDIO,
            stdio=StdioSpec(command="npx", args=["-y", "pkg"]),
        )
        assert config.spec == StdioSpec(command="npx", args=["-y", "pkg"])
        assert config.validate() == []

    def test_transport_string_is_coerced(self):
        """Test that a transport string becomes a TransportKind."""
        config = ServerConfig(
            id="s2", name="remote", transport="sse", sse=SSESpec(url="http://localhost:9000/sse")
        )
        assert config.transport is TransportKind.SSE

    def test_unknown_transport_rejected(self):
        """Test that an unsupported transport raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            ServerConfig(id="s1", name="x", transport="websocket")
        assert "Unsupported transport type" in str(exc_info.value)
        assert exc_info.value.code == "CONFIG_INVALID"

    def test_missing_spec_rejected(self):
        """Test that the recipe matching the transport is required."""
        with pytest.raises(ConfigurationError, match="http config is required"):
            ServerConfig(id="s1", name="x", transport=TransportKind.STREAMABLE_HTTP)

    def test_extra_spec_rejected(self):
        """Test that only the recipe matching the transport may be set."""
        with pytest.raises(ConfigurationError, match="not allowed"):
            ServerConfig(
                id="s1",
                name="x",
                transport=TransportKind.STDIO,
                stdio=StdioSpec(command="echo"),
                http=HTTPSpec(url="http://localhost"),
            )

    def test_empty_command_rejected(self):
        with pytest.raises(ConfigurationError, match="command must not be empty"):
            ServerConfig(id="s1", name="x", transport=TransportKind.STDIO, stdio=StdioSpec(command=" "))

    def test_invalid_url_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid URL"):
            ServerConfig(
                id="s1",
                name="x",
                transport=TransportKind.STREAMABLE_HTTP,
                http=HTTPSpec(url="ftp://example.com"),
            )

    def test_empty_id_rejected(self):
        with pytest.raises(ConfigurationError, match="Server id is required"):
            ServerConfig(id="", name="x", transport=TransportKind.STDIO, stdio=StdioSpec(command="echo"))

    def test_all_issues_reported(self):
        """Test that every problem is listed in one error."""
        with pytest.raises(ConfigurationError) as exc_info:
            ServerConfig(id="", name="x", transport=TransportKind.SSE)
        detail = exc_info.value.detail
        assert "Server id is required" in detail
        assert "sse config is required" in detail


class TestServerConfigDict:
    """Tests for ServerConfig.from_dict / to_dict."""

    def test_from_dict_camel_case(self):
        """Test parsing the configuration store's JSON shape."""
        config = ServerConfig.from_dict(
            {
                "id": "s2",
                "name": "Remote",
                "transport": "streamable-http",
                "http": {"url": "https://example.com/mcp", "headers": {"X-Key": "k"}},
                "createdAt": 1700000000000,
                "updatedAt": 1700000000500,
            }
        )
        assert config.http == HTTPSpec(url="https://example.com/mcp", headers={"X-Key": "k"})
        assert config.created_at == 1700000000000
        assert config.updated_at == 1700000000500

    def test_from_dict_snake_case_timestamps(self):
        config = ServerConfig.from_dict(
            {
                "id": "s1",
                "name": "files",
                "transport": "stdio",
                "stdio": {"command": "echo"},
                "created_at": 1,
                "updated_at": 2,
            }
        )
        assert (config.created_at, config.updated_at) == (1, 2)

    def test_from_dict_name_defaults_to_id(self):
        config = ServerConfig.from_dict({"id": "s1", "transport": "stdio", "stdio": {"command": "echo"}})
        assert config.name == "s1"

    def test_from_dict_missing_command(self):
        """Test that a stdio block without command is a configuration error."""
        with pytest.raises(ConfigurationError, match="Malformed server definition"):
            ServerConfig.from_dict({"id": "s1", "transport": "stdio", "stdio": {"args": []}})

    def test_from_dict_not_a_dict(self):
        with pytest.raises(ConfigurationError, match="must be an object"):
            ServerConfig.from_dict(["s1"])  # type: ignore[arg-type]

    def test_to_dict_round_trip(self, http_config):
        """Test that to_dict output parses back to an equal config."""
        assert ServerConfig.from_dict(http_config.to_dict()) == http_config

    def test_to_dict_omits_unset_timestamps(self, stdio_config):
        data = stdio_config.to_dict()
        assert "createdAt" not in data
        assert data["transport"] == "stdio"
        assert data["stdio"]["args"] == ["-y", "server-filesystem", "/tmp"]


class TestConnectionStatus:
    """Tests for ConnectionStatus invariants."""

    def test_down_default(self):
        status = ConnectionStatus.down()
        assert status.connected is False
        assert status.connected_at is None
        assert status.error is None

    def test_up_has_timestamp(self):
        status = ConnectionStatus.up()
        assert status.connected is True
        assert status.connected_at is not None
        assert status.error is None

    def test_connected_with_error_rejected(self):
        with pytest.raises(ValueError):
            ConnectionStatus(connected=True, connected_at=datetime.now(UTC), error="boom")

    def test_connected_without_timestamp_rejected(self):
        with pytest.raises(ValueError):
            ConnectionStatus(connected=True)

    def test_disconnected_with_timestamp_rejected(self):
        with pytest.raises(ValueError):
            ConnectionStatus(connected=False, connected_at=datetime.now(UTC))

    def test_to_dict_connected(self):
        """Test that connectedAt is emitted in epoch milliseconds."""
        connected_at = datetime(2024, 1, 1, tzinfo=UTC)
        status = ConnectionStatus(connected=True, connected_at=connected_at)
        assert status.to_dict() == {"connected": True, "connectedAt": 1704067200000}

    def test_to_dict_error(self):
        assert ConnectionStatus.down("timeout").to_dict() == {"connected": False, "error": "timeout"}
