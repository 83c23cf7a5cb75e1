"""Tests for SessionCache."""

from mcplink.mcp.session import SessionCache
from mcplink.mcp.types import ConnectionStatus


class TestSessionCache:
    """Tests for the in-memory session shadow."""

    def test_save_and_load(self, stdio_config):
        cache = SessionCache()
        status = ConnectionStatus.up()

        record = cache.save("s1", status, stdio_config)

        assert cache.load("s1") is record
        assert record.status is status
        assert record.config is stdio_config
        assert record.saved_at is not None

    def test_save_replaces(self, stdio_config):
        """Test that a second save overwrites the first record."""
        cache = SessionCache()
        cache.save("s1", ConnectionStatus.up(), stdio_config)
        cache.save("s1", ConnectionStatus.down("timeout"), stdio_config)

        assert len(cache) == 1
        assert cache.load("s1").status.error == "timeout"

    def test_load_missing(self):
        assert SessionCache().load("nope") is None

    def test_load_all_is_snapshot(self, stdio_config, http_config):
        cache = SessionCache()
        cache.save("s1", ConnectionStatus.down(), stdio_config)
        cache.save("s2", ConnectionStatus.down(), http_config)

        records = cache.load_all()
        cache.clear()

        assert {r.server_id for r in records} == {"s1", "s2"}
        assert len(cache) == 0

    def test_delete(self, stdio_config):
        cache = SessionCache()
        cache.save("s1", ConnectionStatus.down(), stdio_config)

        assert cache.delete("s1") is True
        assert cache.delete("s1") is False
        assert "s1" not in cache
