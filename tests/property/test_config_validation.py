"""Property-based tests for configuration validation.

Covers env var resolution, server definition validation and the
status/merge invariants that depend on them.
"""

import os
from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from mcplink.config import import_servers
from mcplink.config.loader import _resolve_env_vars_recursive, resolve_env_vars
from mcplink.errors import ConfigurationError, MCPLinkError
from mcplink.mcp.types import ConnectionStatus, HTTPSpec, ServerConfig, SSESpec, StdioSpec
from mcplink.types import TransportKind

# =============================================================================
# Strategies
# =============================================================================

valid_env_var_name = st.from_regex(r"^MCPLINK_[A-Z0-9_]{1,20}$", fullmatch=True)
valid_env_var_value = st.from_regex(r"^[a-zA-Z0-9_\-./]{1,50}$", fullmatch=True)

server_id = st.from_regex(r"^[a-z][a-z0-9\-]{0,15}$", fullmatch=True)
command = st.from_regex(r"^[a-z][a-z0-9_\-]{0,15}$", fullmatch=True)
url = st.builds(
    lambda scheme, host, path: f"{scheme}://{host}/{path}",
    st.sampled_from(["http", "https"]),
    st.from_regex(r"^[a-z]{1,10}\.example\.com$", fullmatch=True),
    st.from_regex(r"^[a-z]{0,10}$", fullmatch=True),
)
headers = st.dictionaries(st.from_regex(r"^X-[A-Za-z]{1,10}$", fullmatch=True), st.text(max_size=20), max_size=3)

stdio_spec = st.builds(
    StdioSpec,
    command=command,
    args=st.lists(st.text(max_size=10), max_size=4),
    env=st.dictionaries(st.from_regex(r"^[A-Z]{1,8}$", fullmatch=True), st.text(max_size=10), max_size=3),
)
http_spec = st.builds(HTTPSpec, url=url, headers=headers)
sse_spec = st.builds(SSESpec, url=url, headers=headers)


@st.composite
def valid_server(draw) -> ServerConfig:
    transport = draw(st.sampled_from(list(TransportKind)))
    spec_field, spec = {
        TransportKind.STDIO: ("stdio", stdio_spec),
        TransportKind.STREAMABLE_HTTP: ("http", http_spec),
        TransportKind.SSE: ("sse", sse_spec),
    }[transport]
    sid = draw(server_id)
    return ServerConfig(id=sid, name=sid.upper(), transport=transport, **{spec_field: draw(spec)})


# =============================================================================
# Environment variable resolution
# =============================================================================


@pytest.mark.property
class TestEnvVarResolution:
    """Property tests for environment variable resolution."""

    @given(valid_env_var_name, valid_env_var_value)
    @settings(max_examples=50)
    def test_env_var_resolved_when_set(self, var_name, var_value):
        with patch.dict(os.environ, {var_name: var_value}):
            assert resolve_env_vars(f"${{{var_name}}}") == var_value

    @given(valid_env_var_name, valid_env_var_value, valid_env_var_value)
    @settings(max_examples=50)
    def test_value_wins_over_default(self, var_name, var_value, default):
        with patch.dict(os.environ, {var_name: var_value}):
            assert resolve_env_vars(f"${{{var_name}:-{default}}}") == var_value

    @given(valid_env_var_name, valid_env_var_value)
    @settings(max_examples=50)
    def test_default_used_when_unset(self, var_name, default):
        env = {k: v for k, v in os.environ.items() if k != var_name}
        with patch.dict(os.environ, env, clear=True):
            assert resolve_env_vars(f"${{{var_name}:-{default}}}") == default

    @given(valid_env_var_name)
    @settings(max_examples=30)
    def test_required_env_var_raises_when_unset(self, var_name):
        env = {k: v for k, v in os.environ.items() if k != var_name}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(MCPLinkError) as exc_info:
                resolve_env_vars(f"${{{var_name}}}")
            assert exc_info.value.code == "CONFIG_INVALID"

    @given(st.text(alphabet=st.characters(whitelist_categories=("L", "N")), min_size=1, max_size=50))
    @settings(max_examples=30)
    def test_string_without_env_vars_unchanged(self, text):
        assume("$" not in text)
        assert resolve_env_vars(text) == text

    @given(valid_env_var_name, valid_env_var_value, st.integers(), st.booleans())
    @settings(max_examples=30)
    def test_recursive_resolution(self, var_name, var_value, int_val, bool_val):
        """Strings nested in dicts and lists resolve; other values pass through."""
        with patch.dict(os.environ, {var_name: var_value}):
            data = {"servers": [{"env": {"K": f"${{{var_name}}}"}}], "n": int_val, "b": bool_val}
            result = _resolve_env_vars_recursive(data)
        assert result == {"servers": [{"env": {"K": var_value}}], "n": int_val, "b": bool_val}


# =============================================================================
# Server definition validation
# =============================================================================


@pytest.mark.property
class TestServerConfigValidation:
    """Property tests for ServerConfig construction."""

    @given(valid_server())
    @settings(max_examples=100)
    def test_valid_definitions_have_exactly_matching_spec(self, config):
        populated = [name for name in ("stdio", "http", "sse") if getattr(config, name) is not None]
        assert len(populated) == 1
        assert config.spec is getattr(config, populated[0])
        assert config.validate() == []

    @given(valid_server())
    @settings(max_examples=100)
    def test_dict_form_parses_back(self, config):
        assert ServerConfig.from_dict(config.to_dict()) == config

    @given(
        st.sampled_from([t.value for t in TransportKind]),
        st.one_of(st.none(), stdio_spec),
        st.one_of(st.none(), http_spec),
        st.one_of(st.none(), sse_spec),
    )
    @settings(max_examples=200)
    def test_construction_accepts_only_consistent_specs(self, transport, stdio, http, sse):
        """Either construction fails or exactly the matching spec is set."""
        expected = {"stdio": "stdio", "streamable-http": "http", "sse": "sse"}[transport]
        populated = {
            name for name, spec in (("stdio", stdio), ("http", http), ("sse", sse)) if spec is not None
        }
        try:
            config = ServerConfig(id="s1", name="s1", transport=transport, stdio=stdio, http=http, sse=sse)
        except ConfigurationError:
            assert populated != {expected}
        else:
            assert populated == {expected}
            assert config.transport.value == transport

    @given(st.text(max_size=20))
    @settings(max_examples=50)
    def test_unknown_transport_rejected(self, transport):
        assume(transport not in {t.value for t in TransportKind})
        with pytest.raises(ConfigurationError):
            ServerConfig.from_dict({"id": "s1", "transport": transport, "stdio": {"command": "echo"}})


# =============================================================================
# Status and merge invariants
# =============================================================================


@pytest.mark.property
class TestInvariants:
    @given(st.booleans(), st.booleans(), st.one_of(st.none(), st.text(min_size=1, max_size=20)))
    @settings(max_examples=50)
    def test_connection_status_invariant(self, connected, with_timestamp, error):
        """A status that can be built never claims connected with an error."""
        connected_at = datetime.now(UTC) if with_timestamp else None
        try:
            status = ConnectionStatus(connected=connected, connected_at=connected_at, error=error)
        except ValueError:
            return
        assert not (status.connected and status.error is not None)
        assert status.connected == (status.connected_at is not None)

    @given(
        st.lists(valid_server(), max_size=6, unique_by=lambda s: s.id),
        st.lists(valid_server(), max_size=6),
    )
    @settings(max_examples=50)
    def test_import_merge(self, existing, imported):
        """Merged ids are unique and cover both sides; existing order is kept."""
        merged = import_servers([s.to_dict() for s in imported], existing)
        ids = [s.id for s in merged]

        assert len(ids) == len(set(ids))
        assert set(ids) == {s.id for s in existing} | {s.id for s in imported}
        assert ids[: len(existing)] == [s.id for s in existing]
