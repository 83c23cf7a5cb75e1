"""MCP connection types for mcplink."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlparse

from mcplink.errors import create_error
from mcplink.types import TransportKind


@dataclass
class StdioSpec:
    """Recipe for spawning a local MCP server over stdin/stdout."""

    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)  # overlay on the default environment


@dataclass
class HTTPSpec:
    """Target of a streamable HTTP MCP server."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class SSESpec:
    """Target of an event-stream (SSE) MCP server."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)


# Spec attribute required for each transport kind
_SPEC_FIELD = {
    TransportKind.STDIO: "stdio",
    TransportKind.STREAMABLE_HTTP: "http",
    TransportKind.SSE: "sse",
}


@dataclass
class ServerConfig:
    """Identity and connection recipe for one MCP server.

    Exactly one of ``stdio``, ``http`` or ``sse`` is populated and it must
    match ``transport``. Invalid combinations raise ConfigurationError at
    construction, so a ServerConfig that exists is always usable by the
    transport factory.

    ``created_at``/``updated_at`` are epoch milliseconds owned by the
    configuration store; mcplink never changes them.
    """

    id: str
    name: str
    transport: TransportKind
    stdio: StdioSpec | None = None
    http: HTTPSpec | None = None
    sse: SSESpec | None = None
    created_at: int | None = None
    updated_at: int | None = None

    def __post_init__(self) -> None:
        """Normalize the transport tag and validate the transport recipe."""
        if not isinstance(self.transport, TransportKind):
            try:
                self.transport = TransportKind(self.transport)
            except ValueError:
                raise create_error(
                    "CONFIG_INVALID",
                    server_id=self.id or None,
                    detail=f"Unsupported transport type: {self.transport}",
                ) from None

        issues = self.validate()
        if issues:
            raise create_error("CONFIG_INVALID", server_id=self.id or None, detail="; ".join(issues))

    def validate(self) -> list[str]:
        """Return every problem with this definition (empty when valid)."""
        issues: list[str] = []
        if not self.id:
            issues.append("Server id is required")

        expected = _SPEC_FIELD[self.transport]
        populated = [name for name in ("stdio", "http", "sse") if getattr(self, name) is not None]
        if expected not in populated:
            issues.append(f"{expected} config is required for {self.transport.value} transport")
        extra = [name for name in populated if name != expected]
        if extra:
            issues.append(
                f"{', '.join(extra)} config is not allowed for {self.transport.value} transport"
            )

        if self.stdio is not None and not self.stdio.command.strip():
            issues.append("stdio command must not be empty")
        for spec in (self.http, self.sse):
            if spec is not None and not _is_http_url(spec.url):
                issues.append(f"Invalid URL: {spec.url!r}")
        return issues

    @property
    def spec(self) -> StdioSpec | HTTPSpec | SSESpec:
        """The populated spec variant."""
        return getattr(self, _SPEC_FIELD[self.transport])

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServerConfig":
        """Build a ServerConfig from the configuration store's JSON shape.

        Accepts both camelCase (``createdAt``) and snake_case keys.

        Raises:
            ConfigurationError: On a malformed definition
        """
        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID", detail=f"Server definition must be an object, got {type(data).__name__}"
            )

        server_id = data.get("id") or ""
        try:
            stdio = data.get("stdio")
            http = data.get("http")
            sse = data.get("sse")
            return cls(
                id=server_id,
                name=data.get("name") or server_id,
                transport=data.get("transport", ""),
                stdio=(
                    StdioSpec(
                        command=stdio["command"],
                        args=list(stdio.get("args") or []),
                        env=dict(stdio.get("env") or {}),
                    )
                    if stdio
                    else None
                ),
                http=HTTPSpec(url=http["url"], headers=dict(http.get("headers") or {})) if http else None,
                sse=SSESpec(url=sse["url"], headers=dict(sse.get("headers") or {})) if sse else None,
                created_at=data.get("createdAt", data.get("created_at")),
                updated_at=data.get("updatedAt", data.get("updated_at")),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise create_error(
                "CONFIG_INVALID",
                server_id=server_id or None,
                detail=f"Malformed server definition: {e!r}",
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the configuration store's JSON shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "transport": self.transport.value,
        }
        if self.stdio is not None:
            data["stdio"] = {
                "command": self.stdio.command,
                "args": list(self.stdio.args),
                "env": dict(self.stdio.env),
            }
        if self.http is not None:
            data["http"] = {"url": self.http.url, "headers": dict(self.http.headers)}
        if self.sse is not None:
            data["sse"] = {"url": self.sse.url, "headers": dict(self.sse.headers)}
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data


def _is_http_url(url: str) -> bool:
    parsed = urlparse(url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class ConnectionStatus:
    """Point-in-time health of one connection.

    ``connected=True`` never carries an error and always has ``connected_at``;
    an error always means ``connected=False``.
    """

    connected: bool = False
    connected_at: datetime | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.connected and self.error is not None:
            raise ValueError("A connected status cannot carry an error")
        if self.connected and self.connected_at is None:
            raise ValueError("A connected status requires connected_at")
        if not self.connected and self.connected_at is not None:
            raise ValueError("connected_at is only valid while connected")

    @classmethod
    def up(cls) -> "ConnectionStatus":
        """Connected as of now."""
        return cls(connected=True, connected_at=datetime.now(UTC))

    @classmethod
    def down(cls, error: str | None = None) -> "ConnectionStatus":
        """Not connected, optionally because of a failure."""
        return cls(connected=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses. Absent fields are omitted."""
        data: dict[str, Any] = {"connected": self.connected}
        if self.connected_at is not None:
            data["connectedAt"] = int(self.connected_at.timestamp() * 1000)
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class SessionRecord:
    """Last known status of a server plus the config used to reach it.

    In-memory only; lost when the process exits.
    """

    server_id: str
    status: ConnectionStatus
    config: ServerConfig
    saved_at: datetime = field(default_factory=lambda: datetime.now(UTC))
