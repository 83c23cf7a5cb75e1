"""MCP connection and capability models.

Request bodies accept both snake_case and the camelCase names used by
browser clients (``serverId``, ``toolName``, ``promptName``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mcplink.mcp.types import ConnectionStatus


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ─────────────────────────────────────────────────────────────────
# Connection lifecycle
# ─────────────────────────────────────────────────────────────────


class ServerStatus(BaseModel):
    """Connection status of one server. ``connectedAt`` is epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True)

    connected: bool
    connected_at: int | None = Field(default=None, alias="connectedAt")
    error: str | None = None

    @classmethod
    def from_status(cls, status: ConnectionStatus) -> "ServerStatus":
        return cls.model_validate(status.to_dict())


class ConnectRequest(_Request):
    """Request to connect (or reconnect) a server."""

    server_id: str = Field(..., min_length=1, alias="serverId")
    config: dict[str, Any]


class ConnectResponse(BaseModel):
    success: bool
    status: ServerStatus


class DisconnectRequest(_Request):
    server_id: str = Field(..., min_length=1, alias="serverId")


class DisconnectResponse(BaseModel):
    success: bool


class StatusListResponse(BaseModel):
    """Status of every known server, keyed by server id."""

    statuses: dict[str, ServerStatus]


# ─────────────────────────────────────────────────────────────────
# Capabilities (raw MCP results, passed through as JSON)
# ─────────────────────────────────────────────────────────────────


class ToolCallRequest(_Request):
    server_id: str = Field(..., min_length=1, alias="serverId")
    tool_name: str = Field(..., min_length=1, alias="toolName")
    arguments: dict[str, Any] | None = None


class PromptGetRequest(_Request):
    server_id: str = Field(..., min_length=1, alias="serverId")
    prompt_name: str = Field(..., min_length=1, alias="promptName")
    arguments: dict[str, Any] | None = None


class ResourceReadRequest(_Request):
    server_id: str = Field(..., min_length=1, alias="serverId")
    uri: str = Field(..., min_length=1)


class ToolListResponse(BaseModel):
    tools: dict[str, Any]


class ToolCallResponse(BaseModel):
    result: dict[str, Any]


class PromptListResponse(BaseModel):
    prompts: dict[str, Any]


class PromptGetResponse(BaseModel):
    prompt: dict[str, Any]


class ResourceListResponse(BaseModel):
    resources: dict[str, Any]


class ResourceReadResponse(BaseModel):
    resource: dict[str, Any]
