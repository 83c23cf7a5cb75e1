"""MCP connection router."""

from typing import Any

from fastapi import APIRouter, Body, Query, Request
from pydantic import BaseModel

from mcplink.api.models import (
    ConnectRequest,
    ConnectResponse,
    DisconnectRequest,
    DisconnectResponse,
    PromptGetRequest,
    PromptGetResponse,
    PromptListResponse,
    ResourceListResponse,
    ResourceReadRequest,
    ResourceReadResponse,
    ServerStatus,
    StatusListResponse,
    ToolCallRequest,
    ToolCallResponse,
    ToolListResponse,
)
from mcplink.errors import create_error
from mcplink.mcp import MCPClientManager, ServerConfig

mcp_router = APIRouter(prefix="/mcp", tags=["MCP"])


def _manager(request: Request) -> MCPClientManager:
    return request.app.state.manager


def _dump(result: BaseModel) -> dict[str, Any]:
    """Raw MCP result as JSON, wire field names."""
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


# ─────────────────────────────────────────────────────────────────
# Connection lifecycle
# ─────────────────────────────────────────────────────────────────


@mcp_router.post("/connect", response_model=ConnectResponse, response_model_exclude_none=True)
async def connect_server(request: Request, body: ConnectRequest = Body(...)) -> ConnectResponse:
    """Connect a server, replacing any existing connection for its id."""
    config = ServerConfig.from_dict(body.config)
    if config.id != body.server_id:
        raise create_error(
            "CONFIG_INVALID",
            server_id=body.server_id,
            detail=f"server_id '{body.server_id}' does not match config id '{config.id}'",
        )

    status = await _manager(request).connect(config)
    return ConnectResponse(success=True, status=ServerStatus.from_status(status))


@mcp_router.post("/disconnect", response_model=DisconnectResponse)
async def disconnect_server(
    request: Request, body: DisconnectRequest = Body(...)
) -> DisconnectResponse:
    """Disconnect a server. Unknown ids succeed."""
    await _manager(request).disconnect(body.server_id)
    return DisconnectResponse(success=True)


@mcp_router.get("/status", response_model=StatusListResponse, response_model_exclude_none=True)
async def list_statuses(request: Request) -> StatusListResponse:
    """Status of every known server."""
    statuses = _manager(request).all_statuses()
    return StatusListResponse(
        statuses={sid: ServerStatus.from_status(status) for sid, status in statuses.items()}
    )


@mcp_router.get("/status/{server_id}", response_model=ServerStatus, response_model_exclude_none=True)
async def get_status(request: Request, server_id: str) -> ServerStatus:
    """Status of one server; never-seen ids read as not connected."""
    return ServerStatus.from_status(_manager(request).status(server_id))


# ─────────────────────────────────────────────────────────────────
# Tools
# ─────────────────────────────────────────────────────────────────


@mcp_router.get("/tools", response_model=ToolListResponse)
async def list_tools(request: Request, server_id: str = Query(..., min_length=1)) -> ToolListResponse:
    result = await _manager(request).list_tools(server_id)
    return ToolListResponse(tools=_dump(result))


@mcp_router.post("/tools/call", response_model=ToolCallResponse)
async def call_tool(request: Request, body: ToolCallRequest = Body(...)) -> ToolCallResponse:
    """Call a tool. Tool-level failures come back in the result with ``isError`` set."""
    result = await _manager(request).call_tool(body.server_id, body.tool_name, body.arguments)
    return ToolCallResponse(result=_dump(result))


# ─────────────────────────────────────────────────────────────────
# Prompts
# ─────────────────────────────────────────────────────────────────


@mcp_router.get("/prompts", response_model=PromptListResponse)
async def list_prompts(
    request: Request, server_id: str = Query(..., min_length=1)
) -> PromptListResponse:
    result = await _manager(request).list_prompts(server_id)
    return PromptListResponse(prompts=_dump(result))


@mcp_router.post("/prompts/get", response_model=PromptGetResponse)
async def get_prompt(request: Request, body: PromptGetRequest = Body(...)) -> PromptGetResponse:
    result = await _manager(request).get_prompt(body.server_id, body.prompt_name, body.arguments)
    return PromptGetResponse(prompt=_dump(result))


# ─────────────────────────────────────────────────────────────────
# Resources
# ─────────────────────────────────────────────────────────────────


@mcp_router.get("/resources", response_model=ResourceListResponse)
async def list_resources(
    request: Request, server_id: str = Query(..., min_length=1)
) -> ResourceListResponse:
    result = await _manager(request).list_resources(server_id)
    return ResourceListResponse(resources=_dump(result))


@mcp_router.post("/resources/read", response_model=ResourceReadResponse)
async def read_resource(
    request: Request, body: ResourceReadRequest = Body(...)
) -> ResourceReadResponse:
    result = await _manager(request).read_resource(body.server_id, body.uri)
    return ResourceReadResponse(resource=_dump(result))
