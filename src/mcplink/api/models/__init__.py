"""REST API models."""

from .common import ErrorDetail, ErrorResponse, HealthCheck, HealthStatus
from .mcp import (
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

__all__ = [
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "HealthCheck",
    "HealthStatus",
    # Connection lifecycle
    "ServerStatus",
    "ConnectRequest",
    "ConnectResponse",
    "DisconnectRequest",
    "DisconnectResponse",
    "StatusListResponse",
    # Capabilities
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolListResponse",
    "PromptGetRequest",
    "PromptGetResponse",
    "PromptListResponse",
    "ResourceReadRequest",
    "ResourceReadResponse",
    "ResourceListResponse",
]
