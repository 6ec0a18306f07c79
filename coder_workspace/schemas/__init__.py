"""Pydantic request/response schemas for the API."""

from coder_workspace.schemas.config import ConfigResponse
from coder_workspace.schemas.health import HealthResponse, ReadinessResponse
from coder_workspace.schemas.workspace import (
    BindingResponse,
    ChangeContextRequest,
    DeleteWorkspaceResponse,
    OpenWorkspaceRequest,
    OpenWorkspaceResponse,
    PreviewResponse,
)

__all__ = [
    "BindingResponse",
    "ChangeContextRequest",
    "ConfigResponse",
    "DeleteWorkspaceResponse",
    "HealthResponse",
    "OpenWorkspaceRequest",
    "OpenWorkspaceResponse",
    "PreviewResponse",
    "ReadinessResponse",
]
