"""Application use cases: resolve, open and delete workspaces."""

from coder_workspace.application.use_cases.delete_workspace import (
    DeleteWorkspaceUseCase,
    DeletionResult,
)
from coder_workspace.application.use_cases.open_workspace import (
    OpenResult,
    OpenWorkspaceUseCase,
    current_binding,
)
from coder_workspace.application.use_cases.resolve_workspace import (
    ResolvedWorkspace,
    WorkspaceResolver,
)

__all__ = [
    "DeleteWorkspaceUseCase",
    "DeletionResult",
    "OpenResult",
    "OpenWorkspaceUseCase",
    "ResolvedWorkspace",
    "WorkspaceResolver",
    "current_binding",
]
