"""Domain entities and aggregates.

Pure domain models; no HTTP or persistence concerns.
"""

from coder_workspace.domain.entities.binding import BindingMeta, ContextBinding
from coder_workspace.domain.entities.change_context import ChangeContext
from coder_workspace.domain.entities.workspace import AppStatus, WorkspaceRecord

__all__ = [
    "AppStatus",
    "BindingMeta",
    "ChangeContext",
    "ContextBinding",
    "WorkspaceRecord",
]
