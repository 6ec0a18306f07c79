"""Application interfaces (ports): service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from coder_workspace.infrastructure.
"""

from coder_workspace.application.interfaces.services import (
    IBindingStore,
    IWorkspaceCreator,
    IWorkspaceDeleter,
    IWorkspaceLookup,
    IWorkspaceResolver,
)

__all__ = [
    "IBindingStore",
    "IWorkspaceCreator",
    "IWorkspaceDeleter",
    "IWorkspaceLookup",
    "IWorkspaceResolver",
]
