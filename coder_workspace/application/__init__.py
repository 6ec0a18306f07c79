"""Application layer: interfaces, services, use cases.

Depends on domain and protocol definitions (DIP); the Coder infrastructure
implements the interfaces (lookup, create, delete, binding store).
"""

from coder_workspace.application.interfaces import (
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
