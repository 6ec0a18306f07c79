"""Service interfaces (ports) for the application layer.

Protocols define contracts the use cases depend on (DIP). The Coder
infrastructure adapters satisfy them; tests substitute AsyncMock objects.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from coder_workspace.domain.enums import BindingScope, DeletionOutcome

if TYPE_CHECKING:
    from coder_workspace.application.use_cases.resolve_workspace import ResolvedWorkspace
    from coder_workspace.domain.entities import ChangeContext, ContextBinding, WorkspaceRecord
    from coder_workspace.domain.value_objects import CreateWorkspaceRequest


# Workspace lookup interface
class IWorkspaceLookup(Protocol):
    """Protocol for resolving workspace names to remote records."""

    async def lookup_by_name(self, name: str) -> WorkspaceRecord | None:
        """Return the named workspace, or None when no endpoint shape finds it."""

    async def find_first(self, names: Iterable[str]) -> WorkspaceRecord | None:
        """Return the first candidate name that resolves."""

    async def prefix_search(self, names: Iterable[str]) -> WorkspaceRecord | None:
        """Return a listed workspace matching a candidate exactly or as `<candidate>.`."""


# Workspace creation interface
class IWorkspaceCreator(Protocol):
    """Protocol for the create call. Raises WorkspaceConflictError on a taken name."""

    async def __call__(self, request: CreateWorkspaceRequest) -> WorkspaceRecord: ...


# Workspace deletion interface
class IWorkspaceDeleter(Protocol):
    """Protocol for deleting a workspace by name."""

    async def delete_by_name(self, name: str) -> DeletionOutcome:
        """Delete (hard) or decommission (soft) the named workspace."""


# Workspace resolution interface
class IWorkspaceResolver(Protocol):
    """Protocol for resolving the workspace for a change context."""

    async def resolve(self, ctx: ChangeContext, *, strict: bool | None = None) -> ResolvedWorkspace:
        """Resolve the workspace for `ctx`."""


# Binding store interface
class IBindingStore(Protocol):
    """Protocol for context binding slots (session, repo/branch, change/patchset)."""

    async def load(
        self,
        session_id: str | None = None,
        scope: BindingScope = BindingScope.SESSION,
        ctx: ChangeContext | None = None,
    ) -> ContextBinding | None:
        """Return the binding in the slot, or None."""

    async def save(
        self,
        binding: ContextBinding,
        session_id: str | None = None,
        scope: BindingScope = BindingScope.SESSION,
    ) -> None:
        """Replace the binding in the slot."""

    async def clear(
        self,
        session_id: str | None = None,
        scope: BindingScope = BindingScope.SESSION,
        ctx: ChangeContext | None = None,
    ) -> None:
        """Remove the binding in the slot."""
