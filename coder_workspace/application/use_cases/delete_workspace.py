"""Delete workspace use case: by name or via the session's binding."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from coder_workspace.application.interfaces.services import IBindingStore, IWorkspaceDeleter
from coder_workspace.domain.entities import ContextBinding
from coder_workspace.domain.enums import BindingScope, DeletionOutcome
from coder_workspace.domain.exceptions import (
    BindingNotFoundException,
    WorkspaceNotFoundException,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionResult:
    workspace_name: str
    outcome: DeletionOutcome


class DeleteWorkspaceUseCase:
    """Deletes a workspace and drops any binding that points at it."""

    def __init__(self, deleter: IWorkspaceDeleter, bindings: IBindingStore) -> None:
        self._deleter = deleter
        self._bindings = bindings

    async def delete_last(self, session_id: str | None = None) -> DeletionResult:
        """Delete the workspace bound to the session.

        Raises:
            BindingNotFoundException: If nothing is bound.
            WorkspaceNotFoundException: If the bound workspace no longer
                exists (the stale binding is cleared first).
        """
        binding = await self._bindings.load(session_id)
        if binding is None or not binding.meta.workspace_name:
            raise BindingNotFoundException()
        return await self._delete(binding.meta.workspace_name, session_id, binding=binding)

    async def delete_by_name(self, name: str, session_id: str | None = None) -> DeletionResult:
        """Delete the named workspace; the session binding is cleared only if it points there."""
        binding = await self._bindings.load(session_id)
        bound_here = binding is not None and binding.meta.workspace_name == name
        return await self._delete(name, session_id, binding=binding if bound_here else None)

    async def _delete(
        self, name: str, session_id: str | None, *, binding: ContextBinding | None
    ) -> DeletionResult:
        try:
            outcome = await self._deleter.delete_by_name(name)
        except WorkspaceNotFoundException:
            if binding is not None:
                await self._forget(binding, session_id)
            raise
        if binding is not None:
            await self._forget(binding, session_id)
        if outcome is DeletionOutcome.SOFT:
            logger.warning("Workspace %s marked dormant with a short TTL instead of deleted", name)
        else:
            logger.info("Workspace %s deleted", name)
        return DeletionResult(workspace_name=name, outcome=outcome)

    async def _forget(self, binding: ContextBinding, session_id: str | None) -> None:
        """Clear the session slot and any per-context slot still naming the same workspace."""
        await self._bindings.clear(session_id)
        ctx = binding.meta.context()
        for scope in (BindingScope.CONTEXT, BindingScope.CHANGE):
            scoped = await self._bindings.load(session_id, scope, ctx)
            if scoped is not None and scoped.meta.workspace_name == binding.meta.workspace_name:
                await self._bindings.clear(session_id, scope, ctx)
