"""Workspace deletion with route fallbacks and soft decommission.

Deployments disagree on which delete route they serve, so every known shape
is tried in a fixed order. Route-shaped failures (400/404/405) advance; any
other rejection aborts immediately. When no hard-delete route exists the
workspace is marked dormant and given a short TTL so it expires on its own.
"""

from __future__ import annotations

import logging

from coder_workspace.core.constants import SOFT_DELETE_TTL_MS
from coder_workspace.domain.entities import WorkspaceRecord
from coder_workspace.domain.enums import DeletionOutcome
from coder_workspace.domain.exceptions import WorkspaceNotFoundException
from coder_workspace.infrastructure.coder import paths
from coder_workspace.infrastructure.coder._rest_client import CoderRESTClient
from coder_workspace.infrastructure.coder.cascade import Attempt, Candidate, run_cascade
from coder_workspace.infrastructure.coder.lookup import WorkspaceLookup
from coder_workspace.infrastructure.exceptions import CoderTransportError, WorkspaceDeletionError
from coder_workspace.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


def delete_candidates(
    workspace: WorkspaceRecord, owner: str, organization: str = ""
) -> list[Candidate]:
    """Hard-delete shapes in the order they are attempted.

    Id-based shapes are skipped when the record carries no id; org-scoped
    shapes only exist when an organization is configured.
    """
    name = workspace.name
    by_id = paths.workspace_by_id(workspace.id) if workspace.id else ""
    candidates: list[Candidate] = []
    if by_id:
        candidates += [
            Candidate("delete-by-id", "DELETE", by_id),
            Candidate("delete-by-id-hard", "DELETE", by_id, params={"hard": "true"}),
            Candidate("delete-by-id-force", "DELETE", by_id, params={"force": "true"}),
            Candidate(
                "delete-by-id-hard-force",
                "DELETE",
                by_id,
                params={"hard": "true", "force": "true"},
            ),
        ]
    candidates += [
        Candidate("delete-user-workspace", "DELETE", paths.user_workspace(owner, name)),
        Candidate("delete-user-workspaces", "DELETE", paths.user_workspaces(owner, name)),
    ]
    if organization:
        candidates += [
            Candidate(
                "delete-member-workspace",
                "DELETE",
                paths.member_workspace(organization, owner, name),
            ),
            Candidate(
                "delete-member-workspaces",
                "DELETE",
                paths.member_workspaces(organization, owner, name),
            ),
        ]
    candidates.append(Candidate("delete-global", "DELETE", paths.global_workspace(name)))
    if workspace.id:
        action = paths.workspace_by_id(workspace.id, "delete")
        candidates += [
            Candidate("post-delete", "POST", action),
            Candidate("post-delete-hard", "POST", action, params={"hard": "true"}),
        ]
    return candidates


class WorkspaceDeleter:
    """Deletes a workspace by name, degrading to soft decommission."""

    def __init__(self, client: CoderRESTClient, lookup: WorkspaceLookup | None = None) -> None:
        self._client = client
        self._lookup = lookup or WorkspaceLookup(client)

    @traced("coder.delete_workspace")
    async def delete_by_name(self, name: str) -> DeletionOutcome:
        """Delete the named workspace.

        Returns:
            DeletionOutcome.HARD when a delete route accepted the request,
            DeletionOutcome.SOFT when only dormant/TTL could be applied.

        Raises:
            WorkspaceNotFoundException: No workspace with that name is visible.
            CoderApiError: A delete route rejected the request with a
                non-route status (e.g. 401, 403, 500).
            WorkspaceDeletionError: Every route and both soft steps failed.
        """
        workspace = await self._lookup.lookup_by_name(name)
        if workspace is None:
            raise WorkspaceNotFoundException(name)
        config = self._client.config
        owner = workspace.owner_name or config.user_segment
        outcome = await run_cascade(
            self._client, delete_candidates(workspace, owner, config.organization)
        )
        if outcome.succeeded:
            logger.info("Deleted workspace %s via %s", name, outcome.winner)
            return DeletionOutcome.HARD

        logger.warning(
            "No delete route accepted workspace %s after %d attempts; falling back to dormant+ttl",
            name,
            len(outcome.attempts),
        )
        if workspace.id and await self._soft_delete(workspace, outcome.attempts):
            return DeletionOutcome.SOFT
        last = outcome.attempts[-1] if outcome.attempts else Attempt("", 0)
        raise WorkspaceDeletionError(name, last.status or None, last.text)

    async def _soft_delete(self, workspace: WorkspaceRecord, attempts: list[Attempt]) -> bool:
        """Mark dormant and shorten TTL. Both steps always run; either succeeding is enough."""
        steps = (
            ("dormant", {"dormant": True}),
            ("ttl", {"ttl_ms": SOFT_DELETE_TTL_MS}),
        )
        succeeded = False
        for action, body in steps:
            try:
                response = await self._client.request(
                    "PUT", paths.workspace_by_id(workspace.id, action), json=body
                )
            except CoderTransportError as e:
                attempts.append(Attempt(f"soft-{action}", 0, e.message))
                logger.warning("Soft delete step %s for %s unreachable: %s", action, workspace.name, e)
                continue
            if response.is_success:
                logger.info("Applied %s to workspace %s", action, workspace.name)
                succeeded = True
            else:
                attempts.append(Attempt(f"soft-{action}", response.status_code, response.text))
                logger.warning(
                    "Soft delete step %s for %s failed: %s %s",
                    action,
                    workspace.name,
                    response.status_code,
                    response.text,
                )
        return succeeded
