"""Workspace lookup by name across deployment-specific endpoint shapes.

Lookup never raises for "not found": every non-2xx status or empty search
advances to the next shape, and an unreachable server ends the lookup with
None after logging. The create path therefore stays reachable even when
diagnostic endpoints misbehave.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from coder_workspace.core.constants import LISTING_LIMIT, SEARCH_LIMIT
from coder_workspace.domain.entities import WorkspaceRecord
from coder_workspace.infrastructure.coder import paths
from coder_workspace.infrastructure.coder._rest_client import CoderRESTClient
from coder_workspace.infrastructure.coder.cascade import (
    Candidate,
    advance_always,
    run_cascade,
)
from coder_workspace.infrastructure.exceptions import CoderTransportError
from coder_workspace.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


def _parse_record(response: httpx.Response) -> WorkspaceRecord | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict) or not data.get("name"):
        return None
    return WorkspaceRecord.from_api(data)


def _parse_records(response: httpx.Response) -> list[WorkspaceRecord]:
    """Workspaces from a search response ({"workspaces": [...]} or a bare list)."""
    try:
        data = response.json()
    except ValueError:
        return []
    items = data.get("workspaces") if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []
    return [WorkspaceRecord.from_api(item) for item in items if isinstance(item, dict)]


def pick_exact(
    records: Iterable[WorkspaceRecord], name: str, owner: str | None = None
) -> WorkspaceRecord | None:
    """First record named exactly `name`, preferring one owned by `owner`."""
    exact = [r for r in records if r.name == name]
    if owner:
        for record in exact:
            if record.owner_name == owner:
                return record
    return exact[0] if exact else None


def pick_prefixed(
    records: Iterable[WorkspaceRecord], names: Iterable[str]
) -> WorkspaceRecord | None:
    """First record matching a candidate exactly or as `<candidate>.<suffix>`.

    Candidates are checked in priority order.
    """
    records = list(records)
    for candidate in names:
        for record in records:
            if record.name == candidate or record.name.startswith(f"{candidate}."):
                return record
    return None


class WorkspaceLookup:
    """Resolves workspace names to remote records."""

    def __init__(self, client: CoderRESTClient) -> None:
        self._client = client
        self._config = client.config

    def _preferred_owner(self) -> str | None:
        user = self._config.user_segment
        return None if user == "me" else user

    def name_candidates(self, name: str) -> list[Candidate[WorkspaceRecord]]:
        """Ordered endpoint shapes for one name: by-name, owner+name search, name-only search."""
        user = self._config.user_segment
        owner = self._preferred_owner()
        owner_terms = [f"owner:{user}", f"name:{name}"]
        if self._config.organization:
            owner_terms.append(f"organization:{self._config.organization}")
        limit = str(SEARCH_LIMIT)
        return [
            Candidate(
                "get-by-name",
                "GET",
                paths.user_workspace(user, name),
                accept=_parse_record,
                advance_on=advance_always,
            ),
            Candidate(
                "search-owner-name",
                "GET",
                paths.workspaces(),
                params={"q": " ".join(owner_terms), "limit": limit},
                accept=lambda r: pick_exact(_parse_records(r), name, owner),
                advance_on=advance_always,
            ),
            Candidate(
                "search-name",
                "GET",
                paths.workspaces(),
                params={"q": f"name:{name}", "limit": limit},
                accept=lambda r: pick_exact(_parse_records(r), name, owner),
                advance_on=advance_always,
            ),
        ]

    @traced("coder.lookup_by_name")
    async def lookup_by_name(self, name: str) -> WorkspaceRecord | None:
        """Return the workspace named `name`, or None when no shape finds it."""
        try:
            outcome = await run_cascade(self._client, self.name_candidates(name))
        except CoderTransportError:
            logger.warning("Workspace lookup for %s aborted; Coder unreachable", name, exc_info=True)
            return None
        if outcome.value is None:
            logger.debug("Workspace %s not found after %d attempts", name, len(outcome.attempts))
        return outcome.value

    async def find_first(self, names: Iterable[str]) -> WorkspaceRecord | None:
        """Look up candidate names in priority order; first hit wins."""
        for name in names:
            record = await self.lookup_by_name(name)
            if record is not None:
                logger.info("Reusing existing workspace %s (candidate %s)", record.name, name)
                return record
        return None

    @traced("coder.prefix_search")
    async def prefix_search(self, names: Iterable[str]) -> WorkspaceRecord | None:
        """Scan the caller's workspace listing for an exact or branch-suffixed name."""
        names = list(names)
        listing = Candidate(
            "list-owner",
            "GET",
            paths.workspaces(),
            params={"q": f"owner:{self._config.user_segment}", "limit": str(LISTING_LIMIT)},
            accept=lambda r: pick_prefixed(_parse_records(r), names),
            advance_on=advance_always,
        )
        try:
            outcome = await run_cascade(self._client, [listing])
        except CoderTransportError:
            logger.warning("Workspace prefix search aborted; Coder unreachable", exc_info=True)
            return None
        return outcome.value
