"""Resolve workspace use case: reuse an existing workspace or create one.

Default mode looks up every candidate name before creating, and treats a
create conflict as "someone else created it first": the existing workspace
is adopted when visible, otherwise one retry is made under a stamped name.
Strict mode only ever uses the exact primary name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from coder_workspace.application.interfaces.services import (
    IWorkspaceCreator,
    IWorkspaceLookup,
)
from coder_workspace.application.services.candidate_names import compute_candidate_names
from coder_workspace.application.services.name_template_renderer import generate_unique_name
from coder_workspace.application.services.template_selection import build_create_request
from coder_workspace.domain.entities import ChangeContext, WorkspaceRecord
from coder_workspace.domain.enums import ResolutionSource
from coder_workspace.domain.value_objects import CreateWorkspaceRequest, WorkspaceConfig
from coder_workspace.infrastructure.exceptions import WorkspaceConflictError
from coder_workspace.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedWorkspace:
    """Workspace chosen for a context and how it was obtained."""

    workspace: WorkspaceRecord
    source: ResolutionSource

    @property
    def reused(self) -> bool:
        return self.source is not ResolutionSource.CREATED


class WorkspaceResolver:
    """Finds or creates the workspace for a change context."""

    def __init__(
        self,
        config: WorkspaceConfig,
        lookup: IWorkspaceLookup,
        create: IWorkspaceCreator,
    ) -> None:
        self._config = config
        self._lookup = lookup
        self._create = create

    @traced("workspace.resolve")
    async def resolve(self, ctx: ChangeContext, *, strict: bool | None = None) -> ResolvedWorkspace:
        """Resolve the workspace for `ctx`.

        Args:
            ctx: Change context; repo and change are required.
            strict: Override the configured strict-name mode.

        Returns:
            The reused, adopted or created workspace.

        Raises:
            ValidationException: If the context lacks repo or change.
            WorkspaceConflictError: Strict mode conflict with no visible
                workspace, or a second conflict after the unique-name retry.
            CoderApiError: Any other create failure.
        """
        ctx.validate()
        strict = self._config.strict_name if strict is None else strict
        request = build_create_request(ctx, self._config)
        if strict:
            resolved = await self._create_strict(request)
        else:
            resolved = await self._reuse(ctx) or await self._create_or_adopt(request)
        add_span_attributes(
            **{"workspace.name": resolved.workspace.name, "workspace.source": resolved.source.value}
        )
        return resolved

    async def _reuse(self, ctx: ChangeContext) -> ResolvedWorkspace | None:
        names = compute_candidate_names(ctx, self._config)
        existing = await self._lookup.find_first(names)
        if existing is None and not ctx.branch:
            # Branch unknown: legacy names may carry a branch suffix we cannot render
            existing = await self._lookup.prefix_search(names)
        if existing is None:
            return None
        return ResolvedWorkspace(existing, ResolutionSource.REUSED)

    async def _create_or_adopt(self, request: CreateWorkspaceRequest) -> ResolvedWorkspace:
        try:
            created = await self._create(request)
        except WorkspaceConflictError:
            logger.warning("Workspace %s already exists; trying to adopt it", request.name)
        else:
            return ResolvedWorkspace(created, ResolutionSource.CREATED)

        existing = await self._lookup.lookup_by_name(request.name)
        if existing is not None:
            return ResolvedWorkspace(existing, ResolutionSource.ADOPTED)

        unique = generate_unique_name(request.name)
        logger.info(
            "Existing workspace %s is not visible; retrying create as %s", request.name, unique
        )
        created = await self._create(request.with_name(unique))
        return ResolvedWorkspace(created, ResolutionSource.CREATED)

    async def _create_strict(self, request: CreateWorkspaceRequest) -> ResolvedWorkspace:
        try:
            created = await self._create(request)
        except WorkspaceConflictError:
            existing = await self._lookup.lookup_by_name(request.name)
            if existing is None:
                logger.warning(
                    "Strict name %s is taken and the existing workspace is not visible",
                    request.name,
                )
                raise
            return ResolvedWorkspace(existing, ResolutionSource.ADOPTED)
        return ResolvedWorkspace(created, ResolutionSource.CREATED)
