"""Open workspace use case.

Order of preference for a change context:
1. the session's cached binding, when it was made for this exact context and
   the workspace still exists;
2. reuse / create through the resolver, then an optional bounded wait for the
   workspace app to come up.
The resulting URL is bound to the session for the next open and for delete,
and recorded as the last workspace of its repository/branch and of its
change/patchset. The bound URL never carries the API key; it is appended
only to the URL returned to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from coder_workspace.application.interfaces.services import (
    IBindingStore,
    IWorkspaceLookup,
    IWorkspaceResolver,
)
from coder_workspace.application.services.inflight import InFlightOperations
from coder_workspace.application.services.readiness_poller import wait_for_ready
from coder_workspace.application.services.workspace_links import build_workspace_url, url_to_open
from coder_workspace.application.use_cases.resolve_workspace import ResolvedWorkspace
from coder_workspace.domain.entities import ChangeContext, ContextBinding
from coder_workspace.domain.enums import BindingScope, ResolutionSource
from coder_workspace.domain.exceptions import BindingNotFoundException
from coder_workspace.domain.value_objects import WorkspaceConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenResult:
    """URL to open plus the workspace identity and how it was found."""

    url: str
    workspace_name: str
    workspace_owner: str
    source: ResolutionSource

    @property
    def reused(self) -> bool:
        return self.source is not ResolutionSource.CREATED

    @property
    def from_binding(self) -> bool:
        return self.source is ResolutionSource.BINDING


class OpenWorkspaceUseCase:
    """Opens (reusing, adopting or creating) the workspace for a change context."""

    def __init__(
        self,
        config: WorkspaceConfig,
        resolver: IWorkspaceResolver,
        lookup: IWorkspaceLookup,
        bindings: IBindingStore,
        inflight: InFlightOperations | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._lookup = lookup
        self._bindings = bindings
        self._inflight = inflight if inflight is not None else InFlightOperations()

    async def execute(
        self,
        ctx: ChangeContext,
        *,
        session_id: str | None = None,
        strict: bool | None = None,
    ) -> OpenResult:
        """Return the URL of the workspace for `ctx`, binding it to the session.

        Concurrent opens of the same context share one resolution, so two
        clicks never create two workspaces.

        Raises:
            ValidationException: If the context lacks repo or change.
            CoderApiError: If the create call fails.
        """
        ctx.validate()
        bound = await self._open_from_binding(ctx, session_id)
        if bound is not None:
            return bound

        strict = self._config.strict_name if strict is None else strict
        key = ctx.fingerprint() + ("##strict" if strict else "")
        resolved = await self._inflight.run(key, lambda: self._resolve_ready(ctx, strict))
        workspace = resolved.workspace
        url = build_workspace_url(workspace, self._config)
        binding = ContextBinding.for_workspace(ctx, workspace, url)
        for scope in BindingScope:
            await self._bindings.save(binding, session_id, scope)
        logger.info(
            "Opening workspace %s (%s) for %s change %s",
            workspace.name,
            resolved.source.value,
            ctx.repo,
            ctx.change,
        )
        return OpenResult(
            url=url_to_open(url, self._config),
            workspace_name=workspace.name,
            workspace_owner=workspace.owner_name,
            source=resolved.source,
        )

    async def _open_from_binding(
        self, ctx: ChangeContext, session_id: str | None
    ) -> OpenResult | None:
        binding = await self._bindings.load(session_id)
        if binding is None or not binding.matches(ctx):
            return None
        name = binding.meta.workspace_name
        workspace = await self._lookup.lookup_by_name(name) if name else None
        if workspace is None:
            logger.info("Bound workspace %s no longer exists; clearing binding", name)
            await self._bindings.clear(session_id)
            return None
        return OpenResult(
            url=url_to_open(binding.url, self._config),
            workspace_name=workspace.name,
            workspace_owner=workspace.owner_name or binding.meta.workspace_owner,
            source=ResolutionSource.BINDING,
        )

    async def _resolve_ready(self, ctx: ChangeContext, strict: bool) -> ResolvedWorkspace:
        resolved = await self._resolver.resolve(ctx, strict=strict)
        timeout_ms = self._config.wait_for_app_ready_ms
        if timeout_ms <= 0 or resolved.workspace.is_ready():
            return resolved
        ready = await wait_for_ready(
            self._lookup.lookup_by_name,
            resolved.workspace.name,
            timeout_ms,
            self._config.wait_poll_interval_ms,
            seed=resolved.workspace,
        )
        return replace(resolved, workspace=ready or resolved.workspace)


async def current_binding(
    bindings: IBindingStore,
    session_id: str | None = None,
    scope: BindingScope = BindingScope.SESSION,
    ctx: ChangeContext | None = None,
) -> ContextBinding:
    """Return the binding of a "last opened" slot.

    The session scope is the session's most recent open; the context and
    change scopes are the most recent open for `ctx`'s repository/branch or
    change/patchset.

    Raises:
        BindingNotFoundException: If nothing is bound.
    """
    binding = await bindings.load(session_id, scope, ctx)
    if binding is None:
        raise BindingNotFoundException()
    return binding
