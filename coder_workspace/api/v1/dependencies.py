"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the Coder client and the workspace use cases.
All collaborators are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

import re
from collections.abc import AsyncGenerator
from functools import partial
from typing import Annotated

from fastapi import Depends, Request

from coder_workspace.application.use_cases.delete_workspace import DeleteWorkspaceUseCase
from coder_workspace.application.use_cases.open_workspace import OpenWorkspaceUseCase
from coder_workspace.application.use_cases.resolve_workspace import WorkspaceResolver
from coder_workspace.core.config import Settings, get_settings
from coder_workspace.domain.exceptions import ValidationException
from coder_workspace.domain.value_objects import WorkspaceConfig
from coder_workspace.infrastructure.cache import ContextBindingStore
from coder_workspace.infrastructure.coder import (
    CoderRESTClient,
    WorkspaceDeleter,
    WorkspaceLookup,
    create_workspace,
)

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")


def get_app_settings() -> Settings:
    return get_settings()


def get_workspace_config(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> WorkspaceConfig:
    """Immutable Coder configuration for this request."""
    return settings.workspace_config()


def get_session_id(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str | None:
    """Caller session from the session header; None selects the shared slot.

    Raises:
        ValidationException: If the header value is not a safe key component.
    """
    raw = request.headers.get(settings.session_header_name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    if not _SESSION_ID_PATTERN.match(value):
        raise ValidationException("Invalid session id header", field=settings.session_header_name)
    return value


async def get_coder_client(
    request: Request,
    config: Annotated[WorkspaceConfig, Depends(get_workspace_config)],
) -> AsyncGenerator[CoderRESTClient, None]:
    """Coder client over the app's shared HTTP client (falls back to a private one).

    Raises:
        ValidationException: If CODER_SERVER_URL is not configured.
    """
    if not config.server_url:
        raise ValidationException("CODER_SERVER_URL is not configured", field="coder_server_url")
    client = CoderRESTClient(
        config, http_client=getattr(request.app.state, "coder_http_client", None)
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_workspace_lookup(
    client: Annotated[CoderRESTClient, Depends(get_coder_client)],
) -> WorkspaceLookup:
    return WorkspaceLookup(client)


def get_binding_store(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ContextBindingStore:
    return ContextBindingStore(request.app.state.cache, settings.binding_ttl_seconds)


def get_open_workspace_use_case(
    request: Request,
    config: Annotated[WorkspaceConfig, Depends(get_workspace_config)],
    client: Annotated[CoderRESTClient, Depends(get_coder_client)],
    lookup: Annotated[WorkspaceLookup, Depends(get_workspace_lookup)],
    bindings: Annotated[ContextBindingStore, Depends(get_binding_store)],
) -> OpenWorkspaceUseCase:
    resolver = WorkspaceResolver(config, lookup, partial(create_workspace, client))
    return OpenWorkspaceUseCase(
        config,
        resolver,
        lookup,
        bindings,
        inflight=getattr(request.app.state, "inflight", None),
    )


def get_delete_workspace_use_case(
    client: Annotated[CoderRESTClient, Depends(get_coder_client)],
    lookup: Annotated[WorkspaceLookup, Depends(get_workspace_lookup)],
    bindings: Annotated[ContextBindingStore, Depends(get_binding_store)],
) -> DeleteWorkspaceUseCase:
    return DeleteWorkspaceUseCase(WorkspaceDeleter(client, lookup), bindings)
