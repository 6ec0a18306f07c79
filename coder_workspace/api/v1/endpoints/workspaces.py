"""Workspace API: thin routes delegating to the open and delete use cases."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from coder_workspace.api.v1.dependencies import (
    get_app_settings,
    get_binding_store,
    get_coder_client,
    get_delete_workspace_use_case,
    get_open_workspace_use_case,
    get_session_id,
    get_workspace_config,
)
from coder_workspace.application.services.template_selection import build_create_request
from coder_workspace.application.use_cases import (
    DeleteWorkspaceUseCase,
    OpenWorkspaceUseCase,
    current_binding,
)
from coder_workspace.core.config import Settings
from coder_workspace.domain.entities import ChangeContext
from coder_workspace.domain.enums import BindingScope
from coder_workspace.domain.exceptions import ValidationException
from coder_workspace.domain.value_objects import WorkspaceConfig
from coder_workspace.infrastructure.cache import ContextBindingStore
from coder_workspace.infrastructure.coder import CoderRESTClient, paths
from coder_workspace.schemas.workspace import (
    BindingResponse,
    ChangeContextRequest,
    DeleteWorkspaceResponse,
    OpenWorkspaceRequest,
    OpenWorkspaceResponse,
    PreviewResponse,
)

router = APIRouter()


@router.post("/open", response_model=OpenWorkspaceResponse)
async def open_workspace(
    body: OpenWorkspaceRequest,
    use_case: Annotated[OpenWorkspaceUseCase, Depends(get_open_workspace_use_case)],
    session_id: Annotated[str | None, Depends(get_session_id)],
):
    """Open the workspace for a change: bound, reused, adopted or newly created."""
    result = await use_case.execute(
        body.to_context(), session_id=session_id, strict=body.strict_name
    )
    return OpenWorkspaceResponse(
        url=result.url,
        workspace_name=result.workspace_name,
        workspace_owner=result.workspace_owner,
        source=result.source,
        reused=result.reused,
        from_binding=result.from_binding,
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_create_request(
    body: ChangeContextRequest,
    settings: Annotated[Settings, Depends(get_app_settings)],
    config: Annotated[WorkspaceConfig, Depends(get_workspace_config)],
    client: Annotated[CoderRESTClient, Depends(get_coder_client)],
):
    """Return the create request open would send, without sending it."""
    if not settings.enable_dry_run_preview:
        raise HTTPException(status_code=404, detail="Dry-run preview is disabled")
    ctx = body.to_context()
    ctx.validate()
    request = build_create_request(ctx, config)
    return PreviewResponse(url=client.url(paths.create_path(config)), body=request.to_payload())


@router.get("/last", response_model=BindingResponse)
async def get_last_workspace(
    bindings: Annotated[ContextBindingStore, Depends(get_binding_store)],
    session_id: Annotated[str | None, Depends(get_session_id)],
    scope: BindingScope = BindingScope.SESSION,
    repo: str = "",
    branch: str = "",
    change: str = "",
    patchset: str = "",
):
    """Return the workspace most recently opened in this session.

    scope=context narrows it to one repository/branch (repo, branch) and
    scope=change to one change/patchset (repo, change, patchset).
    """
    ctx = None
    if scope is not BindingScope.SESSION:
        ctx = ChangeContext(
            repo=repo.strip(),
            branch=branch.strip(),
            change=change.strip(),
            patchset=patchset.strip(),
        )
        if not ctx.repo:
            raise ValidationException("repo is required for a scoped lookup", field="repo")
        if scope is BindingScope.CHANGE and not ctx.change:
            raise ValidationException("change is required for scope=change", field="change")
    binding = await current_binding(bindings, session_id, scope, ctx)
    return BindingResponse.from_binding(binding)


@router.delete("/last", response_model=DeleteWorkspaceResponse)
async def delete_last_workspace(
    use_case: Annotated[DeleteWorkspaceUseCase, Depends(get_delete_workspace_use_case)],
    session_id: Annotated[str | None, Depends(get_session_id)],
):
    """Delete the workspace most recently opened in this session."""
    result = await use_case.delete_last(session_id)
    return DeleteWorkspaceResponse(workspace_name=result.workspace_name, outcome=result.outcome)


@router.delete("/{name}", response_model=DeleteWorkspaceResponse)
async def delete_workspace(
    name: str,
    use_case: Annotated[DeleteWorkspaceUseCase, Depends(get_delete_workspace_use_case)],
    session_id: Annotated[str | None, Depends(get_session_id)],
):
    """Delete a workspace by name (hard when possible, otherwise dormant with a short TTL)."""
    result = await use_case.delete_by_name(name, session_id)
    return DeleteWorkspaceResponse(workspace_name=result.workspace_name, outcome=result.outcome)
