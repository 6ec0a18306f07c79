"""Public configuration endpoint; mirrors what the review host needs to render its actions."""

from typing import Annotated

from fastapi import APIRouter, Depends

from coder_workspace.api.v1.dependencies import get_app_settings, get_workspace_config
from coder_workspace.core.config import Settings
from coder_workspace.domain.value_objects import WorkspaceConfig
from coder_workspace.schemas.config import (
    ConfigResponse,
    RichParamResponse,
    TemplateMappingResponse,
)

router = APIRouter()


@router.get("", response_model=ConfigResponse)
def get_config(
    settings: Annotated[Settings, Depends(get_app_settings)],
    config: Annotated[WorkspaceConfig, Depends(get_workspace_config)],
) -> ConfigResponse:
    """Return effective configuration. The API key is reported only as configured or not."""
    return ConfigResponse(
        server_url=config.server_url,
        organization=config.organization,
        user=config.user_segment,
        api_key_configured=bool(config.api_key),
        template_id=config.template_id,
        template_version_id=config.template_version_id,
        template_version_preset_id=config.template_version_preset_id,
        workspace_name_template=config.workspace_name_template,
        alternate_name_templates=list(config.alternate_name_templates),
        rich_params=[RichParamResponse(name=p.name, source=p.source) for p in config.rich_params],
        template_mappings=[
            TemplateMappingResponse(
                repo=m.repo,
                branch=m.branch,
                template_id=m.template_id,
                template_version_id=m.template_version_id,
                template_version_preset_id=m.template_version_preset_id,
                workspace_name_template=m.workspace_name_template,
                rich_params=[
                    RichParamResponse(name=p.name, source=p.source) for p in m.rich_params
                ],
            )
            for m in config.template_mappings
        ],
        ttl_ms=config.ttl_ms,
        automatic_updates=config.automatic_updates,
        strict_name=config.strict_name,
        app_slug=config.app_slug,
        wait_for_app_ready_ms=config.wait_for_app_ready_ms,
        append_token_to_app_url=config.append_token_to_app_url,
        enable_clone_repository=settings.enable_clone_repository,
        enable_dry_run_preview=settings.enable_dry_run_preview,
    )
