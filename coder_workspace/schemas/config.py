"""Public configuration API schemas."""

from pydantic import BaseModel, Field


class RichParamResponse(BaseModel):
    name: str
    source: str


class TemplateMappingResponse(BaseModel):
    repo: str
    branch: str
    template_id: str
    template_version_id: str
    template_version_preset_id: str
    workspace_name_template: str
    rich_params: list[RichParamResponse]


class ConfigResponse(BaseModel):
    """Response for GET /config. The API key itself is never returned."""

    server_url: str
    organization: str
    user: str
    api_key_configured: bool = Field(..., description="Whether a Coder session token is set")
    template_id: str
    template_version_id: str
    template_version_preset_id: str
    workspace_name_template: str
    alternate_name_templates: list[str]
    rich_params: list[RichParamResponse]
    template_mappings: list[TemplateMappingResponse]
    ttl_ms: int
    automatic_updates: str
    strict_name: bool
    app_slug: str
    wait_for_app_ready_ms: int
    append_token_to_app_url: bool
    enable_clone_repository: bool
    enable_dry_run_preview: bool
