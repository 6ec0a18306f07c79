"""Template selection and create request building.

A template mapping is chosen per repository/branch; the first mapping whose
globs both match wins. Template identifiers fall back field by field to the
global configuration.
"""

import re
from dataclasses import dataclass

from coder_workspace.domain.entities import ChangeContext
from coder_workspace.domain.value_objects import (
    CreateWorkspaceRequest,
    RichParam,
    TemplateMapping,
    WorkspaceConfig,
)
from coder_workspace.application.services.name_template_renderer import render_name_template


def match_glob(pattern: str, value: str) -> bool:
    """Anchored glob match where '*' is the only wildcard.

    An empty pattern or '*' matches everything, including an empty value.
    """
    if not pattern or pattern == "*":
        return True
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.fullmatch(regex, value or "") is not None


def find_mapping(ctx: ChangeContext, config: WorkspaceConfig) -> TemplateMapping | None:
    """Return the first mapping matching the context's repo and branch."""
    for mapping in config.template_mappings:
        if match_glob(mapping.repo, ctx.repo) and match_glob(mapping.branch, ctx.branch):
            return mapping
    return None


@dataclass(frozen=True)
class TemplateChoice:
    """Resolved template identifiers, name template and rich parameters for a context."""

    template_id: str
    template_version_id: str
    template_version_preset_id: str
    workspace_name_template: str
    rich_params: tuple[RichParam, ...]


def pick_template(ctx: ChangeContext, config: WorkspaceConfig) -> TemplateChoice:
    """Select template settings: mapping values first, global configuration second.

    The create body carries template_version_id when either source has one,
    so a mapping's version id beats its template id, which beats the global
    version id, which beats the global template id.
    """
    mapping = find_mapping(ctx, config)
    if mapping is None:
        return TemplateChoice(
            template_id=config.template_id,
            template_version_id=config.template_version_id,
            template_version_preset_id=config.template_version_preset_id,
            workspace_name_template=config.workspace_name_template,
            rich_params=config.rich_params,
        )
    if mapping.template_version_id:
        version_id, template_id = mapping.template_version_id, ""
    elif mapping.template_id:
        version_id, template_id = "", mapping.template_id
    else:
        version_id, template_id = config.template_version_id, config.template_id
    return TemplateChoice(
        template_id=template_id,
        template_version_id=version_id,
        template_version_preset_id=(
            mapping.template_version_preset_id or config.template_version_preset_id
        ),
        workspace_name_template=(
            mapping.workspace_name_template or config.workspace_name_template
        ),
        rich_params=mapping.rich_params or config.rich_params,
    )


def rich_parameter_values(
    ctx: ChangeContext, params: tuple[RichParam, ...]
) -> tuple[tuple[str, str], ...]:
    return tuple((p.name, ctx.value_for(p.source)) for p in params)


def build_create_request(ctx: ChangeContext, config: WorkspaceConfig) -> CreateWorkspaceRequest:
    """Build the create body for a context (name rendered from the chosen template)."""
    choice = pick_template(ctx, config)
    return CreateWorkspaceRequest(
        name=render_name_template(choice.workspace_name_template, ctx),
        template_id=choice.template_id,
        template_version_id=choice.template_version_id,
        template_version_preset_id=choice.template_version_preset_id,
        rich_parameter_values=rich_parameter_values(ctx, choice.rich_params),
        ttl_ms=config.ttl_ms,
        automatic_updates=config.automatic_updates,
    )
