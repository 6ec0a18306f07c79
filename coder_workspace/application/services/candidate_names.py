"""Candidate workspace names for reuse lookup, in priority order."""

from coder_workspace.application.services.name_template_renderer import render_name_template
from coder_workspace.application.services.template_selection import pick_template
from coder_workspace.core.constants import (
    BRANCHLESS_NAME_TEMPLATE,
    DEFAULT_ALTERNATE_NAME_TEMPLATES,
)
from coder_workspace.domain.entities import ChangeContext
from coder_workspace.domain.value_objects import WorkspaceConfig


def compute_candidate_names(ctx: ChangeContext, config: WorkspaceConfig) -> list[str]:
    """Return deduplicated candidate names, highest priority first.

    1. The primary name (mapping template, else the global template).
    2. Lookup-only alternates; {repo}.{branchShort} when none are configured.
    3. {repo}-{change} when the branch is unknown.

    Only the primary falls back to a timestamp name; alternates that render
    to nothing are dropped.
    """
    primary = render_name_template(pick_template(ctx, config).workspace_name_template, ctx)
    names = [primary]
    alternates = config.alternate_name_templates or DEFAULT_ALTERNATE_NAME_TEMPLATES
    for template in alternates:
        names.append(render_name_template(template, ctx, fallback=False))
    if not ctx.branch:
        names.append(render_name_template(BRANCHLESS_NAME_TEMPLATE, ctx, fallback=False))
    return list(dict.fromkeys(name for name in names if name))
