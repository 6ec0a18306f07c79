"""Application services: name rendering, candidate names, template selection, readiness."""

from coder_workspace.application.services.candidate_names import compute_candidate_names
from coder_workspace.application.services.inflight import InFlightOperations
from coder_workspace.application.services.name_template_renderer import (
    generate_unique_name,
    render_name_template,
    sanitize_name,
)
from coder_workspace.application.services.readiness_poller import wait_for_ready
from coder_workspace.application.services.template_selection import (
    build_create_request,
    match_glob,
    pick_template,
)
from coder_workspace.application.services.workspace_links import build_workspace_url

__all__ = [
    "InFlightOperations",
    "build_create_request",
    "build_workspace_url",
    "compute_candidate_names",
    "generate_unique_name",
    "match_glob",
    "pick_template",
    "render_name_template",
    "sanitize_name",
    "wait_for_ready",
]
