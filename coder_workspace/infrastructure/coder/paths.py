"""Coder API path builders (relative to /api/v2).

Single place for endpoint shapes so lookup, create and delete candidates
stay in sync.
"""

from urllib.parse import quote

from coder_workspace.domain.value_objects import WorkspaceConfig


def _seg(value: str) -> str:
    return quote(value, safe="")


def workspaces() -> str:
    """Global workspace collection (search with ?q=)."""
    return "/workspaces"


def workspace_by_id(workspace_id: str, action: str = "") -> str:
    """Single workspace by id, optionally with an action suffix (dormant, ttl, delete)."""
    path = f"/workspaces/{_seg(workspace_id)}"
    return f"{path}/{action}" if action else path


def user_workspace(user: str, name: str) -> str:
    """Documented singular by-name resource."""
    return f"/users/{_seg(user)}/workspace/{_seg(name)}"


def user_workspaces(user: str, name: str = "") -> str:
    path = f"/users/{_seg(user)}/workspaces"
    return f"{path}/{_seg(name)}" if name else path


def member_workspace(organization: str, user: str, name: str) -> str:
    return f"/organizations/{_seg(organization)}/members/{_seg(user)}/workspace/{_seg(name)}"


def member_workspaces(organization: str, user: str, name: str = "") -> str:
    path = f"/organizations/{_seg(organization)}/members/{_seg(user)}/workspaces"
    return f"{path}/{_seg(name)}" if name else path


def global_workspace(name: str) -> str:
    """Non-scoped by-name resource served by some deployments."""
    return f"/workspace/{_seg(name)}"


def create_path(config: WorkspaceConfig) -> str:
    """Collection the create request is POSTed to (org-scoped when configured)."""
    if config.organization:
        return member_workspaces(config.organization, config.user_segment)
    return user_workspaces(config.user_segment)
