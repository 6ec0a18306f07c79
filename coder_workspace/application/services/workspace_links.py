"""Final URL for an opened workspace."""

from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from coder_workspace.domain.entities import WorkspaceRecord
from coder_workspace.domain.value_objects import WorkspaceConfig


def deep_link(workspace: WorkspaceRecord, config: WorkspaceConfig) -> str:
    """Dashboard link `{base}/@{owner}/{name}`, pointing at the app when a slug is set."""
    owner = workspace.owner_name or config.user_segment
    url = f"{config.base_url}/@{quote(owner, safe='')}/{quote(workspace.name, safe='')}"
    if config.app_slug:
        url += f"/apps/{quote(config.app_slug, safe='')}/"
    return url


def with_token(url: str, config: WorkspaceConfig) -> str:
    """Add the session token as a query parameter, replacing any existing value."""
    parts = urlsplit(url)
    query = [
        (k, v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
        if k != config.api_key_query_param_name
    ]
    query.append((config.api_key_query_param_name, config.api_key))
    return urlunsplit(parts._replace(query=urlencode(query)))


def build_workspace_url(workspace: WorkspaceRecord, config: WorkspaceConfig) -> str:
    """App URI when the workspace reports one, else the dashboard deep link.

    Never carries the API key; this is the URL that gets bound and cached.
    """
    return workspace.app_uri or deep_link(workspace, config)


def url_to_open(url: str, config: WorkspaceConfig) -> str:
    """The URL handed to the caller: with the token appended when configured."""
    if config.append_token_to_app_url and config.api_key:
        return with_token(url, config)
    return url
