"""Coder REST API integration: transport, lookup, create and delete."""

from coder_workspace.infrastructure.coder._rest_client import CoderRESTClient
from coder_workspace.infrastructure.coder.deletion import WorkspaceDeleter
from coder_workspace.infrastructure.coder.lookup import WorkspaceLookup
from coder_workspace.infrastructure.coder.workspaces import create_workspace

__all__ = [
    "CoderRESTClient",
    "WorkspaceDeleter",
    "WorkspaceLookup",
    "create_workspace",
]
