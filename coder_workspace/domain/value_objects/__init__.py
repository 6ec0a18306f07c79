"""Domain value objects and shared value types."""

from coder_workspace.domain.value_objects.core import (
    CONTEXT_SOURCES,
    CreateWorkspaceRequest,
    DEFAULT_RICH_PARAMS,
    DEFAULT_WORKSPACE_NAME_TEMPLATE,
    RichParam,
    TemplateMapping,
    WorkspaceConfig,
)

__all__ = [
    "CONTEXT_SOURCES",
    "CreateWorkspaceRequest",
    "DEFAULT_RICH_PARAMS",
    "DEFAULT_WORKSPACE_NAME_TEMPLATE",
    "RichParam",
    "TemplateMapping",
    "WorkspaceConfig",
]
