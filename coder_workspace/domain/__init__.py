"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from coder_workspace.domain.entities import (
    BindingMeta,
    ChangeContext,
    ContextBinding,
    WorkspaceRecord,
)
from coder_workspace.domain.enums import BindingScope, DeletionOutcome, ResolutionSource
from coder_workspace.domain.exceptions import (
    BindingNotFoundException,
    CoderWorkspaceException,
    ValidationException,
    WorkspaceNotFoundException,
)
from coder_workspace.domain.value_objects import (
    CreateWorkspaceRequest,
    RichParam,
    TemplateMapping,
    WorkspaceConfig,
)

__all__ = [
    # Entities
    "BindingMeta",
    "ChangeContext",
    "ContextBinding",
    "WorkspaceRecord",
    # Enums
    "BindingScope",
    "DeletionOutcome",
    "ResolutionSource",
    # Exceptions
    "BindingNotFoundException",
    "CoderWorkspaceException",
    "ValidationException",
    "WorkspaceNotFoundException",
    # Value objects
    "CreateWorkspaceRequest",
    "RichParam",
    "TemplateMapping",
    "WorkspaceConfig",
]
