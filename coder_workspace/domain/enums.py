"""Domain enumerations for the Coder workspace service.

Enums represent fixed sets of domain values (e.g. deletion outcome).
"""

from enum import Enum


class DeletionOutcome(str, Enum):
    """Terminal state of a successful workspace deletion.

    HARD means a delete route accepted the request. SOFT means the workspace
    was marked dormant and/or given a short TTL and will expire on its own.
    """

    HARD = "hard"
    SOFT = "soft"


class ResolutionSource(str, Enum):
    """How the open action obtained its workspace."""

    BINDING = "binding"
    REUSED = "reused"
    ADOPTED = "adopted"
    CREATED = "created"


class BindingScope(str, Enum):
    """Which "last opened" slot a binding is kept in.

    SESSION is the caller's most recent open. CONTEXT and CHANGE remember the
    last workspace per repository/branch and per change/patchset.
    """

    SESSION = "session"
    CONTEXT = "context"
    CHANGE = "change"
