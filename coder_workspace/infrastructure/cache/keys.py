"""Redis/memory keys for context bindings.

    coder-workspace:last-url[:<slot>][:<session>]
    coder-workspace:last-meta[:<slot>][:<session>]

Without a slot the key is the session's own "last opened" binding. Slots
name the per repository/branch and per change/patchset bindings; their
parts are percent-encoded so they never contain the separator. Without a
session id the keys address the shared global slot.
"""

from urllib.parse import quote

from coder_workspace.core.constants import (
    CACHE_KEY_LAST_META,
    CACHE_KEY_LAST_URL,
    CACHE_KEY_SEP,
    CACHE_PREFIX_BINDING,
)
from coder_workspace.domain.entities import ChangeContext
from coder_workspace.domain.enums import BindingScope


def scope_slot(scope: BindingScope, ctx: ChangeContext | None = None) -> str | None:
    """Slot name of `scope` for `ctx`; None for the session scope."""
    if scope is BindingScope.SESSION:
        return None
    ctx = ctx or ChangeContext()
    if scope is BindingScope.CONTEXT:
        parts = (ctx.repo, ctx.branch)
    else:
        parts = (ctx.repo, ctx.change, ctx.patchset)
    return f"{scope.value}={'|'.join(quote(p, safe='') for p in parts)}"


def _binding_key(kind: str, session_id: str | None, slot: str | None) -> str:
    parts = [CACHE_PREFIX_BINDING, kind]
    if slot:
        parts.append(slot)
    if session_id:
        if CACHE_KEY_SEP in session_id:
            raise ValueError(f"session id must not contain the key separator {CACHE_KEY_SEP!r}")
        parts.append(session_id)
    return CACHE_KEY_SEP.join(parts)


def binding_url_key(session_id: str | None = None, slot: str | None = None) -> str:
    return _binding_key(CACHE_KEY_LAST_URL, session_id, slot)


def binding_meta_key(session_id: str | None = None, slot: str | None = None) -> str:
    return _binding_key(CACHE_KEY_LAST_META, session_id, slot)
