"""Workspace name rendering.

Coder workspace names must be DNS-label safe: lowercase letters, digits,
'.', '_' and '-', starting with a letter or digit, at most 63 characters.
Rendering substitutes context tokens into a template and then sanitizes the
result so any template and any context produce a valid name.
"""

import re

from coder_workspace.core.constants import WORKSPACE_NAME_MAX_LENGTH
from coder_workspace.domain.entities import ChangeContext
from coder_workspace.shared.utils.datetime import epoch_ms

NAME_TOKENS = ("repo", "branch", "branchShort", "change", "patchset")

_TOKEN_RE = re.compile(r"\{(" + "|".join(NAME_TOKENS) + r")\}")
_DISALLOWED_RE = re.compile(r"[^a-z0-9._-]+")
_SEPARATOR_RUN_RE = re.compile(r"([-.])[-.]+")
_EDGE_SEPARATORS = "-."
_STAMP_LENGTH = 6


def _timestamp_name() -> str:
    return f"workspace-{epoch_ms()}"


def sanitize_name(raw: str, *, fallback: bool = True) -> str:
    """Normalize an arbitrary string into a valid workspace name.

    Args:
        raw: Candidate name, possibly with disallowed characters.
        fallback: When the result would be empty, return a timestamp-derived
            name (True) or the empty string (False).

    Returns:
        A valid workspace name, or "" when fallback is False and nothing
        usable remains.
    """
    name = _DISALLOWED_RE.sub("-", raw.lower())
    name = _SEPARATOR_RUN_RE.sub(r"\1", name)
    name = name.strip(_EDGE_SEPARATORS)
    if not name:
        return _timestamp_name() if fallback else ""
    if not name[0].isalnum():
        # '_' is allowed inside a name but cannot lead it
        name = f"w-{name}".strip(_EDGE_SEPARATORS)
    name = name[:WORKSPACE_NAME_MAX_LENGTH].rstrip(_EDGE_SEPARATORS)
    if not name:
        return _timestamp_name() if fallback else ""
    return name


def render_name_template(template: str, ctx: ChangeContext, *, fallback: bool = True) -> str:
    """Render a name template against a change context.

    Recognized tokens are {repo}, {branch}, {branchShort}, {change} and
    {patchset}; a missing value renders as "". Any other {token} is left in
    place and then sanitized like the rest of the text.

    Rendering is deterministic except when the sanitized result is empty
    and fallback is enabled, in which case "workspace-<epoch ms>" is returned.
    """
    values = ctx.values()
    rendered = _TOKEN_RE.sub(lambda m: values.get(m.group(1), ""), template or "")
    return sanitize_name(rendered, fallback=fallback)


def _base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while value:
        value, rem = divmod(value, 36)
        out = digits[rem] + out
    return out or "0"


def generate_unique_name(base: str) -> str:
    """Append a short time-derived stamp to a (sanitized) base name.

    The base is truncated so the stamp always fits inside the name limit.
    Used once after a create conflict whose existing workspace is not visible.
    """
    stamp = _base36(epoch_ms())[-_STAMP_LENGTH:]
    head = sanitize_name(base, fallback=False) or "workspace"
    head = head[: WORKSPACE_NAME_MAX_LENGTH - len(stamp) - 1].rstrip(_EDGE_SEPARATORS)
    return sanitize_name(f"{head}-{stamp}")
