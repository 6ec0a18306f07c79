"""Context binding entity.

The most recent association between a change context and the workspace
opened for it. A cache, not a source of truth: callers revalidate the
workspace before trusting the stored URL.
"""

from dataclasses import asdict, dataclass
from typing import Any

from coder_workspace.domain.entities.change_context import ChangeContext
from coder_workspace.domain.entities.workspace import WorkspaceRecord


@dataclass(frozen=True)
class BindingMeta:
    """Context and workspace identity stored next to the bound URL."""

    repo: str = ""
    branch: str = ""
    change: str = ""
    patchset: str = ""
    workspace_name: str = ""
    workspace_owner: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BindingMeta":
        known = cls.__dataclass_fields__
        return cls(**{k: str(v or "") for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def context(self) -> ChangeContext:
        """The change context this binding was made for."""
        return ChangeContext(
            repo=self.repo, branch=self.branch, change=self.change, patchset=self.patchset
        )


@dataclass(frozen=True)
class ContextBinding:
    """URL plus metadata for the single active binding of a caller session."""

    url: str
    meta: BindingMeta

    @classmethod
    def for_workspace(
        cls, ctx: ChangeContext, workspace: WorkspaceRecord, url: str
    ) -> "ContextBinding":
        """Bind a resolved workspace to the context it was opened for."""
        return cls(
            url=url,
            meta=BindingMeta(
                repo=ctx.repo,
                branch=ctx.branch,
                change=ctx.change,
                patchset=ctx.patchset,
                workspace_name=workspace.name,
                workspace_owner=workspace.owner_name,
            ),
        )

    def matches(self, ctx: ChangeContext) -> bool:
        """Return True when the binding was made for exactly this context."""
        return (
            self.meta.repo == ctx.repo
            and self.meta.branch == ctx.branch
            and self.meta.change == ctx.change
            and self.meta.patchset == ctx.patchset
        )
