"""Workspace API schemas.

Request bodies accept the host's camelCase field names (branchShort,
gitHttpUrl, gitSshUrl, changeRef) as well as snake_case. changeRef is derived
from change and patchset when omitted.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from coder_workspace.domain.entities import BindingMeta, ChangeContext, ContextBinding
from coder_workspace.domain.enums import DeletionOutcome, ResolutionSource


class ChangeContextRequest(BaseModel):
    """Change context supplied by the review host.

    Either repo and change are given directly, or url points at a change
    (/c/<project>/+/<change>/<patchset>) and the missing fields are parsed
    from it. Numeric change/patchset values are accepted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    repo: str = Field(default="", max_length=512)
    branch: str = Field(default="", max_length=512)
    branch_short: str = Field(default="", max_length=512)
    change: str = Field(default="", max_length=32)
    patchset: str = Field(default="", max_length=32)
    url: str = Field(default="", max_length=2048)
    git_http_url: str = Field(default="", max_length=2048)
    git_ssh_url: str = Field(default="", max_length=2048)
    change_ref: str = Field(default="", max_length=256)

    def to_context(self) -> ChangeContext:
        """Build the domain context, filling repo/change/patchset from url when absent."""
        repo, change, patchset = self.repo, self.change, self.patchset
        if self.url and (not repo or not change):
            parsed = ChangeContext.from_change_url(self.url)
            repo = repo or parsed.repo
            change = change or parsed.change
            patchset = patchset or parsed.patchset
        return ChangeContext(
            repo=repo.strip(),
            branch=self.branch.strip(),
            branch_short=self.branch_short.strip(),
            change=change.strip(),
            patchset=patchset.strip(),
            url=self.url,
            git_http_url=self.git_http_url,
            git_ssh_url=self.git_ssh_url,
            change_ref=self.change_ref,
        )


class OpenWorkspaceRequest(ChangeContextRequest):
    """Request body for POST /workspaces/open."""

    strict_name: bool | None = Field(
        default=None, description="Override the configured strict-name mode"
    )


class OpenWorkspaceResponse(BaseModel):
    """URL to open and how the workspace was obtained."""

    url: str
    workspace_name: str
    workspace_owner: str
    source: ResolutionSource
    reused: bool
    from_binding: bool


class PreviewResponse(BaseModel):
    """Create request that open would send (dry run)."""

    url: str
    body: dict[str, Any]


class BindingMetaResponse(BaseModel):
    repo: str
    branch: str
    change: str
    patchset: str
    workspace_name: str
    workspace_owner: str

    @classmethod
    def from_meta(cls, meta: BindingMeta) -> "BindingMetaResponse":
        return cls(**meta.to_dict())


class BindingResponse(BaseModel):
    """Current session binding."""

    url: str
    meta: BindingMetaResponse

    @classmethod
    def from_binding(cls, binding: ContextBinding) -> "BindingResponse":
        return cls(url=binding.url, meta=BindingMetaResponse.from_meta(binding.meta))


class DeleteWorkspaceResponse(BaseModel):
    """Outcome of a delete: hard (removed) or soft (dormant, short TTL)."""

    workspace_name: str
    outcome: DeletionOutcome
