"""Change context entity.

Identifies what a workspace is provisioned for: repository, branch, change
number and patchset of a code review. Built by the host per UI action.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote

from coder_workspace.domain.exceptions import ValidationException

# /c/<project>/+/<change>[/<patchset>]
_CHANGE_URL_RE = re.compile(r"/c/(.+?)/\+/(\d+)(?:/(\d+))?")


def change_ref_for(change: str, patchset: str) -> str:
    """Gerrit ref of a patchset: refs/changes/<last two digits>/<change>/<patchset>.

    Empty unless both the change number and the patchset are known.
    """
    if not change.isdigit() or not patchset:
        return ""
    return f"refs/changes/{int(change) % 100:02d}/{change}/{patchset}"


def short_branch(branch: str) -> str:
    """Return the last path segment of a branch ref ('refs/heads/feature/foo' -> 'foo')."""
    return branch.rstrip("/").rsplit("/", 1)[-1] if branch else ""


@dataclass(frozen=True)
class ChangeContext:
    """Immutable change context for one resolution attempt.

    repo and change are required for open; branch and patchset may be empty,
    in which case resolution falls back to degraded matching.
    """

    repo: str = ""
    branch: str = ""
    branch_short: str = ""
    change: str = ""
    patchset: str = ""
    url: str = ""
    git_http_url: str = ""
    git_ssh_url: str = ""
    change_ref: str = ""

    def __post_init__(self) -> None:
        if self.branch and not self.branch_short:
            object.__setattr__(self, "branch_short", short_branch(self.branch))
        if not self.change_ref:
            object.__setattr__(self, "change_ref", change_ref_for(self.change, self.patchset))

    @classmethod
    def from_change_url(cls, url: str, branch: str = "") -> "ChangeContext":
        """Parse a review URL of the form /c/<project>/+/<change>/<patchset>.

        Raises:
            ValidationException: If the URL does not point at a change.
        """
        match = _CHANGE_URL_RE.search(url or "")
        if not match:
            raise ValidationException(f"Not a change URL: {url}", field="url")
        return cls(
            repo=unquote(match.group(1)),
            branch=branch,
            change=match.group(2),
            patchset=match.group(3) or "",
            url=url,
        )

    def validate(self) -> None:
        """Raise ValidationException unless repo and change are present."""
        if not self.repo.strip():
            raise ValidationException("Change context is missing 'repo'", field="repo")
        if not self.change.strip():
            raise ValidationException("Change context is missing 'change'", field="change")

    def values(self) -> dict[str, str]:
        """Field values keyed by their template/rich-parameter source name."""
        return {
            "repo": self.repo,
            "branch": self.branch,
            "branchShort": self.branch_short,
            "change": self.change,
            "patchset": self.patchset,
            "url": self.url,
            "gitHttpUrl": self.git_http_url,
            "gitSshUrl": self.git_ssh_url,
            "changeRef": self.change_ref,
        }

    def value_for(self, source: str) -> str:
        return self.values().get(source, "")

    def fingerprint(self) -> str:
        """Normalized key identifying this context (repo, branch, change, patchset)."""
        return "||".join(
            part.strip().lower() for part in (self.repo, self.branch, self.change, self.patchset)
        )
