"""Domain value objects for the Coder workspace service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from coder_workspace.domain.exceptions import ValidationException

# Context fields a rich parameter (or name template token) may read from.
CONTEXT_SOURCES = frozenset(
    {
        "repo", "branch", "branchShort", "change", "patchset",
        "url", "gitHttpUrl", "gitSshUrl", "changeRef",
    }
)

DEFAULT_WORKSPACE_NAME_TEMPLATE = "{repo}-{change}-{patchset}"


@dataclass(frozen=True)
class RichParam:
    """Template rich parameter whose value is read from one ChangeContext field.

    An unknown source is a configuration error, raised at construction so a
    bad setting never reaches the request path.
    """

    name: str
    source: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationException("Rich parameter is missing 'name'", field="rich_params")
        if self.source not in CONTEXT_SOURCES:
            allowed = ",".join(sorted(CONTEXT_SOURCES))
            raise ValidationException(
                f"Invalid rich parameter source field: {self.source!r} (allowed: {allowed})",
                field="rich_params",
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RichParam":
        """Build from a mapping entry such as {"name": "REPO", "from": "repo"}."""
        return cls(name=str(data.get("name") or ""), source=str(data.get("from") or data.get("source") or ""))


DEFAULT_RICH_PARAMS: tuple[RichParam, ...] = (
    RichParam("REPO", "repo"),
    RichParam("BRANCH", "branch"),
    RichParam("GERRIT_CHANGE", "change"),
    RichParam("GERRIT_PATCHSET", "patchset"),
    RichParam("GERRIT_CHANGE_URL", "url"),
    RichParam("GERRIT_GIT_HTTP_URL", "gitHttpUrl"),
    RichParam("GERRIT_GIT_SSH_URL", "gitSshUrl"),
    RichParam("GERRIT_CHANGE_REF", "changeRef"),
)


@dataclass(frozen=True)
class TemplateMapping:
    """Per repository/branch template selection. First matching mapping wins.

    repo and branch are glob patterns where '*' is the only wildcard; an empty
    pattern matches everything.
    """

    ALLOWED_KEYS: ClassVar[frozenset[str]] = frozenset(
        {
            "repo",
            "branch",
            "templateId",
            "templateVersionId",
            "templateVersionPresetId",
            "workspaceNameTemplate",
            "richParams",
        }
    )

    repo: str = "*"
    branch: str = "*"
    template_id: str = ""
    template_version_id: str = ""
    template_version_preset_id: str = ""
    workspace_name_template: str = ""
    rich_params: tuple[RichParam, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int = 0) -> "TemplateMapping":
        """Build from a JSON mapping entry (camelCase keys).

        Raises:
            ValidationException: On unknown keys or malformed rich parameters.
        """
        if not isinstance(data, dict):
            raise ValidationException(
                f"Entry #{index + 1} must be an object", field="template_mappings"
            )
        unknown = set(data) - cls.ALLOWED_KEYS
        if unknown:
            raise ValidationException(
                f"Entry #{index + 1} contains unknown key '{sorted(unknown)[0]}'",
                field="template_mappings",
            )
        raw_params = data.get("richParams") or []
        if not isinstance(raw_params, list):
            raise ValidationException(
                f"Entry #{index + 1} richParams must be an array", field="template_mappings"
            )
        return cls(
            repo=data.get("repo") or "*",
            branch=data.get("branch") or "*",
            template_id=data.get("templateId") or "",
            template_version_id=data.get("templateVersionId") or "",
            template_version_preset_id=data.get("templateVersionPresetId") or "",
            workspace_name_template=data.get("workspaceNameTemplate") or "",
            rich_params=tuple(RichParam.from_dict(p) for p in raw_params),
        )


@dataclass(frozen=True)
class WorkspaceConfig:
    """Immutable configuration value passed into every resolution component.

    Built from Settings once per request so cascades never read shared
    module state.
    """

    server_url: str = ""
    api_key: str = field(default="", repr=False)
    organization: str = ""
    user: str = "me"
    template_id: str = ""
    template_version_id: str = ""
    template_version_preset_id: str = ""
    workspace_name_template: str = DEFAULT_WORKSPACE_NAME_TEMPLATE
    alternate_name_templates: tuple[str, ...] = ()
    rich_params: tuple[RichParam, ...] = DEFAULT_RICH_PARAMS
    template_mappings: tuple[TemplateMapping, ...] = ()
    ttl_ms: int = 0
    automatic_updates: str = "always"
    strict_name: bool = False
    app_slug: str = ""
    wait_for_app_ready_ms: int = 0
    wait_poll_interval_ms: int = 1000
    retry_auth_with_query_param: bool = True
    api_key_query_param_name: str = "coder_session_token"
    append_token_to_app_url: bool = False

    @property
    def base_url(self) -> str:
        """Server URL without a trailing slash."""
        return self.server_url.rstrip("/")

    @property
    def user_segment(self) -> str:
        return self.user or "me"


@dataclass(frozen=True)
class CreateWorkspaceRequest:
    """Body of a workspace create call.

    Exactly one of template_version_id / template_id is sent, the version id
    taking precedence.
    """

    name: str
    template_id: str = ""
    template_version_id: str = ""
    template_version_preset_id: str = ""
    rich_parameter_values: tuple[tuple[str, str], ...] = ()
    ttl_ms: int = 0
    automatic_updates: str = "always"

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body for POST .../workspaces."""
        body: dict[str, Any] = {
            "name": self.name,
            "automatic_updates": self.automatic_updates,
            "rich_parameter_values": [
                {"name": name, "value": value} for name, value in self.rich_parameter_values
            ],
            "ttl_ms": self.ttl_ms,
        }
        if self.template_version_id:
            body["template_version_id"] = self.template_version_id
        elif self.template_id:
            body["template_id"] = self.template_id
        if self.template_version_preset_id:
            body["template_version_preset_id"] = self.template_version_preset_id
        return body

    def with_name(self, name: str) -> "CreateWorkspaceRequest":
        return replace(self, name=name)
