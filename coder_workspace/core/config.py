"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The Coder connection and workspace naming settings are
validated at load time and exposed to the resolution components as an
immutable WorkspaceConfig.
"""

import json
import logging
import re
from functools import lru_cache
from typing import Any
from urllib.parse import urlparse

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coder_workspace.core.constants import CLONE_RICH_PARAM_NAMES
from coder_workspace.domain.value_objects import (
    DEFAULT_RICH_PARAMS,
    DEFAULT_WORKSPACE_NAME_TEMPLATE,
    RichParam,
    TemplateMapping,
    WorkspaceConfig,
)

logger = logging.getLogger(__name__)

_TEMPLATE_TOKEN_RE = re.compile(r"\{([^{}]*)\}")
_KNOWN_NAME_TOKENS = frozenset({"repo", "branch", "branchShort", "change", "patchset"})


def _load_json(raw: str, setting: str) -> Any:
    """Parse a JSON setting; malformed input is logged and treated as unset."""
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("Ignoring malformed JSON in %s: %s", setting, e)
        return None


def parse_name_templates(raw: str) -> tuple[str, ...]:
    """Parse alternate name templates given as a JSON array or comma-separated list."""
    raw = (raw or "").strip()
    if not raw:
        return ()
    if raw.startswith("["):
        data = _load_json(raw, "alternate_name_templates")
        if not isinstance(data, list):
            return ()
        return tuple(str(t).strip() for t in data if str(t).strip())
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def parse_rich_params(raw: str) -> tuple[RichParam, ...]:
    """Parse `NAME:source` pairs separated by commas.

    Raises:
        ValidationException: On a missing name or an unknown source field.
    """
    params = []
    for item in (raw or "").split(","):
        item = item.strip()
        if not item:
            continue
        name, _, source = item.partition(":")
        params.append(RichParam(name=name.strip(), source=source.strip()))
    return tuple(params)


def parse_template_mappings(raw: str) -> tuple[TemplateMapping, ...]:
    """Parse a JSON array of template mappings (camelCase keys).

    Malformed JSON is ignored; structurally invalid entries raise
    ValidationException.
    """
    raw = (raw or "").strip()
    if not raw:
        return ()
    data = _load_json(raw, "template_mappings_json")
    if data is None:
        return ()
    if not isinstance(data, list):
        logger.warning("Ignoring template_mappings_json: expected a JSON array")
        return ()
    return tuple(TemplateMapping.from_dict(entry, index) for index, entry in enumerate(data))


def _warn_unknown_tokens(template: str, setting: str) -> None:
    unknown = [t for t in _TEMPLATE_TOKEN_RE.findall(template) if t not in _KNOWN_NAME_TOKENS]
    if unknown:
        logger.warning(
            "%s contains unknown token(s) %s; they are kept literally",
            setting,
            ", ".join(f"{{{t}}}" for t in unknown),
        )


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults; validate_coder_settings rejects
    values that can never work (non-http server URL, negative durations,
    unknown rich parameter sources).
    """

    # App
    app_name: str = "coder-workspace"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    session_header_name: str = "X-Session-ID"

    # Coder connection
    coder_server_url: str = ""
    coder_api_key: SecretStr = SecretStr("")
    coder_organization: str = ""
    coder_user: str = "me"
    coder_http_timeout_seconds: float = 30.0
    retry_auth_with_query_param: bool = True
    api_key_query_param_name: str = "coder_session_token"

    # Template selection
    template_id: str = ""
    template_version_id: str = ""
    template_version_preset_id: str = ""
    # JSON array of {repo, branch, templateId|templateVersionId, ...}
    template_mappings_json: str = ""

    # Workspace naming
    workspace_name_template: str = DEFAULT_WORKSPACE_NAME_TEMPLATE
    # JSON array or comma-separated list; lookup only, never used to create
    alternate_name_templates: str = ""
    strict_name: bool = False

    # Create request
    # Comma-separated NAME:source pairs; empty uses the default set
    rich_params: str = ""
    enable_clone_repository: bool = True
    ttl_ms: int = 0
    automatic_updates: str = "always"
    enable_dry_run_preview: bool = True

    # Open behaviour
    app_slug: str = ""
    wait_for_app_ready_ms: int = 0
    wait_poll_interval_ms: int = 1000
    append_token_to_app_url: bool = False

    # Redis Cache (context bindings)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    binding_ttl_seconds: int = 7 * 24 * 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_coder_settings(self) -> "Settings":
        """Validate Coder connection and naming settings.

        - CODER_SERVER_URL, when set, must be an http(s) URL.
        - ttl and wait durations must be non-negative.
        - Rich parameters and template mappings must parse (raises
          ValidationException naming the bad entry).
        """
        if self.coder_server_url:
            parsed = urlparse(self.coder_server_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(
                    f"CODER_SERVER_URL must be an http(s) URL, got: {self.coder_server_url!r}"
                )
        for field_name in ("ttl_ms", "wait_for_app_ready_ms", "wait_poll_interval_ms"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")
        if not self.workspace_name_template.strip():
            raise ValueError("WORKSPACE_NAME_TEMPLATE cannot be empty")
        _warn_unknown_tokens(self.workspace_name_template, "workspace_name_template")
        parse_rich_params(self.rich_params)
        for mapping in parse_template_mappings(self.template_mappings_json):
            if mapping.workspace_name_template:
                _warn_unknown_tokens(mapping.workspace_name_template, "template_mappings_json")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def effective_rich_params(self) -> tuple[RichParam, ...]:
        """Configured rich params (or defaults), minus clone params when cloning is off."""
        params = parse_rich_params(self.rich_params) or DEFAULT_RICH_PARAMS
        if not self.enable_clone_repository:
            params = tuple(p for p in params if p.name not in CLONE_RICH_PARAM_NAMES)
        return params

    def workspace_config(self) -> WorkspaceConfig:
        """Build the immutable configuration passed into resolution components."""
        return WorkspaceConfig(
            server_url=self.coder_server_url,
            api_key=self.coder_api_key.get_secret_value(),
            organization=self.coder_organization,
            user=self.coder_user or "me",
            template_id=self.template_id,
            template_version_id=self.template_version_id,
            template_version_preset_id=self.template_version_preset_id,
            workspace_name_template=self.workspace_name_template,
            alternate_name_templates=parse_name_templates(self.alternate_name_templates),
            rich_params=self.effective_rich_params(),
            template_mappings=parse_template_mappings(self.template_mappings_json),
            ttl_ms=self.ttl_ms,
            automatic_updates=self.automatic_updates,
            strict_name=self.strict_name,
            app_slug=self.app_slug,
            wait_for_app_ready_ms=self.wait_for_app_ready_ms,
            wait_poll_interval_ms=self.wait_poll_interval_ms,
            retry_auth_with_query_param=self.retry_auth_with_query_param,
            api_key_query_param_name=self.api_key_query_param_name,
            append_token_to_app_url=self.append_token_to_app_url,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
