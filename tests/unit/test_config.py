"""Tests for Settings parsing and validation."""

import pytest
from pydantic import ValidationError

from coder_workspace.core.config import (
    Settings,
    parse_name_templates,
    parse_rich_params,
    parse_template_mappings,
)
from coder_workspace.domain.exceptions import ValidationException


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestParsers:
    def test_name_templates_csv_and_json(self) -> None:
        assert parse_name_templates("{repo}.{branchShort}, {repo}-{change}") == (
            "{repo}.{branchShort}",
            "{repo}-{change}",
        )
        assert parse_name_templates('["{repo}-x"]') == ("{repo}-x",)
        assert parse_name_templates("") == ()

    def test_malformed_json_templates_ignored(self) -> None:
        assert parse_name_templates("[not json") == ()

    def test_rich_params(self) -> None:
        params = parse_rich_params("REPO:repo, CHANGE:change")
        assert [(p.name, p.source) for p in params] == [("REPO", "repo"), ("CHANGE", "change")]

    def test_rich_params_unknown_source(self) -> None:
        with pytest.raises(ValidationException, match="Invalid rich parameter source"):
            parse_rich_params("REPO:project")

    def test_rich_params_missing_name(self) -> None:
        with pytest.raises(ValidationException, match="missing 'name'"):
            parse_rich_params(":repo")

    def test_template_mappings(self) -> None:
        mappings = parse_template_mappings(
            '[{"repo": "platform/*", "templateVersionId": "v1",'
            ' "richParams": [{"name": "REPO", "from": "repo"}]}]'
        )
        assert mappings[0].repo == "platform/*"
        assert mappings[0].branch == "*"
        assert mappings[0].template_version_id == "v1"
        assert mappings[0].rich_params[0].source == "repo"

    def test_template_mapping_unknown_key(self) -> None:
        with pytest.raises(ValidationException, match="unknown key 'owner'"):
            parse_template_mappings('[{"repo": "*", "owner": "x"}]')

    def test_malformed_mappings_ignored(self) -> None:
        assert parse_template_mappings("{oops") == ()
        assert parse_template_mappings('{"repo": "*"}') == ()


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None, coder_server_url="", template_id="")
        config = settings.workspace_config()
        assert config.user == "me"
        assert config.workspace_name_template == "{repo}-{change}-{patchset}"
        assert config.alternate_name_templates == ()
        assert [p.name for p in config.rich_params][-3:] == [
            "GERRIT_GIT_HTTP_URL",
            "GERRIT_GIT_SSH_URL",
            "GERRIT_CHANGE_REF",
        ]
        assert len(config.rich_params) == 8

    def test_rejects_non_http_server_url(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            _settings(coder_server_url="ftp://coder")

    def test_rejects_negative_wait(self) -> None:
        with pytest.raises(ValidationError, match="non-negative"):
            _settings(wait_for_app_ready_ms=-1)

    def test_rejects_empty_name_template(self) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            _settings(workspace_name_template="  ")

    def test_clone_params_dropped_when_cloning_disabled(self) -> None:
        settings = _settings(enable_clone_repository=False)
        names = [p.name for p in settings.workspace_config().rich_params]
        assert "GERRIT_GIT_HTTP_URL" not in names
        assert "GERRIT_GIT_SSH_URL" not in names
        assert "GERRIT_CHANGE_REF" not in names
        assert "REPO" in names

    def test_api_key_is_secret(self) -> None:
        settings = _settings(coder_api_key="s3cret")
        assert "s3cret" not in repr(settings)
        assert "s3cret" not in repr(settings.workspace_config())
        assert settings.workspace_config().api_key == "s3cret"

    def test_cors_origins(self) -> None:
        settings = _settings(allowed_origins="https://a, https://b,")
        assert settings.cors_origins == ["https://a", "https://b"]
