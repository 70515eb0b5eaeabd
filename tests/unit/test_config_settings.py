"""Tests for issue_digest/config - settings loading and per-run resolution."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from issue_digest.config import settings as settings_module
from issue_digest.config.run_config import RunConfiguration
from issue_digest.config.settings import DigestSettings
from issue_digest.exceptions import ConfigurationError


class TestDefaults:
    def test_default_sections(self):
        settings = DigestSettings()

        assert settings.tracker.project == "MyProject"
        assert settings.tracker.status == "Open"
        assert settings.tracker.fields == ["summary", "status"]
        assert settings.tracker.token_name == "tracker-token"
        assert settings.code_host.api_url == "https://api.github.com"
        assert settings.code_host.token_name == "host-token"
        assert settings.output.app_name == "TextEdit"
        assert settings.http.timeout == 30.0

    def test_api_url_has_no_trailing_slash(self):
        settings = DigestSettings(tracker={"base_url": "https://jira.example.com/rest/api/2/"})

        assert settings.tracker.api_url == "https://jira.example.com/rest/api/2"

    def test_invalid_url_rejected(self):
        with pytest.raises(ValidationError):
            DigestSettings(tracker={"base_url": "not a url"})

    @patch.dict(os.environ, {"ISSUE_DIGEST_CODE_HOST__OWNER": "octo"})
    def test_nested_environment_override(self):
        assert DigestSettings().code_host.owner == "octo"


class TestFromYaml:
    """YAML loading, interpolation and error reporting."""

    def test_loads_sections(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "tracker:\n  project: PROJ\n  status: In Progress\ncode_host:\n  owner: octo\n  repo: widgets\n"
        )

        settings = DigestSettings.from_yaml(str(config_file))

        assert settings.tracker.project == "PROJ"
        assert settings.tracker.status == "In Progress"
        assert settings.code_host.owner == "octo"

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert DigestSettings.from_yaml(str(config_file)).tracker.project == "MyProject"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            DigestSettings.from_yaml(str(tmp_path / "absent.yaml"))

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("tracker: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            DigestSettings.from_yaml(str(config_file))

    def test_non_mapping_top_level(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="YAML object"):
            DigestSettings.from_yaml(str(config_file))

    def test_validation_failure(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("http:\n  timeout: -1\n")

        with pytest.raises(ConfigurationError, match="Failed to validate"):
            DigestSettings.from_yaml(str(config_file))

    @patch.dict(os.environ, {"DIGEST_TEST_OWNER": "octo"})
    def test_env_interpolation_with_default(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "code_host:\n  owner: ${DIGEST_TEST_OWNER}\n  repo: ${DIGEST_TEST_REPO_UNSET:-widgets}\n"
        )

        settings = DigestSettings.from_yaml(str(config_file))

        assert settings.code_host.owner == "octo"
        assert settings.code_host.repo == "widgets"

    @patch.dict(os.environ, {}, clear=True)
    def test_required_env_var_missing(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("code_host:\n  owner: ${DIGEST_TEST_OWNER}\n")

        with pytest.raises(ConfigurationError, match="DIGEST_TEST_OWNER"):
            DigestSettings.from_yaml(str(config_file))

    @patch.dict(os.environ, {}, clear=True)
    def test_comment_lines_are_not_interpolated(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("# owner: ${DIGEST_TEST_OWNER}\ncode_host:\n  owner: octo\n")

        assert DigestSettings.from_yaml(str(config_file)).code_host.owner == "octo"


class TestLoadAndSave:
    def test_to_yaml_round_trip(self, tmp_path):
        original = DigestSettings(tracker={"project": "PROJ"}, output={"app_name": "Visual Studio Code"})

        path = original.to_yaml(tmp_path / "nested" / "config.yaml")
        loaded = DigestSettings.from_yaml(str(path))

        assert path.exists()
        assert loaded.tracker.project == "PROJ"
        assert loaded.output.app_name == "Visual Studio Code"
        assert str(loaded.tracker.base_url) == str(original.tracker.base_url)

    def test_load_prefers_explicit_path(self, tmp_path):
        config_file = tmp_path / "explicit.yaml"
        config_file.write_text("tracker:\n  project: EXPLICIT\n")

        assert DigestSettings.load(config_file).tracker.project == "EXPLICIT"

    def test_load_explicit_missing_path_fails(self, tmp_path):
        with pytest.raises(ConfigurationError):
            DigestSettings.load(tmp_path / "absent.yaml")

    def test_load_uses_saved_config(self, tmp_path):
        saved = tmp_path / "config.yaml"
        saved.write_text("tracker:\n  project: SAVED\n")

        with patch.object(settings_module, "DEFAULT_CONFIG_PATH", saved):
            assert DigestSettings.load().tracker.project == "SAVED"

    def test_load_without_saved_config_gives_defaults(self, tmp_path):
        with patch.object(settings_module, "DEFAULT_CONFIG_PATH", Path(tmp_path / "absent.yaml")):
            assert DigestSettings.load().tracker.project == "MyProject"


class TestRunConfiguration:
    """Override merging in RunConfiguration.resolve."""

    def test_defaults_come_from_settings(self, settings):
        config = RunConfiguration.resolve(settings)

        assert config.owner == "octo"
        assert config.repo == "widgets"
        assert config.repo_coordinates == "octo/widgets"
        assert config.output_file_path == settings.output.file_path
        assert config.output_app == "TextEdit"
        assert config.open_in_browser is True
        assert config.summary_only is False
        assert config.rich_notifications is True
        assert config.index_output is True

    def test_overrides_win(self, settings):
        config = RunConfiguration.resolve(
            settings,
            owner="other",
            repo="tool",
            output_file_path="/tmp/out.json",
            output_app="Notes",
            open_in_browser=False,
            summary_only=True,
            rich_notifications=False,
            index_output=False,
        )

        assert config.repo_coordinates == "other/tool"
        assert config.output_file_path == "/tmp/out.json"
        assert config.output_app == "Notes"
        assert config.open_in_browser is False
        assert config.summary_only is True
        assert config.rich_notifications is False
        assert config.index_output is False

    def test_empty_string_overrides_fall_back(self, settings):
        config = RunConfiguration.resolve(settings, owner="", repo="", output_app="")

        assert config.repo_coordinates == "octo/widgets"
        assert config.output_app == "TextEdit"

    def test_issue_query(self, settings):
        config = RunConfiguration.resolve(settings, tracker_status="In Review")

        assert config.issue_query.project == "PROJ"
        assert config.issue_query.status == "In Review"

    def test_is_frozen(self, run_config):
        with pytest.raises(ValidationError):
            run_config.owner = "changed"
