"""
Configuration system using Pydantic for type-safe settings management.

Settings are static defaults for every run: where the tracker and code
host live, which project and repository to report on, and where the
report goes. They are loaded from an optional YAML file (saved by
``issue-digest configure``) with ``ISSUE_DIGEST_*`` environment overrides.
Per-run choices are layered on top in ``RunConfiguration``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from issue_digest.enums import CredentialName
from issue_digest.exceptions import ConfigurationError

log = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/issue-digest/config.yaml")


class TrackerConfig(BaseModel):
    """Issue tracker (Jira REST v2) configuration."""

    base_url: HttpUrl = Field(
        default="https://jira.example.com/rest/api/2/",
        validate_default=True,
        description="Jira REST API base URL; the search endpoint is appended to it",
    )
    project: str = Field(default="MyProject", description="Project key to report on")
    status: str = Field(default="Open", description="Issue status to report on")
    fields: list[str] = Field(default_factory=lambda: ["summary", "status"], description="Requested issue fields")
    token_name: str = Field(default=CredentialName.TRACKER_TOKEN.value, description="Credential name of the API token")

    @property
    def api_url(self) -> str:
        return str(self.base_url).rstrip("/")


class CodeHostConfig(BaseModel):
    """Code host (GitHub REST v3) configuration."""

    base_url: HttpUrl = Field(
        default="https://api.github.com", validate_default=True, description="GitHub API base URL"
    )
    owner: str = Field(default="myusername", description="Default repository owner")
    repo: str = Field(default="myrepo", description="Default repository name")
    api_version: str = Field(default="2022-11-28", description="Value of the X-GitHub-Api-Version header")
    token_name: str = Field(default=CredentialName.HOST_TOKEN.value, description="Credential name of the API token")

    @property
    def api_url(self) -> str:
        # Normalize: Pydantic HttpUrl adds a trailing slash
        return str(self.base_url).rstrip("/")


class OutputConfig(BaseModel):
    """Report delivery configuration."""

    file_path: str = Field(default="~/Documents/issue-digest.json", description="Where the JSON report is written")
    app_name: str = Field(default="TextEdit", description="Application used to open the report")
    open_in_browser: bool = Field(default=True, description="Open every issue and pull request in the browser")
    rich_notifications: bool = Field(default=True, description="Send a summary notification listing items")
    index_output: bool = Field(default=True, description="Index the written report for desktop search")


class HttpConfig(BaseModel):
    """HTTP client configuration."""

    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")


class DigestSettings(BaseSettings):
    """Main settings object.

    Combines all configuration sections and provides loading from (and
    saving to) YAML files with environment variable interpolation.
    """

    model_config = SettingsConfigDict(
        env_prefix="ISSUE_DIGEST_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    code_host: CodeHostConfig = Field(default_factory=CodeHostConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> DigestSettings:
        """Load settings from an explicit path, the saved config, or defaults.

        An explicit path must exist. Without one, the saved configuration
        at ``~/.config/issue-digest/config.yaml`` is used when present.

        Raises:
            ConfigurationError: If the chosen file is missing or invalid
        """
        if config_path is not None:
            return cls.from_yaml(str(config_path))

        saved = DEFAULT_CONFIG_PATH.expanduser()
        if saved.exists():
            log.debug("loading_saved_config", path=str(saved))
            return cls.from_yaml(str(saved))

        return cls()

    @classmethod
    def from_yaml(cls, config_path: str) -> DigestSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} and ${VAR_NAME:-default} substitution.

        Raises:
            ConfigurationError: If config file is invalid or missing
        """
        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    def to_yaml(self, config_path: str | Path) -> Path:
        """Write these settings as YAML, creating parent directories.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        target = Path(config_path).expanduser()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file: {config_path}") from e

        log.info("config_saved", path=str(target))
        return target

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
