"""Configuration: static settings and per-run configuration."""

from issue_digest.config.run_config import RunConfiguration
from issue_digest.config.settings import (
    DEFAULT_CONFIG_PATH,
    CodeHostConfig,
    DigestSettings,
    HttpConfig,
    OutputConfig,
    TrackerConfig,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CodeHostConfig",
    "DigestSettings",
    "HttpConfig",
    "OutputConfig",
    "RunConfiguration",
    "TrackerConfig",
]
