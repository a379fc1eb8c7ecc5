"""Configuration models and loaders for ~/.config/meshops/config.yaml."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_DIR = Path.home() / ".config" / "meshops"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_VALID_ENVIRONMENTS = ("development", "staging", "production")

_YAML_HEADER = """\
# Mesh Operations Manager Configuration
# Plugin settings live under plugins.<name>, e.g. plugins.istio.active_cluster
"""


class ProfileConfig(BaseModel):
    """Settings for a named profile."""

    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level {v!r}, expected one of {_VALID_LOG_LEVELS}")
        return upper


class PluginsConfig(BaseModel):
    """Which plugins are loaded at startup."""

    enabled: list[str] = Field(default_factory=lambda: ["core", "istio"])


class SystemConfig(BaseModel):
    """Top-level configuration file model."""

    version: str = "1.0"
    environment: str = "development"
    profiles: dict[str, ProfileConfig] = Field(
        default_factory=lambda: {"default": ProfileConfig()}
    )
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in _VALID_ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment {v!r}, expected one of {_VALID_ENVIRONMENTS}"
            )
        return v

    def to_yaml(self) -> str:
        """Serialize to YAML with a leading comment header."""
        body = yaml.safe_dump(self.model_dump(), default_flow_style=False, sort_keys=False)
        return _YAML_HEADER + "\n" + body


def load_config(path: Path | None = None) -> SystemConfig | None:
    """Load and validate the configuration file.

    Args:
        path: File to read. Defaults to ``CONFIG_FILE``.

    Returns:
        The parsed configuration, or None when the file does not exist.

    Raises:
        ValueError: If the file is not valid YAML or fails model validation.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return None

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    return SystemConfig.model_validate(data)


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Load the configuration file as a plain dict, without validation.

    Plugin sections are validated by the plugins themselves, so an unreadable
    file yields an empty dict rather than an error.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError:
        return {}

    return data if isinstance(data, dict) else {}
