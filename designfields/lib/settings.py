"""Project settings for the field builder.

Settings come from three layers, lowest priority first:

1. Built-in defaults
2. ``.designfields.yaml`` in the project root
3. Environment variables with the ``DESIGNFIELDS_`` prefix (a ``.env`` file
   in the project root is read too)

Example .designfields.yaml:
    builder:
      id_prefix: field                 # Leading segment of generated ids
      document_path: ./design_fields.json
      indent: 2
      log_level: INFO
      log_format: console              # 'json' for log aggregation
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

__all__ = ["BuilderSettings", "SETTINGS_FILE", "load_settings"]

SETTINGS_FILE = ".designfields.yaml"


class BuilderSettings(BaseSettings):
    """Environment-based builder settings using pydantic-settings.

    Example:
        >>> # DESIGNFIELDS_DOCUMENT_PATH=./products/chair.yaml
        >>> settings = BuilderSettings()
        >>> settings.document_path
        './products/chair.yaml'
    """

    id_prefix: str = Field(default="field", min_length=1, description="Leading segment of generated field ids")
    document_path: str = Field(default="./design_fields.json", description="Default field document")
    indent: int = Field(default=2, ge=0, le=8, description="JSON indent when writing documents")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format: 'json' or 'console'")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    model_config = SettingsConfigDict(
        env_prefix="DESIGNFIELDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("id_prefix")
    @classmethod
    def validate_id_prefix(cls, v: str) -> str:
        """Ids are slugs, so the prefix may not contain whitespace."""
        if any(ch.isspace() for ch in v):
            raise ValueError("id_prefix must not contain whitespace")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate format is a known value."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {valid_formats}")
        return v.lower()

    def get_document_path(self, project_root: Optional[Path] = None) -> Path:
        """Absolute path of the default field document."""
        root = project_root or Path.cwd()
        return (root / self.document_path).resolve()


def _read_settings_file(config_path: Path) -> Dict[str, Any]:
    """Return the ``builder`` section of a settings file, or {}."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", config_path, e)
        return {}

    section = config.get("builder", {}) if isinstance(config, dict) else None
    if not isinstance(section, dict):
        logger.warning("Ignoring %s: 'builder' must be a mapping", config_path)
        return {}
    return section


def load_settings(project_root: Optional[Path] = None) -> BuilderSettings:
    """Load settings for a project.

    Args:
        project_root: Directory holding ``.designfields.yaml`` and ``.env``.
            Defaults to cwd.

    Returns:
        BuilderSettings with environment values layered over the file
    """
    root = project_root or Path.cwd()
    env_file = root / ".env"

    env_settings = BuilderSettings(_env_file=env_file)
    from_env = env_settings.model_dump(include=env_settings.model_fields_set)
    from_file = _read_settings_file(root / SETTINGS_FILE)

    if not from_file:
        return env_settings

    try:
        return BuilderSettings(_env_file=env_file, **{**from_file, **from_env})
    except ValidationError as e:
        logger.warning(
            "Ignoring invalid values in %s: %s", root / SETTINGS_FILE, e
        )
        return env_settings
