"""Plugin configuration loader with Pydantic v2 validation.

Loads and validates a ``project-structure.yaml`` file into a typed
:class:`StructureConfig` object.  Unknown keys are allowed to support
future schema additions without breakage.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load(Path("project-structure.yaml"))
>>> config.root_project
'All-Projects'
"""
from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from project_group_structure.naming.validator import DEFAULT_NAME_REGEX

logger = logging.getLogger(__name__)

SEE_DOCUMENTATION_MSG = "\n\nSee documentation for more info: %s"


class AuditConfig(BaseModel):
    """Configuration for the decision audit trail."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=False)
    log_path: Path = Field(default=Path("./project_structure_audit.jsonl"))


class StructureConfig(BaseModel):
    """Top-level plugin configuration schema.

    All keys are optional and fall back to the platform defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    root_project: str = Field(default="All-Projects", min_length=1)
    name_regex: str = Field(default=DEFAULT_NAME_REGEX)
    template_path: Path | None = Field(default=None)
    documentation_url: str | None = Field(default=None)
    audit: AuditConfig = Field(default_factory=AuditConfig)

    @field_validator("name_regex")
    @classmethod
    def _compilable_name_regex(cls, value: str) -> str:
        if not value:
            return DEFAULT_NAME_REGEX
        try:
            re.compile(value)
        except re.error as exc:
            logger.warning(
                "The value of the regex is invalid (%r: %s); using %r",
                value,
                exc,
                DEFAULT_NAME_REGEX,
            )
            return DEFAULT_NAME_REGEX
        return value

    def with_documentation(self, message: str) -> str:
        """Append the documentation pointer to a user-facing message."""
        if not self.documentation_url:
            return message
        return message + SEE_DOCUMENTATION_MSG % self.documentation_url


class ConfigLoader:
    """Loads and validates plugin YAML configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("project-structure.yaml"))
    """

    def load(self, config_path: Path) -> StructureConfig:
        """Load and validate a plugin YAML file.

        Relative ``template_path`` and ``audit.log_path`` values are kept
        as written.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Plugin config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return StructureConfig.model_validate(raw)

    def load_string(self, yaml_content: str) -> StructureConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return StructureConfig.model_validate(raw)

    def defaults(self) -> StructureConfig:
        """Return a default configuration with all defaults applied."""
        return StructureConfig()
