"""
Configuration for relock.

Settings are read from `relock.cfg.json` in the project directory. The keys
are the camelCase names used by the npm tooling this works alongside; a YAML
file with the same keys is accepted too.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from .core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "relock.cfg.json"


class RelockConfig(BaseModel):
    """
    Relock settings.

    Attributes:
        relocked_filename: Previous relocked snapshot to compare against.
        package_filename: The project manifest.
        package_locked_filename: The current, freshly resolved lock file.
        output_relocked_filename: Where the next snapshot is written.
        output_locked_filename: Where the relocked lock file is written.
        project_files: Regular expressions naming project modules.
        verbose: Log progress at INFO level.
    """
    relocked_filename: str = Field("package.relocked.json", alias="relockedFilename")
    package_filename: str = Field("package.json", alias="packageFilename")
    package_locked_filename: str = Field("package-lock.json", alias="packageLockedFilename")
    output_relocked_filename: str = Field("package.relocked.json", alias="outputRelockedFilename")
    output_locked_filename: str = Field("package.relocked.json", alias="outputLockedFilename")
    project_files: List[str] = Field(default_factory=list, alias="projectFiles")
    verbose: bool = False

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    _patterns: List[re.Pattern] = PrivateAttr(default_factory=list)

    @field_validator("project_files")
    @classmethod
    def _valid_patterns(cls, patterns: List[str]) -> List[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid project module pattern {pattern!r}: {exc}") from exc
        return patterns

    def model_post_init(self, __context) -> None:
        self._patterns = [re.compile(pattern) for pattern in self.project_files]

    def is_project_module(self, name: str) -> bool:
        """The root is always a project module; otherwise any pattern may match."""
        if name == "":
            return True
        return any(pattern.search(name) for pattern in self._patterns)


def parse_config(data: Dict[str, Any]) -> RelockConfig:
    try:
        return RelockConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid relock configuration: {exc}") from exc


def load_config(project_dir: Path, config_file: str | Path | None = None) -> RelockConfig:
    """
    Load configuration for a project.

    Args:
        project_dir: Directory the file names are relative to.
        config_file: Explicit config path. When omitted, `relock.cfg.json` is
            used if present and defaults otherwise.

    Raises:
        ConfigError: If the file is missing (explicit path only), unreadable
            or invalid.
    """
    explicit = config_file is not None
    path = Path(config_file) if explicit else project_dir / DEFAULT_CONFIG_FILENAME

    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug(f"No {DEFAULT_CONFIG_FILENAME} in {project_dir}, using defaults")
        return RelockConfig()

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}")

    logger.debug(f"Loaded config from {path}")
    return parse_config(data)
