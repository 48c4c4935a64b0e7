"""Project configuration loaded from YAML."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel

from trace_reports.storage.config import StorageConfig

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".trace-reports.yaml"


class ProjectConfig(BaseModel):
    """Settings shared by every run of a project."""

    name: str = "playwright-reports"
    developer: str | None = None
    results_path: Path = Path("test-results")
    state_dir: Path = Path(".playwright-reports")
    environment: str = "local"
    storage: StorageConfig | None = None


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


def load_config(path: Path) -> ProjectConfig:
    """Load a project config, expanding ${VAR} references first.

    Raises:
        ConfigError: If the file is missing, not YAML, or fails validation

    """
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        data = yaml.safe_load(os.path.expandvars(text)) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    try:
        return ProjectConfig.model_validate(data)
    except ValueError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def find_config(cwd: Path, home: Path) -> Path | None:
    """First existing config file: the project's, then the user's."""
    for candidate in (
        cwd / CONFIG_FILE_NAME,
        home / ".trace-reports" / "config.yaml",
    ):
        if candidate.is_file():
            log.debug("Using config %s", candidate)
            return candidate
    return None
