"""Configuration loading for sup."""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError
from .streams import DEFAULT_CHUNK_SIZE

CONFIG_ENV_VAR = "SUP_CONFIG"
CONFIG_FILE = "sup.yaml"


class SupConfig(BaseModel):
    """Which backend to use and default upload behaviour."""
    backend: str = "memory"         # "memory" | "fs"
    root: str = ""                  # blob directory for the fs backend
    accepted_types: List[str] = Field(default_factory=list)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)


def _resolve_config_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / CONFIG_FILE


def load_config(path: Optional[Path] = None) -> SupConfig:
    """Load configuration from YAML.

    Looks at ``path``, then ``$SUP_CONFIG``, then ``./sup.yaml``. A missing
    file gives the defaults. Settings may sit under a top-level ``sup:`` key.

    Raises:
        ConfigError: If the file can't be parsed or holds invalid values
    """
    cfg_path = _resolve_config_path(path)
    if not cfg_path.exists():
        return SupConfig()

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {cfg_path} must be a mapping")
    section = data.get("sup", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'sup' section in {cfg_path} must be a mapping")

    try:
        return SupConfig(**section)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {cfg_path}: {e}") from e
