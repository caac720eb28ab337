"""
Configuration loader — reads bones.yml into a BonesConfig.

Lookup order:
    explicit --config path  >  $BONES_CONFIG  >  ./bones.yml
    >  ~/.config/bones/bones.yml  >  built-in defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from bones.core.models.config import BonesConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "bones.yml"
CONFIG_ENV_VAR = "BONES_CONFIG"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def user_config_path() -> Path:
    """Per-user config location (honours XDG_CONFIG_HOME)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "bones" / CONFIG_FILE


def find_config_file(start_dir: Path) -> Path | None:
    """Locate a config file without an explicit path.

    Args:
        start_dir: Directory checked for a local bones.yml.

    Returns:
        Path to the config file, or None when only defaults apply.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    local = start_dir / CONFIG_FILE
    if local.is_file():
        return local

    user = user_config_path()
    if user.is_file():
        return user

    return None


def load_config(path: Path | None = None, start_dir: Path | None = None) -> BonesConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config path. Must exist when given.
        start_dir: Directory searched for a local bones.yml when ``path``
            is None (default: cwd).

    Returns:
        Validated BonesConfig. Defaults when no file is found.

    Raises:
        ConfigError: If an explicit or discovered file is missing or invalid.
    """
    if path is None:
        path = find_config_file(start_dir or Path.cwd())
        if path is None:
            logger.debug("No %s found, using built-in defaults", CONFIG_FILE)
            return BonesConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file means "all defaults"
    if data is None:
        return BonesConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = BonesConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info(
        "Loaded config from %s (repository=%s, inline manifest=%s)",
        path,
        config.repository.url,
        config.manifest.inline,
    )
    return config
