"""Configuration file discovery and loading."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from monorun.config.schema import MonorunConfig
from monorun.errors import ConfigurationError

CONFIG_FILENAMES = ("monorun.yaml", ".monorun.yaml")


def find_config_file(root: Path) -> Path | None:
    """Return the config file inside ``root``, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> MonorunConfig:
    """Parse and validate a config file.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If the file cannot be parsed or is invalid.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=path) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config: {e}", path=path) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError("Config must be a mapping", path=path)

    try:
        return MonorunConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration:\n{e}", path=path) from e


def load_config(root: Path) -> MonorunConfig:
    """Load the workspace config from ``root``.

    Raises:
        ConfigurationError: If no config file exists or it is invalid.
    """
    path = find_config_file(root)
    if path is None:
        raise ConfigurationError("No workspace config found", path=root / CONFIG_FILENAMES[0])
    return load_config_file(path)
