"""Workspace configuration."""

from monorun.config.loader import find_config_file, load_config, load_config_file
from monorun.config.schema import (
    CacheConfig,
    CommandDefaults,
    HooksConfig,
    MonorunConfig,
    PackageManager,
    TaskCacheConfig,
    TaskConfig,
)

__all__ = [
    "CacheConfig",
    "CommandDefaults",
    "HooksConfig",
    "MonorunConfig",
    "PackageManager",
    "TaskCacheConfig",
    "TaskConfig",
    "find_config_file",
    "load_config",
    "load_config_file",
]
