"""Cache hook loading."""

from __future__ import annotations

import importlib
import inspect
from pathlib import Path

from monorun.cache.entry import CacheHook
from monorun.cache.store import MemoryCacheStore, SqliteCacheStore
from monorun.config.schema import MonorunConfig
from monorun.errors import ConfigurationError


def load_cache_hook(import_path: str) -> CacheHook:
    """Load a user cache implementation from ``module:attribute``.

    Classes and zero-argument factories are called; anything else is used
    as is. The result must provide ``read`` and ``write``.

    Raises:
        ConfigurationError: If the path cannot be imported or the object
            does not implement the cache contract.
    """
    module_name, sep, attribute = import_path.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(
            f"Cache hook must be given as 'module:attribute', got '{import_path}'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import cache hook module '{module_name}': {e}") from e

    try:
        target = module
        for part in attribute.split("."):
            target = getattr(target, part)
    except AttributeError as e:
        raise ConfigurationError(f"'{module_name}' has no attribute '{attribute}'") from e

    hook = target() if inspect.isclass(target) or inspect.isfunction(target) else target
    if not isinstance(hook, CacheHook):
        raise ConfigurationError(f"Cache hook '{import_path}' must define read() and write()")
    return hook


def open_cache(root: Path, config: MonorunConfig) -> CacheHook:
    """Open the cache configured for a workspace.

    A configured hook wins; otherwise the SQLite store at
    ``cache.path`` (relative to ``root``), or an in-memory store when the
    cache is disabled. The caller owns the returned object and should
    close it if it has a ``close`` method.
    """
    if config.hooks.cache:
        return load_cache_hook(config.hooks.cache)
    if not config.cache.enabled:
        return MemoryCacheStore()
    path = Path(config.cache.path)
    if not path.is_absolute():
        path = root / path
    return SqliteCacheStore(path)


def close_cache(cache: CacheHook) -> None:
    """Close a cache if it supports closing."""
    close = getattr(cache, "close", None)
    if callable(close):
        close()
