"""Tests for cache hook loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from monorun.cache import (
    MemoryCacheStore,
    SqliteCacheStore,
    close_cache,
    load_cache_hook,
    open_cache,
)
from monorun.config.schema import MonorunConfig
from monorun.errors import ConfigurationError

HOOK_MODULE = """\
class RemoteCache:
    def __init__(self):
        self.entries = {}

    def read(self, fingerprint):
        return self.entries.get(fingerprint)

    def write(self, fingerprint, entry):
        self.entries[fingerprint] = entry


def make_cache():
    return RemoteCache()


class Holder:
    instance = RemoteCache()


not_a_cache = object()
"""


@pytest.fixture
def hook_module(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (temp_dir / "my_cache_hooks.py").write_text(HOOK_MODULE)
    monkeypatch.syspath_prepend(str(temp_dir))
    return "my_cache_hooks"


class TestLoadCacheHook:
    def test_class(self, hook_module: str) -> None:
        hook = load_cache_hook(f"{hook_module}:RemoteCache")
        assert type(hook).__name__ == "RemoteCache"

    def test_factory(self, hook_module: str) -> None:
        hook = load_cache_hook(f"{hook_module}:make_cache")
        assert type(hook).__name__ == "RemoteCache"

    def test_dotted_attribute_instance(self, hook_module: str) -> None:
        hook = load_cache_hook(f"{hook_module}:Holder.instance")
        assert type(hook).__name__ == "RemoteCache"

    def test_not_a_cache(self, hook_module: str) -> None:
        with pytest.raises(ConfigurationError, match="must define read"):
            load_cache_hook(f"{hook_module}:not_a_cache")

    def test_missing_attribute(self, hook_module: str) -> None:
        with pytest.raises(ConfigurationError, match="has no attribute"):
            load_cache_hook(f"{hook_module}:Missing")

    def test_missing_module(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot import"):
            load_cache_hook("definitely_not_a_module_xyz:Cache")

    @pytest.mark.parametrize("value", ["no_colon", ":attr", "module:"])
    def test_malformed(self, value: str) -> None:
        with pytest.raises(ConfigurationError, match="module:attribute"):
            load_cache_hook(value)


class TestOpenCache:
    def test_default_sqlite(self, temp_dir: Path) -> None:
        cache = open_cache(temp_dir, MonorunConfig())
        try:
            assert isinstance(cache, SqliteCacheStore)
            assert (temp_dir / ".monorun" / "cache.sqlite").exists()
        finally:
            close_cache(cache)

    def test_disabled(self, temp_dir: Path) -> None:
        config = MonorunConfig.model_validate({"cache": {"enabled": False}})
        assert isinstance(open_cache(temp_dir, config), MemoryCacheStore)

    def test_hook_wins(self, temp_dir: Path, hook_module: str) -> None:
        config = MonorunConfig.model_validate(
            {"hooks": {"cache": f"{hook_module}:RemoteCache"}, "cache": {"enabled": False}}
        )
        cache = open_cache(temp_dir, config)
        assert type(cache).__name__ == "RemoteCache"
        close_cache(cache)
