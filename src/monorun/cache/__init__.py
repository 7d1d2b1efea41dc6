"""Content-addressed task cache."""

from monorun.cache.entry import CacheEntry, CacheHook, CacheStatus
from monorun.cache.fingerprinting import fingerprint
from monorun.cache.hooks import close_cache, load_cache_hook, open_cache
from monorun.cache.store import MemoryCacheStore, SqliteCacheStore

__all__ = [
    "CacheEntry",
    "CacheHook",
    "CacheStatus",
    "MemoryCacheStore",
    "SqliteCacheStore",
    "close_cache",
    "fingerprint",
    "load_cache_hook",
    "open_cache",
]
