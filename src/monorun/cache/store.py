"""Local cache stores."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from types import TracebackType

from monorun.cache.entry import CacheEntry, CacheStatus
from monorun.errors import CacheIOError
from monorun.log import get_logger

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache (
    hash TEXT PRIMARY KEY,
    package TEXT NOT NULL,
    script TEXT NOT NULL,
    timestamp INTEGER NOT NULL,
    status TEXT NOT NULL
)
"""

_UPSERT = """
INSERT INTO cache (hash, package, script, timestamp, status)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(hash) DO UPDATE SET
    package = excluded.package,
    script = excluded.script,
    timestamp = excluded.timestamp,
    status = excluded.status
"""


class SqliteCacheStore:
    """Cache verdicts persisted in a SQLite file.

    The store owns its connection; close it explicitly or use it as a
    context manager. Writes are serialized and committed one at a time.
    No locking is done against other processes sharing the file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = path
        if isinstance(path, Path):
            path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._connection: sqlite3.Connection | None = sqlite3.connect(
                str(path), check_same_thread=False
            )
            self._connection.execute(_SCHEMA)
            self._connection.commit()
        except sqlite3.Error as e:
            raise CacheIOError(f"Cannot open cache store {path}: {e}") from e

    def _require_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise CacheIOError("Cache store is closed")
        return self._connection

    def read(self, fingerprint: str) -> CacheEntry | None:
        with self._lock:
            connection = self._require_connection()
            try:
                row = connection.execute(
                    "SELECT package, script, timestamp, status FROM cache WHERE hash = ?",
                    (fingerprint,),
                ).fetchone()
            except sqlite3.Error as e:
                raise CacheIOError(f"Cannot read cache entry {fingerprint}: {e}") from e

        if row is None:
            return None

        package, script, timestamp, status = row
        try:
            cache_status = CacheStatus(status)
        except ValueError:
            logger.warning("Ignoring cache entry %s with unknown status %r", fingerprint, status)
            return None
        return CacheEntry(package=package, script=script, status=cache_status, timestamp=timestamp)

    def write(self, fingerprint: str, entry: CacheEntry) -> None:
        with self._lock:
            connection = self._require_connection()
            try:
                with connection:
                    connection.execute(
                        _UPSERT,
                        (
                            fingerprint,
                            entry.package,
                            entry.script,
                            entry.timestamp,
                            entry.status.value,
                        ),
                    )
            except sqlite3.Error as e:
                raise CacheIOError(f"Cannot write cache entry {fingerprint}: {e}") from e
        logger.debug("Cache written for %s - %s with hash %s", entry.package, entry.script, fingerprint)

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def __enter__(self) -> SqliteCacheStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class MemoryCacheStore:
    """In-process cache, used when the persistent store is disabled."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def read(self, fingerprint: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(fingerprint)

    def write(self, fingerprint: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[fingerprint] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def close(self) -> None:
        pass
