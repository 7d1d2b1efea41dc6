"""Cache entry model and the cache hook contract."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable


class CacheStatus(str, Enum):
    """Recorded outcome of a script run."""

    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry:
    """Verdict stored under a fingerprint."""

    package: str
    script: str
    status: CacheStatus
    timestamp: int = field(default_factory=now_ms)

    @property
    def is_success(self) -> bool:
        return self.status is CacheStatus.SUCCESS


@runtime_checkable
class CacheHook(Protocol):
    """Anything that can store cache verdicts.

    Implementations should raise :class:`~monorun.errors.CacheIOError`
    when the backend fails; the scheduler then treats the lookup as a miss.
    """

    def read(self, fingerprint: str) -> CacheEntry | None: ...

    def write(self, fingerprint: str, entry: CacheEntry) -> None: ...
