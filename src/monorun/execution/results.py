"""Execution result types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class ExecutionStatus(Enum):
    """Outcome of one package script."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"
    CACHED = "cached"


@dataclass
class ExecutionResult:
    """Result of running a script in one package.

    Attributes:
        package_name: Package the script belongs to.
        status: Outcome.
        exit_code: Process exit code (0 when nothing was spawned).
        script: Script name.
        duration_ms: Wall time spent spawning, in milliseconds.
        fingerprint: Cache fingerprint, if one was computed.
    """

    package_name: str
    status: ExecutionStatus
    exit_code: int = 0
    script: str = ""
    duration_ms: int = 0
    fingerprint: str | None = None

    @property
    def failed(self) -> bool:
        return self.status is ExecutionStatus.FAILURE

    @property
    def skipped(self) -> bool:
        return self.status is ExecutionStatus.SKIPPED

    @property
    def cached(self) -> bool:
        return self.status is ExecutionStatus.CACHED


@dataclass
class BatchResult:
    """Results of a scheduling call, in completion order."""

    results: list[ExecutionResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[ExecutionResult]:
        return iter(self.results)

    def extend(self, other: BatchResult) -> None:
        self.results.extend(other.results)

    @property
    def package_names(self) -> list[str]:
        """Package names in completion order."""
        return [r.package_name for r in self.results]

    @property
    def all_success(self) -> bool:
        return not any(r.failed for r in self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.status is ExecutionStatus.SUCCESS)

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def cached_count(self) -> int:
        return sum(1 for r in self.results if r.cached)
