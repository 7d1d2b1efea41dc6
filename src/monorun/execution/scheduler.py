"""Dependency-ordered script scheduling with bounded concurrency."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from monorun.cache import CacheEntry, CacheHook, CacheStatus, fingerprint
from monorun.config.schema import PackageManager, TaskConfig
from monorun.errors import CacheIOError, PackageNotFoundError, ScriptExecutionError
from monorun.execution.results import BatchResult, ExecutionResult, ExecutionStatus
from monorun.execution.runner import Spawner, package_env, spawn
from monorun.execution.tasks import expand_task
from monorun.filters import build_dependency_graph
from monorun.filters.resolver import ChangedFilesFn
from monorun.git import get_changed_files
from monorun.log import get_logger
from monorun.workspace.graph import DependencyGraph
from monorun.workspace.package import Package
from monorun.workspace.package_manager import DEFAULT_PACKAGE_MANAGER, resolve_package_manager

logger = get_logger(__name__)

Fingerprinter = Callable[[Package, str], str]


@dataclass
class RunOptions:
    """Options for a scheduling call.

    Attributes:
        concurrency: Maximum packages running at once; None is unbounded.
        dry_run: Resolve order and cache but spawn nothing.
        skip_cache: Ignore existing cache entries.
        skip_cache_write: Do not record successful runs.
        package_manager: Package manager used to run scripts.
    """

    concurrency: int | None = None
    dry_run: bool = False
    skip_cache: bool = False
    skip_cache_write: bool = False
    package_manager: PackageManager | None = None

    def __post_init__(self) -> None:
        if self.concurrency is not None and self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")


@dataclass
class _RunState:
    """Bookkeeping for one run_script call; owned by the scheduling loop."""

    remaining: dict[str, int]
    ready: deque[str]
    running: set[str] = field(default_factory=set)
    completed: set[str] = field(default_factory=set)

    @classmethod
    def from_graph(cls, graph: DependencyGraph) -> _RunState:
        remaining = {name: len(graph.out_edges(name)) for name in graph.nodes()}
        ready = deque(name for name, count in remaining.items() if count == 0)
        return cls(remaining=remaining, ready=ready)

    def complete(self, name: str, graph: DependencyGraph) -> None:
        self.running.discard(name)
        self.completed.add(name)
        for consumer, _ in graph.in_edges(name):
            self.remaining[consumer] -= 1
            if self.remaining[consumer] == 0 and consumer not in self.completed:
                self.ready.append(consumer)


class Scheduler:
    """Runs scripts across a dependency graph.

    Attributes:
        cache: Cache used to skip unchanged work.
    """

    def __init__(
        self,
        cache: CacheHook,
        *,
        spawner: Spawner = spawn,
        fingerprinter: Fingerprinter = fingerprint,
        changed_files: ChangedFilesFn = get_changed_files,
    ) -> None:
        self.cache = cache
        self._spawner = spawner
        self._fingerprinter = fingerprinter
        self._changed_files = changed_files

    async def run_script(
        self,
        script: str,
        packages: Mapping[str, Package],
        graph: DependencyGraph,
        options: RunOptions | None = None,
    ) -> BatchResult:
        """Run ``script`` in every package of ``graph``, dependencies first.

        A package starts only after all of its dependencies completed
        or were skipped. The first failing package aborts the run:
        running siblings are cancelled and nothing else starts.

        Args:
            script: Manifest script name.
            packages: Package registry.
            graph: Packages to run and their dependency edges.
            options: Run options.

        Returns:
            Results in completion order.

        Raises:
            CyclicDependencyError: If the graph has a cycle.
            PackageNotFoundError: If a graph node is not in the registry.
            ScriptExecutionError: If a script exits non-zero.
        """
        options = options or RunOptions()
        graph.topological_order()
        logger.debug("%s", graph.to_text())
        for name in graph.nodes():
            if name not in packages:
                raise PackageNotFoundError(name)

        manager = options.package_manager or DEFAULT_PACKAGE_MANAGER
        limit = options.concurrency
        state = _RunState.from_graph(graph)
        workers: dict[asyncio.Task[ExecutionResult], str] = {}
        batch = BatchResult()

        try:
            while state.ready or workers:
                while state.ready and (limit is None or len(workers) < limit):
                    name = state.ready.popleft()
                    if name in state.running or name in state.completed:
                        continue
                    state.running.add(name)
                    worker = asyncio.create_task(
                        self._run_package(packages[name], script, manager, options)
                    )
                    workers[worker] = name

                if not workers:
                    break

                done, _ = await asyncio.wait(workers, return_when=asyncio.FIRST_COMPLETED)
                for worker in done:
                    name = workers.pop(worker)
                    result = worker.result()
                    batch.results.append(result)
                    if result.failed:
                        raise ScriptExecutionError(name, script, result.exit_code)
                    state.complete(name, graph)
        finally:
            for worker in workers:
                worker.cancel()
            if workers:
                await asyncio.gather(*workers, return_exceptions=True)

        return batch

    async def _run_package(
        self,
        package: Package,
        script: str,
        manager: PackageManager,
        options: RunOptions,
    ) -> ExecutionResult:
        name = package.name

        if package.get_script(script) is None:
            logger.info("[%s] No '%s' script. Skipping.", name, script)
            return ExecutionResult(name, ExecutionStatus.SKIPPED, script=script)

        logger.info("[%s] Running '%s'...", name, script)
        digest = await self._fingerprint(package, script)

        if digest is not None and not options.skip_cache:
            entry = self._read_cache(digest)
            if entry is not None and entry.is_success:
                logger.info("[%s] '%s' already executed. Skipping.", name, script)
                return ExecutionResult(
                    name, ExecutionStatus.CACHED, script=script, fingerprint=digest
                )

        exit_code = 0
        start_time = time.monotonic()
        if not options.dry_run:
            exit_code = await self._spawner(
                [manager.value, "run", script],
                package.path,
                package_env(name, package.path),
            )
        duration_ms = int((time.monotonic() - start_time) * 1000)

        if exit_code != 0:
            logger.error("[%s] '%s' failed.", name, script)
            return ExecutionResult(
                name,
                ExecutionStatus.FAILURE,
                exit_code=exit_code,
                script=script,
                duration_ms=duration_ms,
                fingerprint=digest,
            )

        logger.info("[%s] '%s' done.", name, script)
        if digest is not None and not options.skip_cache_write:
            self._write_cache(digest, CacheEntry(name, script, CacheStatus.SUCCESS))

        return ExecutionResult(
            name,
            ExecutionStatus.SUCCESS,
            script=script,
            duration_ms=duration_ms,
            fingerprint=digest,
        )

    async def _fingerprint(self, package: Package, script: str) -> str | None:
        try:
            return await asyncio.to_thread(self._fingerprinter, package, script)
        except CacheIOError as e:
            logger.warning("[%s] Cannot fingerprint '%s': %s", package.name, script, e.message)
            return None

    def _read_cache(self, digest: str) -> CacheEntry | None:
        try:
            return self.cache.read(digest)
        except Exception as e:
            logger.warning("Cache read failed, treating as miss: %s", e)
            return None

    def _write_cache(self, digest: str, entry: CacheEntry) -> None:
        try:
            self.cache.write(digest, entry)
        except Exception as e:
            logger.warning("Cache write failed: %s", e)

    async def run_task(
        self,
        task_name: str,
        task: TaskConfig,
        packages: Mapping[str, Package],
        graph: DependencyGraph,
        root: Path,
        options: RunOptions | None = None,
    ) -> BatchResult:
        """Run a configured task and its prerequisites.

        Without ``dependsOn`` the task's script runs once over ``graph``.
        Otherwise the task is expanded into units which run one after
        another, each over the registry graph pruned to the unit's target.

        Raises:
            FilterError: If a unit targets an unknown package.
            ScriptExecutionError: If any script fails.
        """
        options = options or RunOptions()
        manager = resolve_package_manager(
            root,
            explicit=options.package_manager,
            task_override=task.package_manager,
        )
        unit_options = replace(
            options,
            package_manager=manager,
            skip_cache=options.skip_cache or task.cache.skip_read,
            skip_cache_write=options.skip_cache_write or task.cache.skip_write,
        )

        if not task.depends_on:
            return await self.run_script(task_name, packages, graph, unit_options)

        batch = BatchResult()
        for unit in expand_task(task_name, task, graph):
            logger.debug("Running unit %s", unit)
            unit_graph = build_dependency_graph(
                packages,
                root,
                filters=[unit.target],
                changed_files=self._changed_files,
            )
            batch.extend(await self.run_script(unit.script, packages, unit_graph, unit_options))
        return batch
