"""Run command implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from monorun.cache import CacheHook, close_cache, open_cache
from monorun.commands.base import Command, CommandContext
from monorun.config.schema import PackageManager
from monorun.errors import MonorunError, ScriptExecutionError
from monorun.execution import BatchResult, RunOptions, Scheduler
from monorun.execution.runner import Spawner, spawn
from monorun.filters import FilterMode
from monorun.workspace import resolve_package_manager

if TYPE_CHECKING:
    from monorun.workspace import Workspace


@dataclass
class RunScriptOptions:
    """Options for run command.

    Attributes:
        script: Task or script name.
        concurrency: Parallel packages; falls back to the config default.
        force: Ignore cached results.
        skip_cache: Do not record results in the cache.
        package_manager: Package manager override.
        task_only: Fail unless ``script`` is a configured task.
    """

    script: str = "build"
    concurrency: int | None = None
    force: bool = False
    skip_cache: bool = False
    package_manager: PackageManager | None = None
    task_only: bool = False


class RunCommand(Command[BatchResult]):
    """Run a configured task, or a manifest script, across packages.

    A name matching a task in monorun.yaml runs that task with its
    prerequisites; any other name runs the package.json script directly.
    """

    def __init__(
        self,
        context: CommandContext,
        options: RunScriptOptions,
        *,
        cache: CacheHook | None = None,
        spawner: Spawner = spawn,
    ) -> None:
        super().__init__(context)
        self.options = options
        self._cache = cache
        self._spawner = spawner

    def run_options(self) -> RunOptions:
        concurrency = self.options.concurrency
        if concurrency is None:
            concurrency = self.workspace.config.command_defaults.concurrency
        return RunOptions(
            concurrency=concurrency,
            dry_run=self.context.dry_run,
            skip_cache=self.options.force,
            skip_cache_write=self.options.skip_cache,
            package_manager=self.options.package_manager,
        )

    async def execute(self) -> BatchResult:
        """Execute the task or script."""
        config = self.workspace.config
        name = self.options.script
        task = config.require_task(name) if self.options.task_only else config.get_task(name)

        graph = self.get_graph()
        run_options = self.run_options()

        cache = self._cache if self._cache is not None else open_cache(self.workspace.root, config)
        try:
            scheduler = Scheduler(cache, spawner=self._spawner)
            if task is not None:
                return await scheduler.run_task(
                    name,
                    task,
                    self.workspace.packages,
                    graph,
                    self.workspace.root,
                    run_options,
                )

            run_options.package_manager = resolve_package_manager(
                self.workspace.root, explicit=run_options.package_manager
            )
            return await scheduler.run_script(name, self.workspace.packages, graph, run_options)
        finally:
            if self._cache is None:
                close_cache(cache)


async def run_script(
    workspace: Workspace,
    script: str,
    *,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
    concurrency: int | None = None,
    dry_run: bool = False,
    force: bool = False,
    skip_cache: bool = False,
    package_manager: PackageManager | None = None,
    task_only: bool = False,
    cache: CacheHook | None = None,
    spawner: Spawner = spawn,
) -> BatchResult:
    """Convenience function to run a task or script.

    Args:
        workspace: Workspace to run in.
        script: Task or script name.
        filters: Filter tokens.
        filter_mode: "or" or "and".
        concurrency: Parallel packages.
        dry_run: Spawn nothing.
        force: Ignore cached results.
        skip_cache: Do not write cache entries.
        package_manager: Package manager override.
        task_only: Require ``script`` to be a configured task.
        cache: Cache to use instead of the configured one.
        spawner: Process spawner.

    Returns:
        Batch result with all execution results.
    """
    context = CommandContext(
        workspace=workspace,
        filters=filters or [],
        filter_mode=filter_mode,
        dry_run=dry_run,
    )
    options = RunScriptOptions(
        script=script,
        concurrency=concurrency,
        force=force,
        skip_cache=skip_cache,
        package_manager=package_manager,
        task_only=task_only,
    )
    cmd = RunCommand(context, options, cache=cache, spawner=spawner)
    return await cmd.execute()


async def handle_run_script(
    workspace: Workspace,
    script: str,
    *,
    console: Console,
    error_console: Console,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
    concurrency: int | None = None,
    dry_run: bool = False,
    force: bool = False,
    skip_cache: bool = False,
    package_manager: PackageManager | None = None,
    task_only: bool = False,
) -> None:
    """Run a task or script and report the outcome."""
    console.print(f"Running script '{script}' in order...")
    try:
        result = await run_script(
            workspace,
            script,
            filters=filters,
            filter_mode=filter_mode,
            concurrency=concurrency,
            dry_run=dry_run,
            force=force,
            skip_cache=skip_cache,
            package_manager=package_manager,
            task_only=task_only,
        )
    except ScriptExecutionError as err:
        error_console.print(f"[red]Error:[/red] {err.message}")
        raise typer.Exit(err.exit_code) from err
    except MonorunError as err:
        error_console.print(f"[red]Error:[/red] {err.message}")
        raise typer.Exit(1) from err

    duration_ms = sum(r.duration_ms for r in result)
    console.print(
        f"\n[green]All scripts completed successfully.[/green] "
        f"{result.success_count} ran, {result.cached_count} cached, "
        f"{result.skipped_count} skipped ({duration_ms}ms)"
    )
