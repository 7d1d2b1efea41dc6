"""monorun CLI application."""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from monorun.config.schema import PackageManager
from monorun.errors import MonorunError
from monorun.log import configure_logging, get_logger
from monorun.utils.formats import OutputFormat
from monorun.workspace import Workspace

logger = get_logger(__name__)


class FilterModeChoice(str, Enum):
    """How multiple --filter values combine."""

    OR = "or"
    AND = "and"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from monorun import __version__

        print(f"monorun {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="monorun",
    help="Task runner for JavaScript monorepos",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)


@app.callback()
def _app_callback(
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Task runner for JavaScript monorepos."""
    configure_logging(verbose=verbose, console=error_console)


def get_workspace(path: Path | None = None) -> Workspace:
    """Load workspace from current directory or specified path."""
    try:
        return Workspace.discover(path)
    except MonorunError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


FilterOption = Annotated[
    list[str] | None,
    typer.Option(
        "--filter",
        "-f",
        help="Package filter: name, glob, pkg..., ...pkg, !pkg or [git-range]. Repeatable.",
    ),
]
FilterModeOption = Annotated[
    FilterModeChoice,
    typer.Option("--filter-mode", "-m", help="Combine filters with 'or' (union) or 'and'"),
]
ConcurrencyOption = Annotated[
    int | None,
    typer.Option("--concurrency", "-c", min=1, help="Maximum packages running at once"),
]
DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", "-d", help="Show what would run without spawning scripts"),
]
ForceOption = Annotated[
    bool,
    typer.Option("--force", "-F", help="Ignore cached results"),
]
SkipCacheOption = Annotated[
    bool,
    typer.Option("--skip-cache", help="Do not record results in the cache"),
]
PackageManagerOption = Annotated[
    PackageManager | None,
    typer.Option("--package-manager", "-p", help="Package manager to run scripts with"),
]
WatchOption = Annotated[
    bool,
    typer.Option("--watch", "-w", help="Accepted for compatibility; has no effect"),
]


def _execute(
    name: str,
    *,
    filters: list[str] | None,
    filter_mode: FilterModeChoice,
    concurrency: int | None,
    dry_run: bool,
    force: bool,
    skip_cache: bool,
    package_manager: PackageManager | None,
    watch: bool,
    task_only: bool,
) -> None:
    from monorun.commands import handle_run_script

    if watch:
        logger.warning("--watch is not supported; running once")

    workspace = get_workspace()
    asyncio.run(
        handle_run_script(
            workspace,
            name,
            console=console,
            error_console=error_console,
            filters=filters,
            filter_mode=filter_mode.value,
            concurrency=concurrency,
            dry_run=dry_run,
            force=force,
            skip_cache=skip_cache,
            package_manager=package_manager,
            task_only=task_only,
        )
    )


@app.command("run")
def run_cmd(
    script: Annotated[str, typer.Argument(help="Task or script name to run")] = "build",
    filters: FilterOption = None,
    filter_mode: FilterModeOption = FilterModeChoice.OR,
    concurrency: ConcurrencyOption = None,
    dry_run: DryRunOption = False,
    force: ForceOption = False,
    skip_cache: SkipCacheOption = False,
    package_manager: PackageManagerOption = None,
    watch: WatchOption = False,
) -> None:
    """Run a task or package script across packages in dependency order."""
    _execute(
        script,
        filters=filters,
        filter_mode=filter_mode,
        concurrency=concurrency,
        dry_run=dry_run,
        force=force,
        skip_cache=skip_cache,
        package_manager=package_manager,
        watch=watch,
        task_only=False,
    )


@app.command("task")
def task_cmd(
    name: Annotated[str, typer.Argument(help="Task name from monorun.yaml")],
    filters: FilterOption = None,
    filter_mode: FilterModeOption = FilterModeChoice.OR,
    concurrency: ConcurrencyOption = None,
    dry_run: DryRunOption = False,
    force: ForceOption = False,
    skip_cache: SkipCacheOption = False,
    package_manager: PackageManagerOption = None,
    watch: WatchOption = False,
) -> None:
    """Run a configured task together with its prerequisites."""
    _execute(
        name,
        filters=filters,
        filter_mode=filter_mode,
        concurrency=concurrency,
        dry_run=dry_run,
        force=force,
        skip_cache=skip_cache,
        package_manager=package_manager,
        watch=watch,
        task_only=True,
    )


@app.command("ls")
def list_cmd(
    filters: FilterOption = None,
    filter_mode: FilterModeOption = FilterModeChoice.OR,
    output: Annotated[
        OutputFormat | None,
        typer.Option("--output", "-o", help="Print name/version pairs in this format"),
    ] = None,
) -> None:
    """List workspace packages."""
    from monorun.commands import handle_list_command

    workspace = get_workspace()
    handle_list_command(
        workspace,
        console=console,
        error_console=error_console,
        filters=filters,
        filter_mode=filter_mode.value,
        output=output,
    )


@app.command("graph")
def graph_cmd(
    filters: FilterOption = None,
    filter_mode: FilterModeOption = FilterModeChoice.OR,
) -> None:
    """Print the dependency graph in DOT format."""
    from monorun.commands import handle_graph_command

    workspace = get_workspace()
    handle_graph_command(
        workspace,
        console=console,
        error_console=error_console,
        filters=filters,
        filter_mode=filter_mode.value,
    )


@app.command("prune")
def prune_cmd(
    filters: FilterOption = None,
    filter_mode: FilterModeOption = FilterModeChoice.OR,
    out_dir: Annotated[
        str,
        typer.Option("--out-dir", help="Output directory"),
    ] = "out",
    docker: Annotated[
        bool,
        typer.Option("--docker", help="Split output into json/ and full/ for layered images"),
    ] = False,
    use_gitignore: Annotated[
        bool,
        typer.Option("--use-gitignore", help="Read ignore patterns from .gitignore"),
    ] = False,
) -> None:
    """Copy the selected packages into a standalone output tree."""
    from monorun.commands import handle_prune_command

    workspace = get_workspace()
    asyncio.run(
        handle_prune_command(
            workspace,
            console=console,
            error_console=error_console,
            filters=filters,
            filter_mode=filter_mode.value,
            out_dir=out_dir,
            docker=docker,
            use_gitignore=use_gitignore,
        )
    )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
