"""List command implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from monorun.commands.base import CommandContext, SyncCommand
from monorun.errors import MonorunError
from monorun.filters import FilterMode
from monorun.utils.formats import OutputFormat, serialize

if TYPE_CHECKING:
    from monorun.workspace import Workspace

UNKNOWN_VERSION = "Unknown version"


@dataclass
class PackageInfo:
    """Information about a package for display."""

    name: str
    version: str | None
    path: str
    dependencies: list[str]


@dataclass
class ListResult:
    """Result of list command."""

    packages: list[PackageInfo]

    def versions(self) -> dict[str, str]:
        """Mapping of package name to version, for serialization."""
        return {p.name: p.version or UNKNOWN_VERSION for p in self.packages}


class ListCommand(SyncCommand[ListResult]):
    """List the packages selected by the filters."""

    def execute(self) -> ListResult:
        graph = self.get_graph()
        infos: list[PackageInfo] = []
        for name in graph.nodes():
            pkg = self.workspace.get_package(name)
            infos.append(
                PackageInfo(
                    name=name,
                    version=pkg.version,
                    path=pkg.path.relative_to(self.workspace.root).as_posix(),
                    dependencies=graph.successors(name),
                )
            )
        return ListResult(packages=infos)


def list_packages(
    workspace: Workspace,
    *,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
) -> ListResult:
    """Convenience function to list packages."""
    context = CommandContext(workspace=workspace, filters=filters or [], filter_mode=filter_mode)
    return ListCommand(context).execute()


def handle_list_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
    output: OutputFormat | None = None,
) -> None:
    try:
        result = list_packages(workspace, filters=filters, filter_mode=filter_mode)
    except MonorunError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    if output is not None:
        console.out(serialize(result.versions(), output), highlight=False)
        return

    table = Table(title="Packages")
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Path")
    table.add_column("Dependencies")

    for pkg in result.packages:
        deps = ", ".join(pkg.dependencies) if pkg.dependencies else "-"
        table.add_row(pkg.name, pkg.version or UNKNOWN_VERSION, pkg.path, deps)

    console.print(table)
    console.print(f"Total packages: {len(result.packages)}")
