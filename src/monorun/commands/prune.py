"""Prune command implementation."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

import typer
from rich.console import Console

from monorun.commands.base import Command, CommandContext
from monorun.errors import ConfigurationError, MonorunError
from monorun.filters import FilterMode
from monorun.utils.copy import copy_filtered, load_ignore_patterns, should_ignore
from monorun.workspace.package import MANIFEST_FILENAME
from monorun.workspace.workspace import Workspace


@dataclass
class PruneResult:
    """Result of prune command."""

    output_path: Path
    packages_pruned: list[str] = field(default_factory=list)
    files_copied: int = 0


@dataclass
class PruneOptions:
    """Options for prune command.

    Attributes:
        out_dir: Output directory, relative to the workspace root.
        docker: Split output into ``json/`` (manifests) and ``full/``.
        use_gitignore: Read ignore patterns from .gitignore instead of
            .monorunignore.
    """

    out_dir: str = "out"
    docker: bool = False
    use_gitignore: bool = False


class PruneCommand(Command[PruneResult]):
    """Copy the selected packages and the root files into a standalone tree."""

    def __init__(self, context: CommandContext, options: PruneOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or PruneOptions()

    def _output_path(self) -> Path:
        """Resolve the output directory, refusing anything it is unsafe to wipe.

        Raises:
            ConfigurationError: If the directory is outside the workspace
                root, is the root itself, or overlaps a package directory.
        """
        root = self.workspace.root.resolve()
        output_path = (root / self.options.out_dir).resolve()
        if output_path == root or not output_path.is_relative_to(root):
            raise ConfigurationError(
                f"Output directory must be inside the workspace root: {self.options.out_dir}"
            )
        for package in self.workspace.packages.values():
            package_path = package.path.resolve()
            if output_path.is_relative_to(package_path) or package_path.is_relative_to(
                output_path
            ):
                raise ConfigurationError(
                    f"Output directory overlaps package '{package.name}': "
                    f"{self.options.out_dir}"
                )
        return output_path

    async def execute(self) -> PruneResult:
        output_path = self._output_path()
        root = self.workspace.root
        graph = self.get_graph()

        if output_path.exists():
            shutil.rmtree(output_path)

        json_dir = output_path / "json"
        full_dir = output_path / "full" if self.options.docker else output_path
        if self.options.docker:
            json_dir.mkdir(parents=True, exist_ok=True)
        full_dir.mkdir(parents=True, exist_ok=True)

        patterns = load_ignore_patterns(root, self.options.use_gitignore)
        result = PruneResult(output_path=output_path)

        # Root-level files only; directories come from the packages below.
        for entry in sorted(root.iterdir()):
            if not entry.is_file() or should_ignore(root, patterns, entry):
                continue
            if self.options.docker and MANIFEST_FILENAME in entry.name:
                shutil.copy2(entry, json_dir / entry.name)
            shutil.copy2(entry, full_dir / entry.name)
            result.files_copied += 1

        for name in graph.nodes():
            package = self.workspace.get_package(name)
            relative = package.path.relative_to(root)
            if self.options.docker:
                manifest_dest = json_dir / relative / MANIFEST_FILENAME
                manifest_dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(package.manifest_path, manifest_dest)
            result.files_copied += copy_filtered(root, package.path, full_dir / relative, patterns)
            result.packages_pruned.append(name)

        return result


async def prune(
    workspace: Workspace,
    *,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
    out_dir: str = "out",
    docker: bool = False,
    use_gitignore: bool = False,
) -> PruneResult:
    """Convenience function to prune the workspace."""
    context = CommandContext(workspace=workspace, filters=filters or [], filter_mode=filter_mode)
    options = PruneOptions(out_dir=out_dir, docker=docker, use_gitignore=use_gitignore)
    return await PruneCommand(context, options).execute()


async def handle_prune_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
    out_dir: str = "out",
    docker: bool = False,
    use_gitignore: bool = False,
) -> None:
    try:
        result = await prune(
            workspace,
            filters=filters,
            filter_mode=filter_mode,
            out_dir=out_dir,
            docker=docker,
            use_gitignore=use_gitignore,
        )
    except MonorunError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    console.print(
        f"[green]Pruned {len(result.packages_pruned)} packages to {result.output_path}[/green]"
    )
    for name in result.packages_pruned:
        console.print(f"  - {name}")
