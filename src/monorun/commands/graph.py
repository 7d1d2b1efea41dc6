"""Graph command implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from rich.console import Console

from monorun.commands.base import CommandContext, SyncCommand
from monorun.errors import MonorunError
from monorun.filters import FilterMode

if TYPE_CHECKING:
    from monorun.workspace import Workspace


class GraphCommand(SyncCommand[str]):
    """Export the selected dependency graph in DOT format."""

    def execute(self) -> str:
        return self.get_graph().to_dot()


def handle_graph_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    filters: list[str] | None = None,
    filter_mode: FilterMode = "or",
) -> None:
    context = CommandContext(workspace=workspace, filters=filters or [], filter_mode=filter_mode)
    try:
        dot = GraphCommand(context).execute()
    except MonorunError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e
    console.out(dot, highlight=False)
