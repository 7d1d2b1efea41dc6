"""monorun commands."""

from monorun.commands.base import Command, CommandContext, SyncCommand
from monorun.commands.graph import GraphCommand, handle_graph_command
from monorun.commands.list import (
    ListCommand,
    ListResult,
    PackageInfo,
    handle_list_command,
    list_packages,
)
from monorun.commands.prune import (
    PruneCommand,
    PruneOptions,
    PruneResult,
    handle_prune_command,
    prune,
)
from monorun.commands.run import RunCommand, RunScriptOptions, handle_run_script, run_script

__all__ = [
    # Base
    "Command",
    "SyncCommand",
    "CommandContext",
    # Run
    "RunCommand",
    "RunScriptOptions",
    "run_script",
    "handle_run_script",
    # List
    "ListCommand",
    "ListResult",
    "PackageInfo",
    "list_packages",
    "handle_list_command",
    # Graph
    "GraphCommand",
    "handle_graph_command",
    # Prune
    "PruneCommand",
    "PruneOptions",
    "PruneResult",
    "prune",
    "handle_prune_command",
]
