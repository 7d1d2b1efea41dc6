"""Shared command plumbing."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from monorun.filters import FilterMode
from monorun.workspace import DependencyGraph, Workspace

TResult = TypeVar("TResult")


@dataclass
class CommandContext:
    """Inputs common to every command.

    Attributes:
        workspace: Loaded workspace.
        filters: Filter tokens; an empty list selects every package.
        filter_mode: How the tokens combine.
        dry_run: Resolve everything but spawn no scripts.
    """

    workspace: Workspace
    filters: list[str] = field(default_factory=list)
    filter_mode: FilterMode = "or"
    dry_run: bool = False


class _BaseCommand:
    def __init__(self, context: CommandContext) -> None:
        self.context = context
        self.workspace = context.workspace

    def get_graph(self) -> DependencyGraph:
        """Dependency graph pruned to the context's filters."""
        return self.workspace.filtered_graph(self.context.filters, self.context.filter_mode)


class Command(_BaseCommand, ABC, Generic[TResult]):
    """A command that awaits subprocesses or other I/O."""

    @abstractmethod
    async def execute(self) -> TResult: ...


class SyncCommand(_BaseCommand, ABC, Generic[TResult]):
    """A command that only reads the workspace."""

    @abstractmethod
    def execute(self) -> TResult: ...
