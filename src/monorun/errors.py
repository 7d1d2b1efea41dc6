"""Exception hierarchy for monorun."""

from __future__ import annotations

from pathlib import Path


class MonorunError(Exception):
    """Base class for all monorun errors.

    Attributes:
        message: Human readable error message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MonorunError):
    """Invalid or missing workspace configuration."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)
        self.path = path


class WorkspaceNotFoundError(ConfigurationError):
    """No workspace root could be located."""

    def __init__(self, start: Path, reason: str | None = None) -> None:
        message = reason or f"No workspace root found from {start}"
        super().__init__(message)
        self.start = start


class TaskNotFoundError(ConfigurationError):
    """A task was requested that the configuration does not define."""

    def __init__(self, task_name: str, available: list[str]) -> None:
        listing = ", ".join(available) if available else "none"
        super().__init__(f"Task '{task_name}' not found. Available: {listing}")
        self.task_name = task_name
        self.available = available


class PackageNotFoundError(MonorunError):
    """A package name does not exist in the workspace."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Package '{name}' not found in workspace")
        self.name = name


class FilterError(MonorunError):
    """A package filter matched nothing."""

    def __init__(self, filters: list[str], message: str | None = None) -> None:
        super().__init__(
            message or "No packages matched the filter. Please check your filter syntax."
        )
        self.filters = filters


class GraphError(MonorunError):
    """The dependency graph cannot be used for the requested operation."""


class CyclicDependencyError(GraphError):
    """The dependency graph contains a cycle."""

    def __init__(self, cycle: list[str] | None = None) -> None:
        if cycle:
            message = f"Cyclic dependency detected: {' -> '.join(cycle)}"
        else:
            message = "Graph must be acyclic for topological ordering"
        super().__init__(message)
        self.cycle = cycle or []


class ScriptExecutionError(MonorunError):
    """A package script exited with a non-zero code."""

    def __init__(self, package_name: str, script: str, exit_code: int) -> None:
        super().__init__(f"[{package_name}] '{script}' failed with exit code {exit_code}")
        self.package_name = package_name
        self.script = script
        self.exit_code = exit_code


class CacheIOError(MonorunError):
    """The task cache could not be read or written."""


class GitError(MonorunError):
    """A git command failed."""

    def __init__(self, message: str, *, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command
