"""monorun - task runner for JavaScript monorepos.

Runs package.json scripts across workspace packages in dependency order,
with package filtering, git-based change detection and a result cache.
"""

from monorun.config import MonorunConfig, load_config
from monorun.errors import (
    CacheIOError,
    ConfigurationError,
    CyclicDependencyError,
    FilterError,
    GitError,
    MonorunError,
    PackageNotFoundError,
    ScriptExecutionError,
    TaskNotFoundError,
    WorkspaceNotFoundError,
)
from monorun.execution import BatchResult, ExecutionResult, ExecutionStatus, Scheduler
from monorun.filters import FilterResolver, build_dependency_graph
from monorun.workspace import DependencyGraph, Package, Workspace

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "Package",
    "DependencyGraph",
    "FilterResolver",
    "Scheduler",
    "build_dependency_graph",
    # Config
    "MonorunConfig",
    "load_config",
    # Execution
    "BatchResult",
    "ExecutionResult",
    "ExecutionStatus",
    # Errors
    "MonorunError",
    "ConfigurationError",
    "WorkspaceNotFoundError",
    "TaskNotFoundError",
    "PackageNotFoundError",
    "FilterError",
    "CyclicDependencyError",
    "ScriptExecutionError",
    "CacheIOError",
    "GitError",
]
