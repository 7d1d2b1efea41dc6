"""Script execution across the dependency graph."""

from monorun.execution.results import BatchResult, ExecutionResult, ExecutionStatus
from monorun.execution.runner import package_env, spawn
from monorun.execution.scheduler import RunOptions, Scheduler
from monorun.execution.tasks import TaskUnit, expand_task

__all__ = [
    "BatchResult",
    "ExecutionResult",
    "ExecutionStatus",
    "RunOptions",
    "Scheduler",
    "TaskUnit",
    "expand_task",
    "package_env",
    "spawn",
]
