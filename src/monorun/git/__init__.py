"""Git integration."""

from monorun.git.diff import get_changed_files
from monorun.git.repo import list_tracked_files, run_git_command

__all__ = [
    "get_changed_files",
    "list_tracked_files",
    "run_git_command",
]
