"""Git diff operations."""

from __future__ import annotations

from pathlib import Path

from monorun.git.repo import run_git_command


def get_changed_files(root: Path, revision_range: str) -> list[str]:
    """Get files changed within a revision range.

    Args:
        root: Directory to run git in (the workspace root).
        revision_range: Range understood by ``git diff``, e.g. ``main...HEAD``.

    Returns:
        Changed paths relative to ``root``, in git's order.

    Raises:
        GitError: If the range is invalid or git fails.
    """
    result = run_git_command(["diff", "--name-only", "--relative", revision_range], cwd=root)
    return [line for line in result.stdout.splitlines() if line.strip()]
