"""Git command execution and tracked-file listing."""

from __future__ import annotations

import subprocess
from pathlib import Path

from monorun.errors import GitError


def run_git_command(
    args: list[str],
    cwd: Path | None = None,
    *,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run ``git`` with ``args`` and capture its output.

    Args:
        args: Arguments after ``git``.
        cwd: Directory to run in.
        check: Raise when git exits non-zero.

    Raises:
        GitError: If git is missing, or exits non-zero while ``check`` is set.
    """
    cmd = ["git", *args]

    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise GitError("Git is not installed") from e

    if check and result.returncode != 0:
        raise GitError(
            result.stderr.strip() or f"git exited with code {result.returncode}",
            command=" ".join(cmd),
        )
    return result


def list_tracked_files(directory: Path) -> list[str]:
    """List files tracked by git under a directory.

    Args:
        directory: Directory to list (used as the working directory).

    Returns:
        Paths relative to ``directory``, sorted lexicographically.

    Raises:
        GitError: If git fails (for example, outside a repository).
    """
    result = run_git_command(["ls-files", "-z", "--", "."], cwd=directory)
    return sorted(f for f in result.stdout.split("\0") if f)
