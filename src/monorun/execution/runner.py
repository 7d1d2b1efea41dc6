"""Process spawning for package scripts."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable
from pathlib import Path

from monorun.log import get_logger

logger = get_logger(__name__)

Spawner = Callable[[list[str], Path, dict[str, str] | None], Awaitable[int]]


async def spawn(
    command: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> int:
    """Run a command with inherited standard streams.

    Args:
        command: Program and arguments.
        cwd: Working directory.
        env: Extra environment variables (merged with the current env).

    Returns:
        The process exit code. A command that cannot be started
        returns 1.
    """
    run_env = os.environ.copy()
    if env:
        run_env.update(env)

    try:
        process = await asyncio.create_subprocess_exec(*command, cwd=str(cwd), env=run_env)
    except OSError as e:
        logger.error("Cannot start %s: %s", " ".join(command), e)
        return 1

    try:
        return await process.wait()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise


def package_env(name: str, path: Path) -> dict[str, str]:
    """Environment variables describing the package being run."""
    return {
        "MONORUN_PACKAGE_NAME": name,
        "MONORUN_PACKAGE_PATH": str(path),
    }
