"""Package manager detection."""

from __future__ import annotations

from pathlib import Path

from monorun.config.schema import PackageManager
from monorun.log import get_logger

logger = get_logger(__name__)

# Checked in order; the first lockfile found wins.
LOCKFILES: tuple[tuple[str, PackageManager], ...] = (
    ("bun.lockb", PackageManager.BUN),
    ("package-lock.json", PackageManager.NPM),
    ("yarn.lock", PackageManager.YARN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
)

DEFAULT_PACKAGE_MANAGER = PackageManager.NPM


def detect_package_manager(root: Path) -> PackageManager:
    """Detect the package manager from the lockfile in ``root``.

    Falls back to npm with a warning when no lockfile exists.
    """
    for filename, manager in LOCKFILES:
        if (root / filename).is_file():
            return manager
    logger.warning(
        "No package manager lock file found in %s. Defaulting to %s.",
        root,
        DEFAULT_PACKAGE_MANAGER.value,
    )
    return DEFAULT_PACKAGE_MANAGER


def resolve_package_manager(
    root: Path,
    *,
    explicit: PackageManager | str | None = None,
    task_override: PackageManager | str | None = None,
) -> PackageManager:
    """Pick the package manager for a run.

    Precedence: explicit override, task override, lockfile detection,
    then the default.
    """
    for choice in (explicit, task_override):
        if choice:
            return PackageManager(choice)
    return detect_package_manager(root)
