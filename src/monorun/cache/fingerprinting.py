"""Content fingerprints for (package, script) pairs."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable
from pathlib import Path

from monorun.errors import CacheIOError, ConfigurationError, GitError
from monorun.git import list_tracked_files
from monorun.workspace.package import Package

TrackedFilesFn = Callable[[Path], Iterable[str]]

_CHUNK_SIZE = 1024 * 1024


def _update_from_file(digest: hashlib._Hash, path: Path) -> None:
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)


def fingerprint(
    package: Package,
    script: str,
    *,
    tracked_files: TrackedFilesFn = list_tracked_files,
) -> str:
    """Compute the sha256 fingerprint of a script's inputs.

    The digest is fed, in order: the script name, the package name, the
    declared version (if any), then the contents of every git-tracked file
    in the package directory sorted by path. Tracked files missing from
    disk are skipped.

    Args:
        package: Package owning the script.
        script: Script name.
        tracked_files: Lists tracked files relative to a directory.

    Returns:
        Hex digest.

    Raises:
        CacheIOError: If the inputs cannot be read.
    """
    digest = hashlib.sha256()
    digest.update(script.encode("utf-8"))
    digest.update(package.name.encode("utf-8"))

    try:
        version = package.version
        files = sorted(tracked_files(package.path))
    except (ConfigurationError, GitError) as e:
        raise CacheIOError(f"Cannot fingerprint {package.name}: {e.message}") from e

    if version:
        digest.update(version.encode("utf-8"))

    for relative in files:
        path = package.path / relative
        if not path.is_file():
            continue
        try:
            _update_from_file(digest, path)
        except OSError as e:
            raise CacheIOError(f"Cannot read {path}: {e}") from e

    return digest.hexdigest()
