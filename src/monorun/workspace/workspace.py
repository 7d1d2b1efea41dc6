"""Workspace discovery and package registry."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from monorun.config import MonorunConfig, load_config
from monorun.config.schema import PackageManager
from monorun.errors import ConfigurationError, PackageNotFoundError, WorkspaceNotFoundError
from monorun.log import get_logger
from monorun.workspace.graph import DependencyGraph
from monorun.workspace.package import MANIFEST_FILENAME, Package, read_manifest
from monorun.workspace.package_manager import detect_package_manager

if TYPE_CHECKING:
    from monorun.filters import FilterMode

logger = get_logger(__name__)


def find_workspace_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` to the first directory holding package.json.

    Raises:
        WorkspaceNotFoundError: If no such directory exists.
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        if (directory / MANIFEST_FILENAME).is_file():
            return directory
    raise WorkspaceNotFoundError(start)


def get_workspace_globs(root: Path, package_manager: PackageManager | None = None) -> list[str]:
    """Read the workspace member globs.

    pnpm keeps them in pnpm-workspace.yaml; the others use the
    ``workspaces`` field of the root package.json.
    """
    manager = package_manager or detect_package_manager(root)

    if manager is PackageManager.PNPM:
        pnpm_path = root / "pnpm-workspace.yaml"
        if pnpm_path.is_file():
            try:
                data = yaml.safe_load(pnpm_path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML: {e}", path=pnpm_path) from e
            packages = data.get("packages") if isinstance(data, dict) else None
            return [str(p) for p in packages] if isinstance(packages, list) else []

    manifest: dict[str, Any] = read_manifest(root / MANIFEST_FILENAME)
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, list):
        return [str(p) for p in workspaces]
    if isinstance(workspaces, dict) and isinstance(workspaces.get("packages"), list):
        return [str(p) for p in workspaces["packages"]]
    return []


def discover_packages(root: Path, globs: list[str] | None = None) -> dict[str, Package]:
    """Find all workspace packages under ``root``.

    Args:
        root: Workspace root.
        globs: Member globs; read from the workspace when omitted.

    Returns:
        Registry of packages keyed by name, in discovery order.

    Raises:
        WorkspaceNotFoundError: If the workspace declares no members.
    """
    if globs is None:
        globs = get_workspace_globs(root)
    if not globs:
        raise WorkspaceNotFoundError(root, "No workspaces defined in root package.json.")

    excluded: set[Path] = set()
    for pattern in globs:
        if pattern.startswith("!"):
            excluded.update(p.resolve() for p in root.glob(pattern[1:].rstrip("/")))

    directories: dict[Path, None] = {}
    for pattern in globs:
        if pattern.startswith("!"):
            continue
        for candidate in sorted(root.glob(pattern.rstrip("/"))):
            resolved = candidate.resolve()
            if resolved.is_dir() and resolved not in excluded:
                directories[resolved] = None

    packages: dict[str, Package] = {}
    for directory in directories:
        if not (directory / MANIFEST_FILENAME).is_file():
            continue
        package = Package.from_directory(directory)
        if package.name in packages:
            logger.warning(
                "Duplicate package name '%s' at %s, keeping %s",
                package.name,
                directory,
                packages[package.name].path,
            )
            continue
        packages[package.name] = package

    return packages


class Workspace:
    """A loaded workspace: root, configuration, packages and graph.

    Attributes:
        root: Workspace root directory.
        config: Parsed monorun.yaml.
        packages: Package registry keyed by name.
        graph: Dependency graph over all packages.
    """

    def __init__(
        self,
        root: Path,
        config: MonorunConfig,
        packages: dict[str, Package],
    ) -> None:
        self.root = root
        self.config = config
        self.packages = packages
        self.graph = DependencyGraph.from_packages(packages)

    @classmethod
    def discover(cls, path: Path | None = None) -> Workspace:
        """Load the workspace containing ``path`` (default: cwd).

        Raises:
            WorkspaceNotFoundError: If no workspace root is found.
            ConfigurationError: If monorun.yaml is missing or invalid.
        """
        root = find_workspace_root(path)
        packages = discover_packages(root)
        config = load_config(root)
        return cls(root, config, packages)

    def get_package(self, name: str) -> Package:
        """Get a package by name.

        Raises:
            PackageNotFoundError: If no package has that name.
        """
        try:
            return self.packages[name]
        except KeyError:
            raise PackageNotFoundError(name) from None

    def filtered_graph(
        self,
        filters: list[str] | None = None,
        mode: FilterMode = "or",
    ) -> DependencyGraph:
        """Build a fresh graph pruned to the packages selected by ``filters``."""
        from monorun.filters import build_dependency_graph

        return build_dependency_graph(self.packages, self.root, filters=filters, mode=mode)
