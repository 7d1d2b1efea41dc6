"""Workspace discovery, packages and the dependency graph."""

from monorun.workspace.graph import DependencyGraph
from monorun.workspace.package import Package, read_manifest
from monorun.workspace.package_manager import detect_package_manager, resolve_package_manager
from monorun.workspace.workspace import (
    Workspace,
    discover_packages,
    find_workspace_root,
    get_workspace_globs,
)

__all__ = [
    "DependencyGraph",
    "Package",
    "Workspace",
    "detect_package_manager",
    "discover_packages",
    "find_workspace_root",
    "get_workspace_globs",
    "read_manifest",
    "resolve_package_manager",
]
