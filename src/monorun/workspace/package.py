"""Workspace package model."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from monorun.errors import ConfigurationError

MANIFEST_FILENAME = "package.json"


def read_manifest(path: Path) -> dict[str, Any]:
    """Read and parse a package.json manifest.

    Raises:
        ConfigurationError: If the file is missing or not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read manifest: {e}", path=path) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in manifest: {e}", path=path) from e
    if not isinstance(data, dict):
        raise ConfigurationError("Manifest must be a JSON object", path=path)
    return data


@dataclass
class Package:
    """A package in the workspace.

    Attributes:
        name: Package name from its manifest.
        path: Package directory.
        manifest_path: Path to the package's package.json.
        dependencies: Declared dependency names. Names outside the
            workspace are kept here and ignored by the graph.
    """

    name: str
    path: Path
    manifest_path: Path
    dependencies: list[str] = field(default_factory=list)

    @classmethod
    def from_directory(cls, directory: Path) -> Package:
        """Load a package from a directory containing package.json."""
        manifest_path = directory / MANIFEST_FILENAME
        manifest = read_manifest(manifest_path)
        name = manifest.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Manifest has no name", path=manifest_path)
        deps = manifest.get("dependencies") or {}
        return cls(
            name=name,
            path=directory,
            manifest_path=manifest_path,
            dependencies=list(deps) if isinstance(deps, dict) else [],
        )

    def read_manifest(self) -> dict[str, Any]:
        """Read the current manifest contents."""
        return read_manifest(self.manifest_path)

    def get_script(self, script: str) -> str | None:
        """Return the command of a manifest script, or None if absent."""
        scripts = self.read_manifest().get("scripts") or {}
        if not isinstance(scripts, dict):
            return None
        command = scripts.get(script)
        return command if command else None

    @property
    def version(self) -> str | None:
        """Declared version, if any."""
        version = self.read_manifest().get("version")
        return str(version) if version else None
