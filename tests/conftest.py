"""Shared test fixtures for monorun tests."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root (doesn't override existing env vars)
load_dotenv(Path(__file__).parent.parent / ".env")


def write_manifest(directory: Path, data: dict[str, Any]) -> Path:
    """Write a package.json into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def sample_monorun_yaml() -> str:
    """Sample monorun.yaml content."""
    return """\
tasks:
  build:
    dependsOn:
      - ^compile
  test:
    dependsOn:
      - build
    cache:
      skipWrite: true
  lint:

cache:
  path: .monorun/cache.sqlite

command_defaults:
  concurrency: 2
"""


@pytest.fixture
def workspace_dir(temp_dir: Path, sample_monorun_yaml: str) -> Path:
    """Create a workspace where pkg-c depends on pkg-b, which depends on pkg-a."""
    (temp_dir / "monorun.yaml").write_text(sample_monorun_yaml)
    (temp_dir / "package-lock.json").write_text("{}\n")
    write_manifest(
        temp_dir,
        {"name": "root", "private": True, "workspaces": ["packages/*"]},
    )

    packages_dir = temp_dir / "packages"

    pkg_a = packages_dir / "pkg-a"
    write_manifest(
        pkg_a,
        {
            "name": "pkg-a",
            "version": "1.0.0",
            "scripts": {"compile": "tsc", "build": "tsc -b", "test": "vitest"},
        },
    )
    (pkg_a / "src").mkdir()
    (pkg_a / "src" / "index.ts").write_text("export const a = 1;\n")

    pkg_b = packages_dir / "pkg-b"
    write_manifest(
        pkg_b,
        {
            "name": "pkg-b",
            "version": "2.0.0",
            "dependencies": {"pkg-a": "workspace:*", "lodash": "^4.17.21"},
            "scripts": {"compile": "tsc", "build": "tsc -b"},
        },
    )
    (pkg_b / "src").mkdir()
    (pkg_b / "src" / "index.ts").write_text("export const b = 2;\n")

    pkg_c = packages_dir / "pkg-c"
    write_manifest(
        pkg_c,
        {
            "name": "pkg-c",
            "version": "0.1.0",
            "dependencies": {"pkg-b": "workspace:*"},
            "scripts": {"compile": "tsc", "build": "tsc -b", "test": "vitest"},
        },
    )
    (pkg_c / "src").mkdir()
    (pkg_c / "src" / "index.ts").write_text("export const c = 3;\n")

    return temp_dir


@pytest.fixture
def git_workspace(workspace_dir: Path) -> Path:
    """Create a workspace with git initialized."""
    os.system(f"cd {workspace_dir} && git init -q")
    os.system(f"cd {workspace_dir} && git config user.email 'test@test.com'")
    os.system(f"cd {workspace_dir} && git config user.name 'Test'")
    os.system(f"cd {workspace_dir} && git add -A")
    os.system(f"cd {workspace_dir} && git commit -q -m 'Initial commit'")
    return workspace_dir
