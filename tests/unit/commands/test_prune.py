"""Tests for prune command."""

from __future__ import annotations

from pathlib import Path

import pytest
import typer
from rich.console import Console

from monorun.commands.prune import handle_prune_command, prune
from monorun.errors import ConfigurationError
from monorun.workspace.workspace import Workspace


@pytest.fixture
def workspace(workspace_dir: Path) -> Workspace:
    (workspace_dir / "packages" / "pkg-a" / "src" / "index.test.ts").write_text("test()")
    (workspace_dir / "packages" / "pkg-a" / "node_modules").mkdir()
    (workspace_dir / "packages" / "pkg-a" / "node_modules" / "dep.js").write_text("")
    (workspace_dir / "tsconfig.json").write_text("{}")
    return Workspace.discover(workspace_dir)


class TestPrune:
    async def test_copies_selected_packages(self, workspace: Workspace) -> None:
        result = await prune(workspace, filters=["pkg-b..."])
        out = workspace.root / "out"

        assert result.output_path == out
        assert result.packages_pruned == ["pkg-a", "pkg-b"]
        assert (out / "package.json").exists()
        assert (out / "monorun.yaml").exists()
        assert (out / "tsconfig.json").exists()
        assert (out / "packages" / "pkg-a" / "src" / "index.ts").exists()
        assert (out / "packages" / "pkg-b" / "package.json").exists()
        assert not (out / "packages" / "pkg-c").exists()

    async def test_ignores_tests_and_dependencies(self, workspace: Workspace) -> None:
        await prune(workspace)
        pkg_a = workspace.root / "out" / "packages" / "pkg-a"

        assert not (pkg_a / "src" / "index.test.ts").exists()
        assert not (pkg_a / "node_modules").exists()

    async def test_monorunignore(self, workspace: Workspace) -> None:
        (workspace.root / ".monorunignore").write_text("tsconfig.json\nsrc\n")
        await prune(workspace)
        out = workspace.root / "out"

        assert not (out / "tsconfig.json").exists()
        assert not (out / "packages" / "pkg-a" / "src").exists()
        assert (out / "packages" / "pkg-a" / "package.json").exists()

    async def test_docker_layout(self, workspace: Workspace) -> None:
        await prune(workspace, docker=True, out_dir="dist")
        out = workspace.root / "dist"

        assert (out / "json" / "package.json").exists()
        assert (out / "json" / "packages" / "pkg-c" / "package.json").exists()
        assert not (out / "json" / "packages" / "pkg-c" / "src").exists()
        assert not (out / "json" / "monorun.yaml").exists()
        assert (out / "full" / "monorun.yaml").exists()
        assert (out / "full" / "packages" / "pkg-c" / "src" / "index.ts").exists()

    async def test_replaces_previous_output(self, workspace: Workspace) -> None:
        stale = workspace.root / "out" / "stale.txt"
        stale.parent.mkdir()
        stale.write_text("old")

        await prune(workspace)
        assert not stale.exists()

    async def test_handle(self, workspace: Workspace) -> None:
        console = Console(record=True, width=200)
        await handle_prune_command(
            workspace, console=console, error_console=console, filters=["pkg-a"]
        )
        assert "Pruned 1 packages" in console.export_text()


class TestOutputDirectory:
    async def test_rejects_directory_outside_root(
        self, workspace: Workspace, tmp_path: Path
    ) -> None:
        outside = tmp_path / "precious"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")

        with pytest.raises(ConfigurationError, match="inside the workspace root"):
            await prune(workspace, out_dir=str(outside))
        assert (outside / "keep.txt").exists()

    async def test_rejects_parent_traversal(self, workspace: Workspace) -> None:
        with pytest.raises(ConfigurationError):
            await prune(workspace, out_dir="../elsewhere")

    async def test_rejects_workspace_root(self, workspace: Workspace) -> None:
        with pytest.raises(ConfigurationError):
            await prune(workspace, out_dir=".")
        assert (workspace.root / "package.json").exists()

    @pytest.mark.parametrize("out_dir", ["packages", "packages/pkg-a", "packages/pkg-a/out"])
    async def test_rejects_package_overlap(self, workspace: Workspace, out_dir: str) -> None:
        with pytest.raises(ConfigurationError, match="overlaps package"):
            await prune(workspace, out_dir=out_dir)
        assert (workspace.root / "packages" / "pkg-a" / "src" / "index.ts").exists()

    async def test_handle_reports_unsafe_directory(self, workspace: Workspace) -> None:
        console = Console(record=True, width=200)
        with pytest.raises(typer.Exit):
            await handle_prune_command(
                workspace, console=console, error_console=console, out_dir="."
            )
        assert "inside the workspace root" in console.export_text()
