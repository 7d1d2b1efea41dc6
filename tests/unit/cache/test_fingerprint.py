"""Tests for cache fingerprints."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from monorun.cache import fingerprint
from monorun.errors import CacheIOError, GitError
from monorun.workspace.package import Package


@pytest.fixture
def package(temp_dir: Path) -> Package:
    pkg_dir = temp_dir / "pkg"
    pkg_dir.mkdir()
    (pkg_dir / "package.json").write_text(json.dumps({"name": "pkg", "version": "1.0.0"}))
    (pkg_dir / "index.js").write_text("module.exports = 1;\n")
    (pkg_dir / "lib").mkdir()
    (pkg_dir / "lib" / "util.js").write_text("exports.x = 2;\n")
    return Package.from_directory(pkg_dir)


def tracked(*files: str) -> MagicMock:
    return MagicMock(return_value=list(files))


class TestFingerprint:
    def test_deterministic(self, package: Package) -> None:
        files = tracked("index.js", "lib/util.js", "package.json")
        assert fingerprint(package, "build", tracked_files=files) == fingerprint(
            package, "build", tracked_files=files
        )

    def test_hex_sha256(self, package: Package) -> None:
        digest = fingerprint(package, "build", tracked_files=tracked("index.js"))
        assert len(digest) == 64
        int(digest, 16)

    def test_depends_on_script(self, package: Package) -> None:
        files = tracked("index.js")
        assert fingerprint(package, "build", tracked_files=files) != fingerprint(
            package, "test", tracked_files=files
        )

    def test_tracked_content_change(self, package: Package) -> None:
        files = tracked("index.js", "lib/util.js")
        before = fingerprint(package, "build", tracked_files=files)
        (package.path / "lib" / "util.js").write_text("exports.x = 3;\n")
        assert fingerprint(package, "build", tracked_files=files) != before

    def test_untracked_change_ignored(self, package: Package) -> None:
        files = tracked("index.js")
        before = fingerprint(package, "build", tracked_files=files)
        (package.path / "notes.txt").write_text("scratch\n")
        assert fingerprint(package, "build", tracked_files=files) == before

    def test_version_change(self, package: Package) -> None:
        files = tracked("index.js")
        before = fingerprint(package, "build", tracked_files=files)
        package.manifest_path.write_text(json.dumps({"name": "pkg", "version": "1.0.1"}))
        assert fingerprint(package, "build", tracked_files=files) != before

    def test_file_order_is_sorted(self, package: Package) -> None:
        assert fingerprint(
            package, "build", tracked_files=tracked("lib/util.js", "index.js")
        ) == fingerprint(package, "build", tracked_files=tracked("index.js", "lib/util.js"))

    def test_missing_tracked_file_skipped(self, package: Package) -> None:
        assert fingerprint(
            package, "build", tracked_files=tracked("index.js", "deleted.js")
        ) == fingerprint(package, "build", tracked_files=tracked("index.js"))

    def test_git_failure_raises_cache_error(self, package: Package) -> None:
        failing = MagicMock(side_effect=GitError("not a git repository"))
        with pytest.raises(CacheIOError, match="not a git repository"):
            fingerprint(package, "build", tracked_files=failing)

    def test_uses_git_by_default(self, package: Package) -> None:
        with patch("monorun.cache.fingerprinting.list_tracked_files") as mock_ls:
            mock_ls.return_value = ["index.js"]
            fingerprint(package, "build")
            mock_ls.assert_called_once_with(package.path)
