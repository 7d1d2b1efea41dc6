"""Filtered directory copying for workspace pruning."""

from __future__ import annotations

import fnmatch
import shutil
from pathlib import Path

IGNORE_FILENAME = ".monorunignore"

DEFAULT_IGNORE_PATTERNS = [
    "**/__tests__/**",
    "**/*.test.*",
    "**/*.spec.*",
    "**/node_modules/**",
    "**/.git/**",
]


def load_ignore_patterns(root: Path, use_gitignore: bool = False) -> list[str]:
    """Read ignore patterns from .monorunignore (or .gitignore).

    Blank lines and comments are dropped. The default patterns are always
    appended.
    """
    source = root / (".gitignore" if use_gitignore else IGNORE_FILENAME)
    patterns: list[str] = []
    if source.is_file():
        for line in source.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                patterns.append(line)
    patterns.extend(DEFAULT_IGNORE_PATTERNS)
    return patterns


def _match(relative: str, pattern: str) -> bool:
    pattern = pattern.rstrip("/")
    if pattern.startswith("/"):
        pattern = pattern[1:]
    if fnmatch.fnmatch(relative, pattern):
        return True
    if pattern.startswith("**/") and fnmatch.fnmatch(relative, pattern[3:]):
        return True
    # A trailing /** also matches the directory itself.
    if pattern.endswith("/**") and _match(relative, pattern[:-3]):
        return True
    # Patterns without a slash match the basename anywhere, like .gitignore.
    if "/" not in pattern and fnmatch.fnmatch(relative.rsplit("/", 1)[-1], pattern):
        return True
    return False


def should_ignore(root: Path, patterns: list[str], path: Path) -> bool:
    """Check if ``path`` matches any ignore pattern, relative to ``root``."""
    try:
        relative = path.relative_to(root).as_posix()
    except ValueError:
        return False
    if relative == ".":
        return False
    return any(_match(relative, pattern) for pattern in patterns)


def copy_filtered(root: Path, src: Path, dest: Path, patterns: list[str]) -> int:
    """Recursively copy ``src`` to ``dest``, skipping ignored paths.

    Returns:
        Number of files copied.
    """
    if should_ignore(root, patterns, src):
        return 0

    if src.is_dir():
        dest.mkdir(parents=True, exist_ok=True)
        copied = 0
        for entry in sorted(src.iterdir()):
            copied += copy_filtered(root, entry, dest / entry.name, patterns)
        return copied

    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)
    return 1
