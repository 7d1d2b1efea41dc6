"""Package filter resolution.

A filter is a list of tokens. Each token selects packages by exact name,
``*`` glob or git revision range and can widen the selection along the
dependency graph:

- ``pkg...``  the package and everything it depends on (downstream)
- ``...pkg``  the package and everything that depends on it (upstream)
- ``!pkg``    negation, only within the token's own selection
- ``[ref]``   packages with files changed in ``ref...HEAD``
- ``[a..b]``  packages with files changed in the given range

Token selections are combined by union (``or``) or intersection (``and``).
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Callable, Iterable, Mapping
from functools import reduce
from pathlib import Path
from typing import Literal

from monorun.errors import FilterError
from monorun.git import get_changed_files
from monorun.log import get_logger
from monorun.workspace.graph import DependencyGraph
from monorun.workspace.package import Package

logger = get_logger(__name__)

FilterMode = Literal["or", "and"]
Direction = Literal["upstream", "downstream"]
ChangedFilesFn = Callable[[Path, str], Iterable[str]]

GIT_RANGE_RE = re.compile(r"^\[([^\]]+)\]$")


def normalize_range(value: str) -> str:
    """Expand a bare ref to ``ref...HEAD``; explicit ranges pass through."""
    if "..." in value or ".." in value:
        return value
    return f"{value}...HEAD"


def get_reachable(graph: DependencyGraph, start: str, direction: Direction) -> set[str]:
    """Collect ``start`` and every node reachable from it.

    ``downstream`` follows dependency edges, ``upstream`` follows them
    in reverse.
    """
    reachable: set[str] = set()
    stack = [start]
    while stack:
        current = stack.pop()
        if current in reachable:
            continue
        reachable.add(current)
        if direction == "upstream":
            stack.extend(graph.predecessors(current))
        else:
            stack.extend(graph.successors(current))
    return reachable


def match_names(names: Iterable[str], pattern: str) -> list[str]:
    """Match package names exactly, or as a glob when ``pattern`` has ``*``."""
    if "*" in pattern:
        return [name for name in names if fnmatch.fnmatchcase(name, pattern)]
    return [name for name in names if name == pattern]


def packages_owning(
    root: Path,
    packages: Mapping[str, Package],
    changed_files: Iterable[str],
) -> set[str]:
    """Map root-relative file paths to the packages containing them."""
    owners: set[str] = set()
    for changed in changed_files:
        abs_changed = root / changed
        for name, package in packages.items():
            try:
                abs_changed.relative_to(package.path)
            except ValueError:
                continue
            owners.add(name)
    return owners


class FilterResolver:
    """Resolve filter tokens into package names.

    Attributes:
        root: Workspace root, used for git queries.
        packages: Package registry.
        graph: Graph used for upstream/downstream closures.
    """

    def __init__(
        self,
        root: Path,
        packages: Mapping[str, Package],
        graph: DependencyGraph,
        *,
        changed_files: ChangedFilesFn = get_changed_files,
    ) -> None:
        self.root = root
        self.packages = packages
        self.graph = graph
        self._changed_files = changed_files

    def resolve_token(self, token: str) -> set[str]:
        """Resolve a single token into its own selection."""
        raw = token
        direction: Direction | None = None
        negate = False

        if raw.endswith("..."):
            direction = "downstream"
            raw = raw[:-3]
        elif raw.startswith("..."):
            direction = "upstream"
            raw = raw[3:]

        if raw.startswith("!"):
            negate = True
            raw = raw[1:]

        included: set[str] = set()

        git_match = GIT_RANGE_RE.match(raw)
        if git_match:
            revision_range = normalize_range(git_match.group(1))
            changed = self._changed_files(self.root, revision_range)
            included.update(packages_owning(self.root, self.packages, changed))
            logger.debug("Range %s touches %s", revision_range, sorted(included))
            return included

        for match in match_names(self.packages.keys(), raw):
            if negate:
                included.discard(match)
                continue
            included.add(match)
            if direction is not None and match in self.graph:
                included.update(get_reachable(self.graph, match, direction))

        return included

    def resolve(self, tokens: Iterable[str], mode: FilterMode = "or") -> set[str]:
        """Resolve all tokens and combine their selections."""
        matched_sets = [s for s in (self.resolve_token(t) for t in tokens) if s]

        if mode == "and":
            if not matched_sets:
                return set()
            return reduce(lambda a, b: a & b, matched_sets)
        return set().union(*matched_sets)


def resolve_filter(
    tokens: Iterable[str],
    graph: DependencyGraph,
    packages: Mapping[str, Package],
    root: Path,
    mode: FilterMode = "or",
    *,
    changed_files: ChangedFilesFn = get_changed_files,
) -> set[str]:
    """Convenience wrapper around :class:`FilterResolver`."""
    resolver = FilterResolver(root, packages, graph, changed_files=changed_files)
    return resolver.resolve(tokens, mode)


def build_dependency_graph(
    packages: Mapping[str, Package],
    root: Path,
    *,
    filters: list[str] | None = None,
    mode: FilterMode = "or",
    changed_files: ChangedFilesFn = get_changed_files,
) -> DependencyGraph:
    """Build the dependency graph, pruned to ``filters`` when given.

    Raises:
        FilterError: If the filters select no package.
    """
    graph = DependencyGraph.from_packages(packages)
    if not filters:
        return graph

    selected = resolve_filter(filters, graph, packages, root, mode, changed_files=changed_files)
    if not selected:
        raise FilterError(list(filters))

    graph.prune(selected)
    return graph
