"""Package dependency graph."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from graphlib import CycleError, TopologicalSorter
from typing import TYPE_CHECKING

from monorun.errors import CyclicDependencyError
from monorun.log import get_logger

if TYPE_CHECKING:
    from monorun.workspace.package import Package

logger = get_logger(__name__)

Edge = tuple[str, str]


class DependencyGraph:
    """Directed graph over package names.

    Edges point from a consumer to the package it depends on, so
    ``successors(n)`` are the dependencies of ``n`` and ``predecessors(n)``
    are its dependents. Every listing follows insertion order.
    """

    def __init__(self) -> None:
        self._successors: dict[str, dict[str, None]] = {}
        self._predecessors: dict[str, dict[str, None]] = {}

    @classmethod
    def from_packages(cls, packages: Mapping[str, Package]) -> DependencyGraph:
        """Build a graph from a package registry.

        Dependencies that are not in the registry are dropped.
        """
        graph = cls()
        for name in packages:
            graph.add_node(name)
        for name, package in packages.items():
            for dep in package.dependencies:
                if dep in packages:
                    graph.add_edge(name, dep)
        return graph

    def add_node(self, name: str) -> None:
        if name not in self._successors:
            self._successors[name] = {}
            self._predecessors[name] = {}

    def add_edge(self, consumer: str, dependency: str) -> None:
        self.add_node(consumer)
        self.add_node(dependency)
        self._successors[consumer][dependency] = None
        self._predecessors[dependency][consumer] = None

    def remove_node(self, name: str) -> None:
        for dep in self._successors.pop(name, {}):
            self._predecessors[dep].pop(name, None)
        for consumer in self._predecessors.pop(name, {}):
            self._successors[consumer].pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._successors

    def __len__(self) -> int:
        return len(self._successors)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._successors))

    def nodes(self) -> list[str]:
        return list(self._successors)

    def edges(self) -> list[Edge]:
        return [(v, w) for v, deps in self._successors.items() for w in deps]

    def successors(self, name: str) -> list[str]:
        """Packages that ``name`` depends on."""
        return list(self._successors.get(name, ()))

    def predecessors(self, name: str) -> list[str]:
        """Packages that depend on ``name``."""
        return list(self._predecessors.get(name, ()))

    def out_edges(self, name: str) -> list[Edge]:
        return [(name, dep) for dep in self._successors.get(name, ())]

    def in_edges(self, name: str) -> list[Edge]:
        return [(consumer, name) for consumer in self._predecessors.get(name, ())]

    def prune(self, selected: Iterable[str]) -> None:
        """Remove every node not in ``selected`` together with its edges."""
        keep = set(selected)
        for name in self.nodes():
            if name not in keep:
                self.remove_node(name)

    def topological_order(self) -> list[str]:
        """Order nodes so that dependencies come before their dependents.

        Raises:
            CyclicDependencyError: If the graph has a cycle.
        """
        sorter = TopologicalSorter({name: list(deps) for name, deps in self._successors.items()})
        try:
            return list(sorter.static_order())
        except CycleError as e:
            cycle = list(e.args[1]) if len(e.args) > 1 else None
            raise CyclicDependencyError(cycle) from e

    def is_acyclic(self) -> bool:
        try:
            self.topological_order()
        except CyclicDependencyError:
            return False
        return True

    def roots(self) -> list[str]:
        """Nodes that no other node depends on."""
        if not self.is_acyclic():
            logger.warning("Graph contains cycles, may not have a clear root node")
        return [name for name, consumers in self._predecessors.items() if not consumers]

    def to_text(self) -> str:
        """Render each node with its dependencies, one per line."""
        lines = ["Graph:"]
        for name, deps in self._successors.items():
            lines.append(f"  {name} -> {', '.join(deps) if deps else '[]'}")
        return "\n".join(lines)

    def to_dot(self) -> str:
        """Render the graph in Graphviz DOT format."""
        lines = ["digraph G {"]
        for name in self._successors:
            lines.append(f'  "{name}" [label="{name}"];')
        for v, w in self.edges():
            lines.append(f'  "{v}" -> "{w}";')
        lines.append("}")
        return "\n".join(lines)
