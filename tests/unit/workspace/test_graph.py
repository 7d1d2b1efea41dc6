"""Tests for the dependency graph."""

from __future__ import annotations

from pathlib import Path

import pytest

from monorun.errors import CyclicDependencyError
from monorun.workspace.graph import DependencyGraph
from monorun.workspace.package import Package


def make_package(name: str, deps: list[str] | None = None) -> Package:
    path = Path("/ws/packages") / name
    return Package(name=name, path=path, manifest_path=path / "package.json", dependencies=deps or [])


@pytest.fixture
def chain() -> DependencyGraph:
    """pkg-c -> pkg-b -> pkg-a"""
    packages = {
        "pkg-a": make_package("pkg-a"),
        "pkg-b": make_package("pkg-b", ["pkg-a"]),
        "pkg-c": make_package("pkg-c", ["pkg-b"]),
    }
    return DependencyGraph.from_packages(packages)


class TestFromPackages:
    def test_edges_point_to_dependencies(self, chain: DependencyGraph) -> None:
        assert chain.edges() == [("pkg-b", "pkg-a"), ("pkg-c", "pkg-b")]
        assert chain.successors("pkg-b") == ["pkg-a"]
        assert chain.predecessors("pkg-b") == ["pkg-c"]

    def test_external_dependencies_dropped(self) -> None:
        graph = DependencyGraph.from_packages(
            {"app": make_package("app", ["react", "lodash"])}
        )
        assert graph.nodes() == ["app"]
        assert graph.edges() == []

    def test_node_order_follows_registry(self) -> None:
        packages = {n: make_package(n) for n in ["zeta", "alpha", "mid"]}
        assert DependencyGraph.from_packages(packages).nodes() == ["zeta", "alpha", "mid"]


class TestTopologicalOrder:
    def test_dependencies_first(self, chain: DependencyGraph) -> None:
        assert chain.topological_order() == ["pkg-a", "pkg-b", "pkg-c"]

    def test_diamond(self) -> None:
        graph = DependencyGraph()
        graph.add_edge("app", "ui")
        graph.add_edge("app", "api")
        graph.add_edge("ui", "core")
        graph.add_edge("api", "core")

        order = graph.topological_order()
        assert order[0] == "core"
        assert order[-1] == "app"

    def test_cycle_raises(self) -> None:
        graph = DependencyGraph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "a")

        with pytest.raises(CyclicDependencyError) as exc_info:
            graph.topological_order()
        assert set(exc_info.value.cycle) >= {"a", "b"}
        assert not graph.is_acyclic()


class TestRoots:
    def test_roots_have_no_dependents(self, chain: DependencyGraph) -> None:
        assert chain.roots() == ["pkg-c"]

    def test_isolated_nodes_are_roots(self) -> None:
        graph = DependencyGraph()
        graph.add_node("x")
        graph.add_edge("y", "z")
        assert graph.roots() == ["x", "y"]

    def test_cycle_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        graph = DependencyGraph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "a")
        graph.add_node("c")

        assert graph.roots() == ["c"]
        assert "may not have a clear root" in caplog.text


class TestMutation:
    def test_remove_node_drops_edges(self, chain: DependencyGraph) -> None:
        chain.remove_node("pkg-b")
        assert "pkg-b" not in chain
        assert chain.edges() == []
        assert chain.predecessors("pkg-a") == []
        assert chain.successors("pkg-c") == []

    def test_prune_keeps_edges_between_selected(self, chain: DependencyGraph) -> None:
        chain.prune({"pkg-b", "pkg-c"})
        assert chain.nodes() == ["pkg-b", "pkg-c"]
        assert chain.edges() == [("pkg-c", "pkg-b")]

    def test_edge_lists(self, chain: DependencyGraph) -> None:
        assert chain.out_edges("pkg-b") == [("pkg-b", "pkg-a")]
        assert chain.in_edges("pkg-b") == [("pkg-c", "pkg-b")]
        assert chain.out_edges("unknown") == []


class TestRendering:
    def test_to_text(self, chain: DependencyGraph) -> None:
        assert chain.to_text() == (
            "Graph:\n  pkg-a -> []\n  pkg-b -> pkg-a\n  pkg-c -> pkg-b"
        )

    def test_to_dot(self, chain: DependencyGraph) -> None:
        dot = chain.to_dot()
        assert dot.startswith("digraph G {")
        assert '"pkg-c" -> "pkg-b";' in dot
        assert dot.endswith("}")
