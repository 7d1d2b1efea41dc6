"""Tests for task expansion."""

from __future__ import annotations

import pytest

from monorun.config.schema import TaskConfig
from monorun.errors import ConfigurationError
from monorun.execution import TaskUnit, expand_task
from monorun.workspace.graph import DependencyGraph


@pytest.fixture
def graph() -> DependencyGraph:
    """web -> ui -> core, plus a standalone docs package."""
    graph = DependencyGraph()
    graph.add_edge("web", "ui")
    graph.add_edge("ui", "core")
    graph.add_node("docs")
    return graph


def task(*depends_on: str) -> TaskConfig:
    return TaskConfig.model_validate({"dependsOn": list(depends_on)})


class TestTaskUnit:
    def test_parse(self) -> None:
        assert TaskUnit.parse("ui#build") == TaskUnit("ui", "build")

    def test_parse_scoped_name(self) -> None:
        assert TaskUnit.parse("@acme/ui#build") == TaskUnit("@acme/ui", "build")

    @pytest.mark.parametrize("value", ["#build", "ui#", "ui"])
    def test_parse_invalid(self, value: str) -> None:
        with pytest.raises(ConfigurationError):
            TaskUnit.parse(value)

    def test_str(self) -> None:
        assert str(TaskUnit("web...", "build")) == "web...#build"


class TestExpandTask:
    def test_no_prerequisites(self, graph: DependencyGraph) -> None:
        assert expand_task("build", TaskConfig(), graph) == [
            TaskUnit("web", "build"),
            TaskUnit("docs", "build"),
        ]

    def test_caret(self, graph: DependencyGraph) -> None:
        assert expand_task("build", task("^compile"), graph) == [
            TaskUnit("web...", "compile"),
            TaskUnit("docs...", "compile"),
            TaskUnit("web", "build"),
            TaskUnit("docs", "build"),
        ]

    def test_package_script(self, graph: DependencyGraph) -> None:
        assert expand_task("deploy", task("core#build"), graph)[0] == TaskUnit("core", "build")

    def test_bare_script_runs_in_every_package(self, graph: DependencyGraph) -> None:
        units = expand_task("test", task("lint"), graph)
        assert units[:4] == [
            TaskUnit("web", "lint"),
            TaskUnit("ui", "lint"),
            TaskUnit("core", "lint"),
            TaskUnit("docs", "lint"),
        ]

    def test_duplicates_removed(self, graph: DependencyGraph) -> None:
        units = expand_task("build", task("web#build", "core#lint", "core#lint"), graph)
        assert units == [
            TaskUnit("web", "build"),
            TaskUnit("core", "lint"),
            TaskUnit("docs", "build"),
        ]

    def test_empty_caret(self, graph: DependencyGraph) -> None:
        with pytest.raises(ConfigurationError, match="empty"):
            expand_task("build", task("^"), graph)
