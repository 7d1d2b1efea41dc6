"""Task expansion into (target, script) units."""

from __future__ import annotations

from dataclasses import dataclass

from monorun.config.schema import TaskConfig
from monorun.errors import ConfigurationError
from monorun.log import get_logger
from monorun.workspace.graph import DependencyGraph

logger = get_logger(__name__)


@dataclass(frozen=True)
class TaskUnit:
    """One step of an expanded task.

    Attributes:
        target: Filter token selecting the packages to run on.
        script: Script to run there.
    """

    target: str
    script: str

    def __str__(self) -> str:
        return f"{self.target}#{self.script}"

    @classmethod
    def parse(cls, value: str) -> TaskUnit:
        """Parse ``package#script``."""
        target, _, script = value.rpartition("#")
        if not target or not script:
            raise ConfigurationError(f"Invalid task reference '{value}', expected 'package#script'")
        return cls(target=target, script=script)


def expand_task(task_name: str, task: TaskConfig, graph: DependencyGraph) -> list[TaskUnit]:
    """Expand a task's ``dependsOn`` into ordered, de-duplicated units.

    - ``^script``: for each root, ``script`` on the root and everything
      it depends on.
    - ``package#script``: exactly that package.
    - ``script``: every package in the graph, one unit each.

    One unit per root running ``task_name`` closes the list.
    """
    roots = graph.roots()
    units: dict[TaskUnit, None] = {}

    def add(unit: TaskUnit) -> None:
        if unit in units:
            logger.debug("Unit %s already scheduled", unit)
            return
        units[unit] = None

    for entry in task.depends_on:
        if entry.startswith("^"):
            script = entry[1:]
            if not script:
                raise ConfigurationError(f"Task '{task_name}' has an empty '^' dependency")
            for root in roots:
                add(TaskUnit(target=f"{root}...", script=script))
        elif "#" in entry:
            add(TaskUnit.parse(entry))
        else:
            for name in graph.nodes():
                add(TaskUnit(target=name, script=entry))

    for root in roots:
        add(TaskUnit(target=root, script=task_name))

    return list(units)
