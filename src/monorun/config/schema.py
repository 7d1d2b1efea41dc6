"""Configuration schema for monorun.yaml."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from monorun.errors import TaskNotFoundError


class PackageManager(str, Enum):
    """Package managers that can run workspace scripts."""

    BUN = "bun"
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class TaskCacheConfig(BaseModel):
    """Per-task cache switches."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    skip_read: bool = Field(default=False, alias="skipRead")
    skip_write: bool = Field(default=False, alias="skipWrite")


class TaskConfig(BaseModel):
    """A named task.

    Attributes:
        depends_on: Prerequisites, each a bare script name, ``^script``
            or ``package#script``.
        cache: Cache switches for this task.
        package_manager: Package manager override for this task.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    depends_on: list[str] = Field(default_factory=list, alias="dependsOn")
    cache: TaskCacheConfig = Field(default_factory=TaskCacheConfig)
    package_manager: PackageManager | None = Field(default=None, alias="packageManager")

    @field_validator("depends_on")
    @classmethod
    def _non_empty_entries(cls, value: list[str]) -> list[str]:
        for entry in value:
            if not entry.strip():
                raise ValueError("dependsOn entries must not be empty")
        return [entry.strip() for entry in value]


class HooksConfig(BaseModel):
    """User hooks.

    Attributes:
        cache: Import path (``module:attribute``) of a cache implementation.
    """

    cache: str | None = None


class CacheConfig(BaseModel):
    """Local cache store settings."""

    path: str = ".monorun/cache.sqlite"
    enabled: bool = True


class CommandDefaults(BaseModel):
    """Default values for command options."""

    concurrency: int | None = Field(default=None, ge=1, le=256)


class MonorunConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(populate_by_name=True)

    tasks: dict[str, TaskConfig] = Field(default_factory=dict)
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    command_defaults: CommandDefaults = Field(default_factory=CommandDefaults)

    @field_validator("tasks", mode="before")
    @classmethod
    def _normalize_tasks(cls, value: object) -> object:
        # A bare task name with no body ("lint:") means an empty task.
        if isinstance(value, dict):
            return {name: ({} if body is None else body) for name, body in value.items()}
        return value

    @property
    def task_names(self) -> list[str]:
        """Names of all configured tasks."""
        return list(self.tasks)

    def get_task(self, name: str) -> TaskConfig | None:
        """Get a task by name, or None if it is not configured."""
        return self.tasks.get(name)

    def require_task(self, name: str) -> TaskConfig:
        """Get a task by name.

        Raises:
            TaskNotFoundError: If no task has that name.
        """
        task = self.get_task(name)
        if task is None:
            raise TaskNotFoundError(name, self.task_names)
        return task
