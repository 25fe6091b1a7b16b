"""
Task store for reading/writing .ptsd/tasks.yaml.

Provides CRUD operations with atomic file writes. Ids are assigned
sequentially (T-1, T-2, ...) from the highest existing number.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from ptsd.core.errors import EntityNotFoundError, StoreIOError, UserInputError
from ptsd.core.registry.store import FeatureRegistry
from ptsd.core.stages import Stage
from ptsd.core.tasks.models import Task, TaskPriority, TasksFile, TaskStatus
from ptsd.utils.yamlfile import read_yaml, write_yaml

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Store for the project task list.

    Example:
        >>> store = TaskStore(Path(".ptsd/tasks.yaml"), registry)
        >>> task = store.add("auth", "write login scenarios")
        >>> task.id
        'T-1'
    """

    def __init__(self, path: Path, registry: FeatureRegistry | None = None) -> None:
        """
        Initialize the TaskStore.

        Args:
            path: Path to tasks.yaml
            registry: Registry used to validate feature references on add
        """
        self.path = path
        self.registry = registry

    def load(self) -> list[Task]:
        """
        Load all tasks in file order.

        Raises:
            StoreIOError: If the file is present but unreadable or invalid
        """
        data = read_yaml(self.path)
        if data is None:
            return []
        try:
            return TasksFile.model_validate({"tasks": data.get("tasks") or []}).tasks
        except ValidationError as e:
            raise StoreIOError(f"invalid task list {self.path}: {e}") from e

    def save(self, tasks: list[Task]) -> None:
        data = TasksFile(tasks=tasks).model_dump(mode="json")
        write_yaml(self.path, data)

    @staticmethod
    def _next_id(tasks: list[Task]) -> str:
        highest = max((t.number for t in tasks), default=0)
        return f"T-{highest + 1}"

    def _append(self, feature_id: str, title: str, priority: TaskPriority) -> Task:
        tasks = self.load()
        task = Task(
            id=self._next_id(tasks),
            feature=feature_id,
            title=title,
            status=TaskStatus.TODO,
            priority=priority,
        )
        tasks.append(task)
        self.save(tasks)
        logger.info("Added task %s for %s: %s", task.id, feature_id, title)
        return task

    def add(
        self,
        feature_id: str,
        title: str,
        priority: TaskPriority = TaskPriority.B,
    ) -> Task:
        """
        Add a task for a registered feature.

        Raises:
            UserInputError: If feature or title is empty
            EntityNotFoundError: If the feature isn't registered
        """
        if not feature_id:
            raise UserInputError("--feature required")
        if not title.strip():
            raise UserInputError("task title required")
        if self.registry is not None:
            self.registry.require(feature_id)
        return self._append(feature_id, title, priority)

    def append_redo(self, feature_id: str, stage: Stage) -> Task:
        """Queue an urgent remediation task after a failed review."""
        return self._append(feature_id, f"redo {stage.value} for {feature_id}", TaskPriority.A)

    def list_tasks(
        self,
        feature_id: str | None = None,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        tasks = self.load()
        if feature_id:
            tasks = [t for t in tasks if t.feature == feature_id]
        if status is not None:
            tasks = [t for t in tasks if t.status == status]
        return tasks

    def update(self, task_id: str, status: TaskStatus) -> Task:
        """
        Set a task's status.

        Raises:
            EntityNotFoundError: If no task has this id
        """
        tasks = self.load()
        for task in tasks:
            if task.id == task_id:
                task.status = status
                self.save(tasks)
                return task
        raise EntityNotFoundError(f"task {task_id} not found")

    def next_tasks(self, limit: int = 0) -> list[Task]:
        """
        TODO tasks ordered by priority (A first), file order within a priority.

        Args:
            limit: Maximum number of tasks to return (0 = no limit)
        """
        todo = [t for t in self.load() if t.status == TaskStatus.TODO]
        todo.sort(key=lambda t: t.priority.value)
        if limit > 0:
            todo = todo[:limit]
        return todo
