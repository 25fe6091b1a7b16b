"""
Task data models.

Tasks are small units of remediation or follow-up work tied to a feature,
stored in .ptsd/tasks.yaml.
"""

from enum import Enum

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    """Task status values."""

    TODO = "TODO"
    WIP = "WIP"
    DONE = "DONE"

    @property
    def is_pending(self) -> bool:
        return self is not TaskStatus.DONE


class TaskPriority(str, Enum):
    """Task priority levels (A = urgent, sorts first)."""

    A = "A"
    B = "B"
    C = "C"


class Task(BaseModel):
    """
    A task in the ptsd task list.

    Example:
        >>> task = Task(id="T-1", feature="auth", title="redo bdd for auth")
        >>> task.status
        <TaskStatus.TODO: 'TODO'>
    """

    id: str = Field(..., pattern=r"^T-\d+$", description="Sequential id (T-<n>)")
    feature: str = Field(..., min_length=1, description="Feature this task belongs to")
    title: str = Field(..., min_length=1)
    status: TaskStatus = Field(default=TaskStatus.TODO)
    priority: TaskPriority = Field(default=TaskPriority.B)

    @property
    def number(self) -> int:
        return int(self.id[2:])


class TasksFile(BaseModel):
    """Root document of .ptsd/tasks.yaml."""

    tasks: list[Task] = Field(default_factory=list)
