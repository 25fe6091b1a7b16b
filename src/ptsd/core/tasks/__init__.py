"""
Task list for per-feature follow-up work.
"""

from ptsd.core.tasks.models import Task, TaskPriority, TasksFile, TaskStatus
from ptsd.core.tasks.store import TaskStore

__all__ = [
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TasksFile",
    "TaskStore",
]
