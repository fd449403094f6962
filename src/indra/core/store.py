"""Keyed in-memory storage of task records."""

from __future__ import annotations

import logging

from indra.core.types import Task, TaskId, TaskNotFound

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Task records keyed by id.

    The store knows nothing about edges: removing a record leaves graph cleanup
    to the caller.
    """

    def __init__(self) -> None:
        self._tasks: dict[TaskId, Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def put(self, task: Task) -> None:
        """Insert or overwrite by id."""
        replaced = task.id in self._tasks
        self._tasks[task.id] = task
        logger.debug("Task stored id=%s replaced=%s", task.id, replaced)

    def get(self, task_id: TaskId) -> Task | TaskNotFound:
        task = self._tasks.get(task_id)
        if task is None:
            return TaskNotFound(task_id)
        return task

    def remove(self, task_id: TaskId) -> TaskNotFound | None:
        if task_id not in self._tasks:
            return TaskNotFound(task_id)
        del self._tasks[task_id]
        logger.debug("Task record removed id=%s", task_id)
        return None

    def exists(self, task_id: TaskId) -> bool:
        return task_id in self._tasks

    def values(self) -> list[Task]:
        """All records ordered by id."""
        return [self._tasks[task_id] for task_id in sorted(self._tasks)]
