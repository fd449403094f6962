"""Public task manager facade over the store, graph, and ordering engine."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import TYPE_CHECKING, Any

from indra.config import IndraConfig, default_config
from indra.core.graph import DependencyGraph
from indra.core.ordering import build_task_ordering, can_task_be_done, get_top_goals
from indra.core.reporting import representation_digest, representation_to_dict
from indra.core.store import TaskStore
from indra.core.types import (
    ROLE_DEPENDEE,
    ROLE_DEPENDENT,
    Connections,
    GraphError,
    Task,
    TaskId,
    TaskNotFound,
    TaskOrdering,
)
from indra.core.urgency import cumulative_urgency_sums, task_lambda

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class TaskManager:
    """
    In-memory task manager.

    Operations referencing unknown ids return a `TaskNotFound` value instead of
    raising; edges that would close a cycle return `DependencyCycle` when the
    config rejects cycles. A single re-entrant lock serializes every call.
    """

    def __init__(self, config: IndraConfig | None = None) -> None:
        self.config = config or default_config()
        self._store = TaskStore()
        self._graph = DependencyGraph()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._store

    # ---- mutation ----

    def put_task(
        self,
        task: Task,
        dependencies: Iterable[TaskId] | None = None,
        dependees: Iterable[TaskId] | None = None,
    ) -> GraphError | None:
        """
        Store `task`, keep any existing edges, then apply the given edges.

        Edges are applied in order and the first failure is returned. Edges
        applied before the failure stay in place; the task record is stored
        either way.
        """
        with self._lock:
            self._store.put(task)
            self._graph.ensure_node(task.id)

            for dependent in dependencies or ():
                err = self._add_edge(task.id, dependent)
                if err is not None:
                    logger.info("put_task stopped early id=%s: %s", task.id, err)
                    return err

            for dependee in dependees or ():
                err = self._add_edge(dependee, task.id)
                if err is not None:
                    logger.info("put_task stopped early id=%s: %s", task.id, err)
                    return err
            return None

    def remove_task(self, task_id: TaskId) -> TaskNotFound | None:
        with self._lock:
            if not self._store.exists(task_id):
                return TaskNotFound(task_id)

            for dependent in sorted(self._graph.dependencies(task_id)):
                self._graph.remove_dependency(task_id, dependent)
            for dependee in sorted(self._graph.dependees(task_id)):
                self._graph.remove_dependency(dependee, task_id)

            self._graph.remove_node(task_id)
            self._store.remove(task_id)
            logger.debug("Task removed id=%s", task_id)
            return None

    def add_dependency(self, dependee: TaskId, dependent: TaskId) -> GraphError | None:
        """Make `dependee` depend on `dependent`. Re-adding an edge is a no-op."""
        with self._lock:
            return self._add_edge(dependee, dependent)

    def remove_dependency(self, dependee: TaskId, dependent: TaskId) -> TaskNotFound | None:
        """Drop the edge; removing an absent edge is a no-op."""
        with self._lock:
            missing = self._check_pair(dependee, dependent)
            if missing is not None:
                return missing
            return self._graph.remove_dependency(dependee, dependent)

    def set_task_done(self, task_id: TaskId, done: bool = True) -> TaskNotFound | None:
        with self._lock:
            task = self._store.get(task_id)
            if isinstance(task, TaskNotFound):
                return task
            self._store.put(dataclasses.replace(task, is_done=done))
            return None

    # ---- queries ----

    def get_task(self, task_id: TaskId) -> Task | TaskNotFound:
        with self._lock:
            return self._store.get(task_id)

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return self._store.values()

    def get_representation(self) -> dict[TaskId, Connections]:
        """Read-only adjacency snapshot; later mutations do not show through."""
        with self._lock:
            return self._graph.snapshot()

    def export_representation(self) -> dict[str, Any]:
        with self._lock:
            return representation_to_dict(self._graph.snapshot())

    def representation_digest(self) -> str:
        with self._lock:
            return representation_digest(self._graph.snapshot())

    def get_top_goals(self) -> list[TaskId]:
        with self._lock:
            return get_top_goals(graph=self._graph)

    def get_task_dependencies(self, task_id: TaskId) -> list[TaskId] | TaskNotFound:
        with self._lock:
            if not self._store.exists(task_id):
                return TaskNotFound(task_id)
            return sorted(self._graph.dependencies(task_id))

    def get_task_dependees(self, task_id: TaskId) -> list[TaskId] | TaskNotFound:
        with self._lock:
            if not self._store.exists(task_id):
                return TaskNotFound(task_id)
            return sorted(self._graph.dependees(task_id))

    def can_task_be_done(self, task_id: TaskId) -> bool | TaskNotFound:
        with self._lock:
            if not self._store.exists(task_id):
                return TaskNotFound(task_id)
            return can_task_be_done(task_id=task_id, graph=self._graph)

    def get_task_urgency(self, task_id: TaskId) -> float | TaskNotFound:
        with self._lock:
            task = self._store.get(task_id)
            if isinstance(task, TaskNotFound):
                return task
            return task_lambda(task)

    def get_urgency_sums(self, root_id: TaskId) -> dict[TaskId, float] | GraphError:
        with self._lock:
            if not self._store.exists(root_id):
                return TaskNotFound(root_id)
            closure = self._graph.closure(root_id)
            cycle = self._graph.find_cycle(closure)
            if cycle is not None:
                return cycle
            return cumulative_urgency_sums(root_id=root_id, graph=self._graph, store=self._store)

    def explain_task_ordering(self, root_id: TaskId) -> TaskOrdering | GraphError:
        with self._lock:
            if not self._store.exists(root_id):
                return TaskNotFound(root_id)
            return build_task_ordering(
                root_id=root_id,
                graph=self._graph,
                store=self._store,
                tie_break=self.config.tie_break,
            )

    def get_task_ordering(self, root_id: TaskId) -> list[TaskId] | GraphError:
        """Dependencies first, root last; ready tasks go by highest urgency sum."""
        ordering = self.explain_task_ordering(root_id)
        if isinstance(ordering, TaskOrdering):
            return ordering.task_ids
        return ordering

    # ---- helpers ----

    def _add_edge(self, dependee: TaskId, dependent: TaskId) -> GraphError | None:
        missing = self._check_pair(dependee, dependent)
        if missing is not None:
            logger.info("Edge rejected: %s", missing)
            return missing
        err = self._graph.add_dependency(dependee, dependent, reject_cycles=self.config.reject_cycles)
        if err is not None:
            logger.info("Edge rejected: %s", err)
        return err

    def _check_pair(self, dependee: TaskId, dependent: TaskId) -> TaskNotFound | None:
        if not self._store.exists(dependee):
            return TaskNotFound(dependee, ROLE_DEPENDEE)
        if not self._store.exists(dependent):
            return TaskNotFound(dependent, ROLE_DEPENDENT)
        return None
