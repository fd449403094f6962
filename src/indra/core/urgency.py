"""Per-task urgency and cumulative urgency sums over the dependency graph."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import TYPE_CHECKING

from indra.core.types import Task, TaskId, TaskNotFound

if TYPE_CHECKING:
    from indra.core.graph import DependencyGraph
    from indra.core.store import TaskStore


def task_lambda(task: Task) -> float:
    """ln(1/p) / t; larger when success is unlikely or time is short."""
    return math.log(1 / task.probability_success) / task.estimated_time_to_completion


def cumulative_urgency_sums(
    *,
    root_id: TaskId,
    graph: DependencyGraph,
    store: TaskStore,
) -> dict[TaskId, float] | TaskNotFound:
    """
    Walk every dependency path out of `root_id` and total the running sums.

    The running sum at a task is its parent's running sum plus its own lambda.
    A task reached by several paths receives one contribution per path, so the
    result is a total over paths, not a maximum. Assumes the closure is acyclic.
    """
    if root_id not in graph:
        return TaskNotFound(root_id)

    lambdas: dict[TaskId, float] = {}
    sums: dict[TaskId, float] = defaultdict(float)
    stack: list[tuple[TaskId, float]] = [(root_id, 0.0)]

    while stack:
        task_id, parent_sum = stack.pop()
        if task_id not in lambdas:
            task = store.get(task_id)
            if isinstance(task, TaskNotFound):
                return task
            lambdas[task_id] = task_lambda(task)

        running = parent_sum + lambdas[task_id]
        sums[task_id] += running

        dependencies = graph.dependencies(task_id)
        if isinstance(dependencies, TaskNotFound):
            return dependencies
        for dependent in sorted(dependencies, reverse=True):
            stack.append((dependent, running))

    return dict(sums)
