"""Deterministic priority-weighted topological ordering."""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING

from indra.core.types import (
    GraphError,
    OrderedTask,
    TaskId,
    TaskNotFound,
    TaskOrdering,
)
from indra.core.urgency import cumulative_urgency_sums, task_lambda

if TYPE_CHECKING:
    from indra.core.graph import DependencyGraph
    from indra.core.store import TaskStore

logger = logging.getLogger(__name__)

TIE_BREAK_ID_ASC = "id_asc"
TIE_BREAK_ID_DESC = "id_desc"
TIE_BREAKS: tuple[str, ...] = (TIE_BREAK_ID_ASC, TIE_BREAK_ID_DESC)


class _ReadyQueue:
    """Max-heap on urgency sum; equal sums resolve by id rank."""

    def __init__(self, *, sums: dict[TaskId, float], task_ids: list[TaskId], tie_break: str) -> None:
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"tie_break must be one of {TIE_BREAKS}, got `{tie_break}`")
        ranked = sorted(task_ids, reverse=tie_break == TIE_BREAK_ID_DESC)
        self._rank = {task_id: idx for idx, task_id in enumerate(ranked)}
        self._sums = sums
        self._heap: list[tuple[float, int, TaskId]] = []

    def __bool__(self) -> bool:
        return bool(self._heap)

    def push(self, task_id: TaskId) -> None:
        heapq.heappush(self._heap, (-self._sums[task_id], self._rank[task_id], task_id))

    def pop(self) -> TaskId:
        return heapq.heappop(self._heap)[2]


def build_task_ordering(
    *,
    root_id: TaskId,
    graph: DependencyGraph,
    store: TaskStore,
    tie_break: str = TIE_BREAK_ID_ASC,
) -> TaskOrdering | GraphError:
    """
    Order the dependency closure of `root_id` so prerequisites come first.

    Among tasks whose dependencies are already placed, the one with the highest
    cumulative urgency sum goes next. Works on a scoped copy of `graph`; the
    canonical graph is never touched.
    """
    closure = graph.closure(root_id)
    if isinstance(closure, TaskNotFound):
        return closure

    cycle = graph.find_cycle(closure)
    if cycle is not None:
        logger.info("Ordering refused root=%s: %s", root_id, cycle)
        return cycle

    sums = cumulative_urgency_sums(root_id=root_id, graph=graph, store=store)
    if isinstance(sums, TaskNotFound):
        return sums

    work = graph.copy(closure)
    ready = _ReadyQueue(sums=sums, task_ids=closure, tie_break=tie_break)
    for leaf in work.leaves():
        ready.push(leaf)

    steps: list[OrderedTask] = []
    while ready:
        task_id = ready.pop()
        task = store.get(task_id)
        if isinstance(task, TaskNotFound):
            return task
        steps.append(OrderedTask(task_id=task_id, urgency=task_lambda(task), urgency_sum=sums[task_id]))

        # Only dependees inside the closure are present in the working copy.
        for dependee in sorted(work.dependees(task_id)):
            if work.dependencies(dependee) == {task_id}:
                ready.push(dependee)
        work.remove_node(task_id)

    logger.debug("Ordering built root=%s size=%d", root_id, len(steps))
    return TaskOrdering(root_id=root_id, steps=tuple(steps))


def can_task_be_done(*, task_id: TaskId, graph: DependencyGraph) -> bool | TaskNotFound:
    """True when the task has no outstanding dependencies."""
    dependencies = graph.dependencies(task_id)
    if isinstance(dependencies, TaskNotFound):
        return dependencies
    return not dependencies


def get_top_goals(*, graph: DependencyGraph) -> list[TaskId]:
    """Tasks nothing depends on."""
    return graph.roots()
