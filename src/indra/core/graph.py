"""Adjacency index over task ids with mirrored dependency/dependee edges."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import networkx as nx

from indra.core.types import (
    ROLE_DEPENDEE,
    ROLE_DEPENDENT,
    Connections,
    DependencyCycle,
    GraphError,
    TaskId,
    TaskNotFound,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Node:
    dependencies: set[TaskId] = field(default_factory=set)
    dependees: set[TaskId] = field(default_factory=set)


class DependencyGraph:
    """
    Directed graph keyed by task id.

    Edges are stored twice: `B in node(A).dependencies` iff `A in node(B).dependees`.
    Every mutator keeps both sides in step; nodes never hold references to each
    other, only ids.
    """

    def __init__(self) -> None:
        self._nodes: dict[TaskId, _Node] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._nodes

    # ---- mutation ----

    def ensure_node(self, task_id: TaskId) -> None:
        if task_id not in self._nodes:
            self._nodes[task_id] = _Node()

    def add_dependency(
        self,
        dependee: TaskId,
        dependent: TaskId,
        *,
        reject_cycles: bool = True,
    ) -> GraphError | None:
        """Record that `dependee` depends on `dependent`."""
        missing = self._check_pair(dependee, dependent)
        if missing is not None:
            return missing

        if dependent in self._nodes[dependee].dependencies:
            return None

        if reject_cycles:
            if dependee == dependent:
                return DependencyCycle(dependee, dependent, (dependee, dependent))
            back_path = self.find_path(dependent, dependee)
            if back_path is not None:
                return DependencyCycle(dependee, dependent, (dependee, *back_path))

        self._nodes[dependee].dependencies.add(dependent)
        self._nodes[dependent].dependees.add(dependee)
        logger.debug("Edge added dependee=%s dependent=%s", dependee, dependent)
        return None

    def remove_dependency(self, dependee: TaskId, dependent: TaskId) -> TaskNotFound | None:
        """Drop the edge in both directions; a missing edge is a no-op."""
        missing = self._check_pair(dependee, dependent)
        if missing is not None:
            return missing

        self._nodes[dependee].dependencies.discard(dependent)
        self._nodes[dependent].dependees.discard(dependee)
        return None

    def remove_node(self, task_id: TaskId) -> TaskNotFound | None:
        """Sever every edge touching `task_id`, then drop its entry."""
        node = self._nodes.get(task_id)
        if node is None:
            return TaskNotFound(task_id)

        for dependent in sorted(node.dependencies):
            self._nodes[dependent].dependees.discard(task_id)
        for dependee in sorted(node.dependees):
            self._nodes[dependee].dependencies.discard(task_id)

        del self._nodes[task_id]
        logger.debug(
            "Node removed id=%s severed=%d",
            task_id,
            len(node.dependencies) + len(node.dependees),
        )
        return None

    # ---- queries ----

    def dependencies(self, task_id: TaskId) -> frozenset[TaskId] | TaskNotFound:
        node = self._nodes.get(task_id)
        if node is None:
            return TaskNotFound(task_id)
        return frozenset(node.dependencies)

    def dependees(self, task_id: TaskId) -> frozenset[TaskId] | TaskNotFound:
        node = self._nodes.get(task_id)
        if node is None:
            return TaskNotFound(task_id)
        return frozenset(node.dependees)

    def leaves(self) -> list[TaskId]:
        """Ids with no dependencies."""
        return sorted(task_id for task_id, node in self._nodes.items() if not node.dependencies)

    def roots(self) -> list[TaskId]:
        """Ids with no dependees."""
        return sorted(task_id for task_id, node in self._nodes.items() if not node.dependees)

    def snapshot(self) -> dict[TaskId, Connections]:
        return {
            task_id: Connections(
                dependencies=frozenset(self._nodes[task_id].dependencies),
                dependees=frozenset(self._nodes[task_id].dependees),
            )
            for task_id in sorted(self._nodes)
        }

    def copy(self, scope: Iterable[TaskId] | None = None) -> DependencyGraph:
        """
        Structural copy, optionally restricted to `scope`.

        Edges leaving the scope are dropped on both sides, so the copy keeps the
        mirror invariant on its own.
        """
        keep = set(self._nodes) if scope is None else {task_id for task_id in scope if task_id in self._nodes}
        clone = DependencyGraph()
        for task_id in keep:
            node = self._nodes[task_id]
            clone._nodes[task_id] = _Node(
                dependencies=node.dependencies & keep,
                dependees=node.dependees & keep,
            )
        return clone

    def closure(self, root_id: TaskId) -> list[TaskId] | TaskNotFound:
        """Transitive dependency closure of `root_id`, root first, in discovery order."""
        if root_id not in self._nodes:
            return TaskNotFound(root_id)

        seen = {root_id}
        order = [root_id]
        stack = [root_id]
        while stack:
            current = stack.pop()
            for dependent in sorted(self._nodes[current].dependencies, reverse=True):
                if dependent not in seen:
                    seen.add(dependent)
                    order.append(dependent)
                    stack.append(dependent)
        return order

    def to_networkx(self, scope: Iterable[TaskId] | None = None) -> nx.DiGraph:
        """DiGraph with an edge dependee -> dependent per dependency, optionally scoped."""
        keep = set(self._nodes) if scope is None else {task_id for task_id in scope if task_id in self._nodes}
        digraph = nx.DiGraph()
        digraph.add_nodes_from(sorted(keep))
        for task_id in sorted(keep):
            digraph.add_edges_from(
                (task_id, dependent) for dependent in sorted(self._nodes[task_id].dependencies) if dependent in keep
            )
        return digraph

    def find_path(self, start: TaskId, target: TaskId) -> tuple[TaskId, ...] | None:
        """Return a dependency path start -> ... -> target, if any."""
        if start not in self._nodes or target not in self._nodes:
            return None
        try:
            return tuple(nx.shortest_path(self.to_networkx(), start, target))
        except nx.NetworkXNoPath:
            return None

    def find_cycle(self, scope: Iterable[TaskId] | None = None) -> DependencyCycle | None:
        """Return the first cycle among the nodes in `scope` (all nodes by default)."""
        if scope is None:
            digraph = self.to_networkx()
            sources = sorted(digraph)
        else:
            sources = sorted({task_id for task_id in scope if task_id in self._nodes})
            digraph = self.to_networkx(sources)
        if not sources:
            return None

        try:
            edges = nx.find_cycle(digraph, source=sources)
        except nx.NetworkXNoCycle:
            return None
        path = (edges[0][0], *(dependent for _, dependent in edges))
        dependee, dependent = edges[-1][:2]
        return DependencyCycle(dependee, dependent, path)


    def _check_pair(self, dependee: TaskId, dependent: TaskId) -> TaskNotFound | None:
        if dependee not in self._nodes:
            return TaskNotFound(dependee, ROLE_DEPENDEE)
        if dependent not in self._nodes:
            return TaskNotFound(dependent, ROLE_DEPENDENT)
        return None
