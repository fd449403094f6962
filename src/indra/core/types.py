"""Core domain types for the task graph."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TypeAlias

TaskId: TypeAlias = str

REASON_TASK_NOT_FOUND = "TASK_NOT_FOUND"
REASON_DEPENDENCY_CYCLE = "DEPENDENCY_CYCLE"

ROLE_TASK = "task"
ROLE_DEPENDEE = "dependee"
ROLE_DEPENDENT = "dependent"
ROLES: tuple[str, ...] = (ROLE_TASK, ROLE_DEPENDEE, ROLE_DEPENDENT)


def new_task_id() -> TaskId:
    """Return a fresh system-generated task id."""
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Task:
    """A unit of work with a success probability and a time estimate."""

    id: TaskId
    name: str
    probability_success: float
    estimated_time_to_completion: float
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_done: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("task id must be provided")
        if not 0.0 < self.probability_success <= 1.0:
            raise ValueError(
                f"probability_success must be in (0, 1], got {self.probability_success!r} [TaskId: {self.id}]"
            )
        if not self.estimated_time_to_completion > 0.0:
            raise ValueError(
                "estimated_time_to_completion must be > 0, "
                f"got {self.estimated_time_to_completion!r} [TaskId: {self.id}]"
            )

    @classmethod
    def create(
        cls,
        name: str,
        probability_success: float,
        estimated_time_to_completion: float,
        *,
        task_id: TaskId | None = None,
    ) -> Task:
        return cls(
            id=task_id if task_id is not None else new_task_id(),
            name=name,
            probability_success=probability_success,
            estimated_time_to_completion=estimated_time_to_completion,
        )


@dataclass(frozen=True, slots=True)
class TaskNotFound:
    """Returned when an operation references an unknown task id."""

    task_id: TaskId
    role: str = ROLE_TASK
    reason_code: str = REASON_TASK_NOT_FOUND

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got `{self.role}`")

    @property
    def message(self) -> str:
        subject = "task" if self.role == ROLE_TASK else f"{self.role} task"
        return f"{subject} does not exist [TaskId: {self.task_id}]"

    def to_dict(self) -> dict[str, str]:
        return {
            "reason_code": self.reason_code,
            "message": self.message,
            "task_id": self.task_id,
            "role": self.role,
        }

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class DependencyCycle:
    """Returned when an edge would close, or a walk meets, a dependency cycle."""

    dependee: TaskId
    dependent: TaskId
    path: tuple[TaskId, ...] = ()
    reason_code: str = REASON_DEPENDENCY_CYCLE

    @property
    def message(self) -> str:
        chain = " -> ".join(self.path) if self.path else f"{self.dependee} -> {self.dependent}"
        return f"dependency cycle [{chain}]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason_code": self.reason_code,
            "message": self.message,
            "dependee": self.dependee,
            "dependent": self.dependent,
            "path": list(self.path),
        }

    def __str__(self) -> str:
        return self.message


GraphError: TypeAlias = TaskNotFound | DependencyCycle


def is_error(value: object) -> bool:
    """Return True when an operation result is an error value."""
    return isinstance(value, (TaskNotFound, DependencyCycle))


@dataclass(frozen=True, slots=True)
class Connections:
    """Read-only adjacency entry for one task."""

    dependencies: frozenset[TaskId]
    dependees: frozenset[TaskId]


@dataclass(frozen=True)
class OrderedTask:
    """One step of a priority-weighted ordering."""

    task_id: TaskId
    urgency: float
    urgency_sum: float


@dataclass(frozen=True)
class TaskOrdering:
    """Priority-weighted topological order of a root's dependency closure."""

    root_id: TaskId
    steps: tuple[OrderedTask, ...]

    @property
    def task_ids(self) -> list[TaskId]:
        return [step.task_id for step in self.steps]
