"""Indra: task dependency graph with priority-weighted execution ordering."""

from indra.config import IndraConfig, load_config
from indra.core.manager import TaskManager
from indra.core.types import DependencyCycle, Task, TaskId, TaskNotFound, is_error

__all__ = [
    "DependencyCycle",
    "IndraConfig",
    "Task",
    "TaskId",
    "TaskManager",
    "TaskNotFound",
    "is_error",
    "load_config",
]

__version__ = "0.1.0"
