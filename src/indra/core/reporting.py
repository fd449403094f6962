"""Deterministic JSON payloads for graph snapshots."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from indra.core.types import Connections, TaskId


def canonical_dumps(obj: Any) -> str:
    """Serialize with sorted keys and compact separators."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def representation_to_dict(representation: dict[TaskId, Connections]) -> dict[str, Any]:
    """Convert an adjacency snapshot to a JSON payload with sorted id lists."""
    return {
        task_id: {
            "dependencies": sorted(connections.dependencies),
            "dependees": sorted(connections.dependees),
        }
        for task_id, connections in sorted(representation.items())
    }


def representation_digest(representation: dict[TaskId, Connections]) -> str:
    """SHA-256 of the canonical adjacency payload."""
    payload = canonical_dumps(representation_to_dict(representation))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
