# src/focuslog/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

TaskId = str


def generate_id() -> TaskId:
    """Opaque random id, unique across sessions sharing the same store."""
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    """
    Current UTC time as ISO-8601 with milliseconds and a 'Z' suffix.

    All timestamps share this shape so plain string comparison orders them
    chronologically.
    """
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_date_part(ts: str | None) -> str:
    """'2026-10-18T09:30:00.000Z' -> '2026-10-18' (empty string for None)."""
    if not ts:
        return ""
    return ts.split("T", 1)[0]


class StatusFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None, default: StatusFilter | None = None) -> StatusFilter:
        fallback = default or cls.ACTIVE
        if not raw:
            return fallback
        key = raw.strip().lower()
        if key == "done":
            return cls.COMPLETED
        try:
            return cls(key)
        except ValueError:
            return fallback


@dataclass(frozen=True, slots=True)
class TaskNode:
    """
    A task at any depth of the tree.

    Root tasks and subtasks share this type; a subtask is simply a node whose
    parent_id is set. Nodes are immutable: tree operations build new nodes
    with dataclasses.replace and share untouched subtrees.
    """

    id: TaskId
    title: str
    created_at: str
    updated_at: str

    tags: tuple[str, ...] = ()
    is_completed: bool = False
    completed_at: str | None = None
    description: str | None = None
    parent_id: TaskId | None = None
    subtasks: tuple[TaskNode, ...] = ()

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


TaskTree = tuple[TaskNode, ...]


def new_task_node(
    title: str,
    tags: list[str] | tuple[str, ...] = (),
    *,
    parent_id: TaskId | None = None,
    now: str | None = None,
    task_id: TaskId | None = None,
) -> TaskNode:
    ts = now or utc_now_iso()
    return TaskNode(
        id=task_id or generate_id(),
        title=title,
        created_at=ts,
        updated_at=ts,
        tags=tuple(tags),
        parent_id=parent_id,
    )
