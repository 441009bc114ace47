# src/focuslog/tasks/task_query.py

"""
Filter -> sort -> group projection of the root task list.

Only root tasks are filtered; subtasks travel with their root. The one place
subtasks matter is the tag filter, which matches anywhere in a root's subtree.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from .task_models import StatusFilter, TaskNode, TaskTree, iso_date_part
from .task_tree import iter_nodes


@dataclass(frozen=True, slots=True)
class TaskQuery:
    status: StatusFilter = StatusFilter.ACTIVE
    search: str = ""
    completion_date: str | None = None  # YYYY-MM-DD
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TaskView:
    tasks: list[TaskNode]
    # date -> tasks, most recent date first; None when grouping is off
    groups: dict[str, list[TaskNode]] | None = field(default=None)

    @property
    def is_grouped(self) -> bool:
        return self.groups is not None


# ---- filter ----


def _has_tag_in_subtree(node: TaskNode, wanted: Sequence[str]) -> bool:
    return any(tag in n.tags for n in iter_nodes((node,)) for tag in wanted)


def matches_query(task: TaskNode, query: TaskQuery) -> bool:
    if query.status == StatusFilter.ACTIVE and task.is_completed:
        return False
    if query.status == StatusFilter.COMPLETED and not task.is_completed:
        return False

    if query.search:
        # root title only; subtask titles and descriptions are not searched
        if query.search.lower() not in task.title.lower():
            return False

    if query.completion_date:
        if not task.is_completed or not task.completed_at:
            return False
        if iso_date_part(task.completed_at) != query.completion_date:
            return False

    if query.tags and not _has_tag_in_subtree(task, query.tags):
        return False

    return True


def filter_tasks(tasks: Iterable[TaskNode], query: TaskQuery) -> list[TaskNode]:
    return [t for t in tasks if matches_query(t, query)]


# ---- sort ----


def _recency_key(task: TaskNode) -> str:
    if task.is_completed:
        return task.completed_at or ""
    return task.created_at


def sort_tasks(tasks: Iterable[TaskNode]) -> list[TaskNode]:
    """
    Incomplete first (newest created first), then completed (newest
    completion first). Two stable passes keep ties in input order.
    """
    by_recency = sorted(tasks, key=_recency_key, reverse=True)
    return sorted(by_recency, key=lambda t: t.is_completed)


# ---- group ----


def should_group(query: TaskQuery) -> bool:
    return query.status == StatusFilter.COMPLETED or bool(query.completion_date)


def group_by_completion_date(tasks: Iterable[TaskNode]) -> dict[str, list[TaskNode]]:
    buckets: dict[str, list[TaskNode]] = {}
    for task in tasks:
        if not task.completed_at:
            continue
        buckets.setdefault(iso_date_part(task.completed_at), []).append(task)
    return {day: buckets[day] for day in sorted(buckets, reverse=True)}


def build_view(tree: TaskTree, query: TaskQuery) -> TaskView:
    ordered = sort_tasks(filter_tasks(tree, query))
    groups = group_by_completion_date(ordered) if should_group(query) else None
    return TaskView(tasks=ordered, groups=groups)


# ---- filter state helpers ----


def toggle_tag(query: TaskQuery, tag: str) -> TaskQuery:
    if tag in query.tags:
        return replace(query, tags=tuple(t for t in query.tags if t != tag))
    return replace(query, tags=(*query.tags, tag))


def has_active_filters(query: TaskQuery) -> bool:
    """Anything other than the default view (active tasks, no tag/date filter)."""
    return query.status != StatusFilter.ACTIVE or bool(query.tags) or bool(query.completion_date)


def today_iso_date() -> str:
    return datetime.now(UTC).date().isoformat()


def format_short_date(ts: str | None) -> str:
    """'2026-10-18T09:30:00.000Z' -> 'Oct 18'. Unparsable input -> ''."""
    if not ts:
        return ""
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return f"{dt.strftime('%b')} {dt.day}"
