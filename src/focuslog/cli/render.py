# src/focuslog/cli/render.py

"""Plain-text projection of a TaskView for the console."""

from __future__ import annotations

from ..tasks.task_models import TaskNode
from ..tasks.task_query import TaskQuery, TaskView, format_short_date, has_active_filters
from ..tasks.task_tree import subtask_progress

SHORT_ID_LEN = 6
INDENT = "    "


def short_id(node: TaskNode) -> str:
    return node.id[:SHORT_ID_LEN]


def _node_line(node: TaskNode, depth: int) -> str:
    mark = "[x]" if node.is_completed else "[ ]"
    parts = [f"{INDENT * depth}{mark} {short_id(node)}  {node.title}"]
    if node.tags:
        parts.append(" ".join(f"#{t}" for t in node.tags))
    if node.subtasks:
        done, total = subtask_progress(node)
        parts.append(f"({done}/{total} subtasks)")
    if node.is_completed and node.completed_at:
        parts.append(f"✓ {format_short_date(node.completed_at)}")
    return "  ".join(parts)


def render_node(
    node: TaskNode,
    *,
    depth: int = 0,
    expand_subtasks: bool = False,
    show_details: bool = False,
) -> list[str]:
    lines: list[str] = []
    stack = [(node, depth)]
    while stack:
        current, level = stack.pop()
        lines.append(_node_line(current, level))
        if show_details and current.description:
            for text_line in current.description.splitlines():
                lines.append(f"{INDENT * (level + 1)}| {text_line}")
        if expand_subtasks:
            stack.extend((st, level + 1) for st in reversed(current.subtasks))
    return lines


def describe_query(query: TaskQuery) -> str:
    parts = [f"status={query.status.value}"]
    if query.search:
        parts.append(f"search={query.search!r}")
    if query.completion_date:
        parts.append(f"date={query.completion_date}")
    if query.tags:
        parts.append("tags=" + ",".join(f"#{t}" for t in query.tags))
    suffix = "" if has_active_filters(query) else " (default)"
    return "Filters: " + " ".join(parts) + suffix


def render_view(
    view: TaskView,
    *,
    expand_subtasks: bool = False,
    show_details: bool = False,
) -> str:
    if not view.tasks:
        return "No tasks match the current filters."

    lines: list[str] = []
    if view.groups is not None:
        for day, tasks in view.groups.items():
            lines.append(f"== {day} ==")
            for task in tasks:
                lines.extend(
                    render_node(task, expand_subtasks=expand_subtasks, show_details=show_details)
                )
    else:
        for task in view.tasks:
            lines.extend(
                render_node(task, expand_subtasks=expand_subtasks, show_details=show_details)
            )
    return "\n".join(lines)
