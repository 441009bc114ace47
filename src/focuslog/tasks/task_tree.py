# src/focuslog/tasks/task_tree.py

"""
Pure, id-addressed operations over the task tree.

Every mutation goes through one traversal (transform_node) so that all of
them share the same "unknown id -> tree returned unchanged" behavior. Nothing
here performs I/O; the tracker is the only place that holds state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import replace
from typing import Any

from .task_models import TaskId, TaskNode, TaskTree, utc_now_iso

logger = logging.getLogger(__name__)

NodeTransform = Callable[[TaskNode], TaskNode | None]

# Fields update_fields() must never touch: identity and structure.
PROTECTED_FIELDS = frozenset({"id", "parent_id", "created_at", "subtasks"})
UPDATABLE_FIELDS = frozenset({"title", "description", "tags", "is_completed", "completed_at"})


def _locate(nodes: TaskTree, node_id: TaskId) -> list[int] | None:
    """Sibling indexes from the top level down to `node_id`, or None."""
    stack: list[tuple[TaskTree, int, list[int]]] = [(nodes, 0, [])]
    while stack:
        siblings, idx, path = stack.pop()
        if idx >= len(siblings):
            continue
        node = siblings[idx]
        here = [*path, idx]
        if node.id == node_id:
            return here
        stack.append((siblings, idx + 1, path))
        if node.subtasks:
            stack.append((node.subtasks, 0, here))
    return None


def transform_node(tree: TaskTree, node_id: TaskId, fn: NodeTransform) -> TaskTree:
    """
    Replace the node with `node_id` (at any depth) by fn(node).

    - fn returning None removes the node together with its subtree.
    - Ancestors of the match are rebuilt; every other subtree is shared.
    - Unknown id: the input tree itself is returned.
    """
    nodes = tuple(tree)
    path = _locate(nodes, node_id)
    if path is None:
        logger.debug("Tree op ignored: id=%s not found", node_id)
        return tree

    levels = [nodes]
    for idx in path[:-1]:
        levels.append(levels[-1][idx].subtasks)

    idx = path[-1]
    target = levels[-1]
    result = fn(target[idx])
    middle = () if result is None else (result,)
    rebuilt = target[:idx] + middle + target[idx + 1 :]

    for depth in range(len(path) - 2, -1, -1):
        siblings, idx = levels[depth], path[depth]
        parent = replace(siblings[idx], subtasks=rebuilt)
        rebuilt = siblings[:idx] + (parent,) + siblings[idx + 1 :]
    return rebuilt


# ---- mutations ----


def toggle_completion(tree: TaskTree, node_id: TaskId, now: str | None = None) -> TaskTree:
    ts = now or utc_now_iso()

    def _toggle(node: TaskNode) -> TaskNode:
        done = not node.is_completed
        return replace(
            node,
            is_completed=done,
            completed_at=ts if done else None,
            updated_at=ts,
        )

    return transform_node(tree, node_id, _toggle)


def _clean_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    clean: dict[str, Any] = {}
    for key, value in updates.items():
        if key in PROTECTED_FIELDS:
            logger.warning("update_fields: refusing to change protected field %r", key)
            continue
        if key not in UPDATABLE_FIELDS:
            logger.warning("update_fields: unknown field %r ignored", key)
            continue
        if key == "title":
            if not isinstance(value, str) or not value.strip():
                logger.warning("update_fields: blank title ignored")
                continue
            value = value.strip()
        if key == "tags":
            value = tuple(value or ())
        clean[key] = value
    return clean


def update_fields(
    tree: TaskTree,
    node_id: TaskId,
    updates: Mapping[str, Any],
    now: str | None = None,
) -> TaskTree:
    """Merge `updates` into the node and refresh updated_at."""
    ts = now or utc_now_iso()
    clean = _clean_updates(updates)
    if not clean:
        return tree

    def _update(node: TaskNode) -> TaskNode:
        merged = replace(node, **clean, updated_at=ts)
        # keep completed_at iff is_completed
        if merged.is_completed and not merged.completed_at:
            merged = replace(merged, completed_at=ts)
        elif not merged.is_completed and merged.completed_at is not None:
            merged = replace(merged, completed_at=None)
        return merged

    return transform_node(tree, node_id, _update)


def delete_node(tree: TaskTree, node_id: TaskId) -> TaskTree:
    return transform_node(tree, node_id, lambda _node: None)


def insert_child(
    tree: TaskTree,
    parent_id: TaskId,
    new_node: TaskNode,
    now: str | None = None,
) -> TaskTree:
    """Append new_node under parent_id. Unknown parent: tree returned unchanged."""
    ts = now or utc_now_iso()
    child = new_node if new_node.parent_id == parent_id else replace(new_node, parent_id=parent_id)

    def _append(node: TaskNode) -> TaskNode:
        return replace(node, subtasks=(*node.subtasks, child), updated_at=ts)

    return transform_node(tree, parent_id, _append)


# ---- reads ----


def iter_nodes(tree: Iterable[TaskNode]) -> Iterator[TaskNode]:
    """Depth-first, pre-order walk over every node at every depth."""
    stack = list(reversed(tuple(tree)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.subtasks))


def node_depth(tree: TaskTree, node_id: TaskId) -> int | None:
    """1 for a root task, 2 for its subtasks, ...; None for an unknown id."""
    stack = [(node, 1) for node in reversed(tree)]
    while stack:
        node, depth = stack.pop()
        if node.id == node_id:
            return depth
        stack.extend((st, depth + 1) for st in reversed(node.subtasks))
    return None


def find_node(tree: TaskTree, node_id: TaskId) -> TaskNode | None:
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


def count_nodes(tree: TaskTree) -> int:
    return sum(1 for _ in iter_nodes(tree))


def subtask_progress(node: TaskNode) -> tuple[int, int]:
    """(completed, total) over direct children."""
    done = sum(1 for st in node.subtasks if st.is_completed)
    return done, len(node.subtasks)


def resolve_id_prefix(tree: TaskTree, prefix: str) -> TaskId | None:
    """
    Exact id, or the single id starting with `prefix`.

    Ambiguous or unknown prefixes resolve to None.
    """
    prefix = prefix.strip()
    if not prefix:
        return None
    matches: list[TaskId] = []
    for node in iter_nodes(tree):
        if node.id == prefix:
            return node.id
        if node.id.startswith(prefix):
            matches.append(node.id)
    return matches[0] if len(matches) == 1 else None


# ---- tag index ----


def collect_tags(tree: TaskTree) -> set[str]:
    """All distinct tags at every depth (case-sensitive, no normalization)."""
    tags: set[str] = set()
    for node in iter_nodes(tree):
        tags.update(node.tags)
    return tags


def sorted_tags(tags: Iterable[str]) -> list[str]:
    return sorted(tags, key=lambda t: (t.lower(), t))
