# src/focuslog/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from .task_models import TaskNode, TaskTree

logger = logging.getLogger(__name__)


class MalformedTaskData(ValueError):
    """Persisted blob cannot be decoded into a task tree."""


# ---- codec ----

# Optional string fields: absent, null or a string. Anything else is a
# shape error and makes the whole blob unusable.
_OPTIONAL_STR_FIELDS = ("parentId", "description", "completedAt", "createdAt", "updatedAt")


def node_to_dict(node: TaskNode) -> dict[str, Any]:
    """Flat camelCase fields of one node; `subtasks` is left empty for the caller."""
    out: dict[str, Any] = {"id": node.id}
    if node.parent_id is not None:
        out["parentId"] = node.parent_id
    out["title"] = node.title
    if node.description is not None:
        out["description"] = node.description
    out["tags"] = list(node.tags)
    if node.completed_at is not None:
        out["completedAt"] = node.completed_at
    out["isCompleted"] = node.is_completed
    out["createdAt"] = node.created_at
    out["updatedAt"] = node.updated_at
    out["subtasks"] = []
    return out


def tree_to_items(tree: TaskTree) -> list[dict[str, Any]]:
    """Nested JSON-ready dicts for the whole tree, walked with an explicit stack."""
    items: list[dict[str, Any]] = []
    stack: list[tuple[TaskNode, list[dict[str, Any]]]] = [(n, items) for n in reversed(tree)]
    while stack:
        node, siblings = stack.pop()
        out = node_to_dict(node)
        siblings.append(out)
        stack.extend((st, out["subtasks"]) for st in reversed(node.subtasks))
    return items


def node_from_dict(raw: dict[str, Any], subtasks: TaskTree = ()) -> TaskNode:
    """Decode one node's own fields; children are decoded by the caller."""
    try:
        node_id = raw["id"]
        title = raw["title"]
    except KeyError as e:
        raise MalformedTaskData(f"task is missing {e.args[0]!r}") from e
    if not isinstance(node_id, str) or not isinstance(title, str):
        raise MalformedTaskData("task id/title must be strings")

    for key in _OPTIONAL_STR_FIELDS:
        value = raw.get(key)
        if value is not None and not isinstance(value, str):
            raise MalformedTaskData(f"task {node_id}: {key} must be a string")

    is_completed = raw.get("isCompleted", False)
    if not isinstance(is_completed, bool):
        raise MalformedTaskData(f"task {node_id}: isCompleted must be a boolean")

    tags = raw.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise MalformedTaskData(f"task {node_id}: tags must be a list of strings")

    created_at = raw.get("createdAt") or ""
    updated_at = raw.get("updatedAt") or created_at
    completed_at = raw.get("completedAt")
    if not is_completed:
        completed_at = None
    elif not completed_at:
        completed_at = updated_at or None

    return TaskNode(
        id=node_id,
        title=title,
        created_at=created_at,
        updated_at=updated_at,
        tags=tuple(tags),
        is_completed=is_completed,
        completed_at=completed_at,
        description=raw.get("description"),
        parent_id=raw.get("parentId"),
        subtasks=subtasks,
    )


def sanitize_items(items: list[Any]) -> tuple[list[dict[str, Any]], list[int]]:
    """
    Flatten raw items into pre-order, checking the shape of every object.

    Returns (objects, parent index per object; -1 for roots). Older blobs may
    omit `subtasks` or store null; both count as no children.
    """
    objects: list[dict[str, Any]] = []
    parents: list[int] = []
    stack: list[tuple[Any, int]] = [(item, -1) for item in reversed(items)]
    while stack:
        item, parent = stack.pop()
        if not isinstance(item, dict):
            raise MalformedTaskData(f"expected an object, got {type(item).__name__}")
        children = item.get("subtasks")
        if children is None:
            children = []
        elif not isinstance(children, list):
            raise MalformedTaskData("subtasks must be a list")
        idx = len(objects)
        objects.append(item)
        parents.append(parent)
        stack.extend((child, idx) for child in reversed(children))
    return objects, parents


def items_to_tree(items: list[Any]) -> TaskTree:
    objects, parents = sanitize_items(items)

    # Reverse pre-order visits every child before its parent, last sibling first.
    children: list[list[TaskNode]] = [[] for _ in objects]
    roots: list[TaskNode] = []
    for idx in range(len(objects) - 1, -1, -1):
        node = node_from_dict(objects[idx], tuple(reversed(children[idx])))
        parent = parents[idx]
        (roots if parent < 0 else children[parent]).append(node)
    return tuple(reversed(roots))


def dump_tree(tree: TaskTree) -> str:
    return json.dumps(tree_to_items(tree), ensure_ascii=False, indent=2)


def parse_tree(blob: str) -> TaskTree:
    """Decode a blob, raising MalformedTaskData on anything unusable."""
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as e:
        raise MalformedTaskData(f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise MalformedTaskData("JSON nested too deeply") from e
    if not isinstance(data, list):
        raise MalformedTaskData("top level must be a list of tasks")
    return items_to_tree(data)


def load_tree(blob: str | None) -> TaskTree:
    """
    Decode a persisted blob into a tree.

    None (nothing saved yet) and malformed data both give an empty tree;
    malformed data is logged and discarded.
    """
    if blob is None or not blob.strip():
        return ()
    try:
        return parse_tree(blob)
    except MalformedTaskData as e:
        logger.warning("Discarding malformed task data: %s", e)
        return ()


# ---- file store ----


class JsonFileTaskStore:
    """
    Single-file JSON blob store.

    - load() returns the raw blob, or None when nothing was saved yet
    - save() writes through a temp file + os.replace so readers never see
      a half-written file
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileTaskStore ready path=%s exists=%s", self._path, self._path.exists())

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            return self._path.read_text("utf-8")
        except OSError:
            logger.exception("Failed to read tasks from %s", self._path)
            return None

    def save(self, blob: str) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(blob, "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            # personal notes: keep the file private
            os.chmod(self._path, 0o600)
        logger.debug("Saved %d bytes to %s", len(blob), self._path)
