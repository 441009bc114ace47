# src/focuslog/tasks/tracker.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..core.ports import Clock, IdFactory, TaskBlobStore
from . import task_tree
from .autocomplete import DEFAULT_SUGGESTION_LIMIT, insert_tag, suggest
from .task_input import parse_task_input
from .task_models import TaskId, TaskNode, TaskTree, generate_id, new_task_node, utc_now_iso
from .task_query import TaskQuery, TaskView, build_view
from .task_store import dump_tree, load_tree

logger = logging.getLogger(__name__)

# Deepest level a subtask may be added at (roots are level 1). Keeps the
# nested JSON blob well inside what the json module can encode and decode.
MAX_NESTING_DEPTH = 100


class TaskTracker:
    """
    Owner of the current task tree.

    The tree engine and query pipeline are pure functions; this class is the
    only stateful piece. Every mutation computes a new tree and hands it to
    replace(), which swaps it in and then persists it.

    Persistence is best-effort: a failed save is logged and the in-memory
    tree stays authoritative.
    """

    def __init__(
        self,
        store: TaskBlobStore | None = None,
        *,
        clock: Clock = utc_now_iso,
        id_factory: IdFactory = generate_id,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> None:
        self._store = store
        self._clock = clock
        self._id_factory = id_factory
        self._suggestion_limit = suggestion_limit
        self._tree: TaskTree = ()

        if store is not None:
            try:
                blob = store.load()
            except Exception:
                logger.exception("Task store load failed; starting with an empty tree.")
                blob = None
            self._tree = load_tree(blob)

        logger.info(
            "TaskTracker ready roots=%d nodes=%d",
            len(self._tree),
            task_tree.count_nodes(self._tree),
        )

    # ---- state cell ----

    @property
    def tree(self) -> TaskTree:
        return self._tree

    def replace(self, tree: TaskTree) -> None:
        """Swap in a new tree, then persist it."""
        if tree is self._tree:
            return
        self._tree = tree
        self._persist()

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save(dump_tree(self._tree))
        except Exception:
            logger.exception("Failed to save tasks (in-memory state kept).")

    # ---- commands ----

    def add_root_task(self, raw_input: str) -> TaskNode | None:
        if not raw_input or not raw_input.strip():
            return None
        parsed = parse_task_input(raw_input)
        node = new_task_node(
            parsed.title,
            parsed.tags,
            now=self._clock(),
            task_id=self._id_factory(),
        )
        self.replace((node, *self._tree))
        logger.debug("Task added id=%s tags=%s", node.id, list(node.tags))
        return node

    def add_subtask(
        self,
        parent_id: TaskId,
        title: str,
        tags: Iterable[str] = (),
    ) -> TaskNode | None:
        if not title or not title.strip():
            return None
        parent_depth = task_tree.node_depth(self._tree, parent_id)
        if parent_depth is None:
            logger.debug("add_subtask ignored: parent id=%s not found", parent_id)
            return None
        if parent_depth >= MAX_NESTING_DEPTH:
            logger.warning(
                "add_subtask refused: parent id=%s is already at depth %d (max %d)",
                parent_id,
                parent_depth,
                MAX_NESTING_DEPTH,
            )
            return None
        now = self._clock()
        node = new_task_node(
            title,
            tuple(tags),
            parent_id=parent_id,
            now=now,
            task_id=self._id_factory(),
        )
        self.replace(task_tree.insert_child(self._tree, parent_id, node, now=now))
        logger.debug("Subtask added id=%s parent=%s", node.id, parent_id)
        return node

    def toggle(self, node_id: TaskId) -> None:
        self.replace(task_tree.toggle_completion(self._tree, node_id, now=self._clock()))

    def delete_subtree(self, node_id: TaskId) -> None:
        self.replace(task_tree.delete_node(self._tree, node_id))

    def update_fields(self, node_id: TaskId, **updates: Any) -> None:
        if not updates:
            return
        self.replace(task_tree.update_fields(self._tree, node_id, updates, now=self._clock()))

    # ---- queries ----

    def find(self, node_id: TaskId) -> TaskNode | None:
        return task_tree.find_node(self._tree, node_id)

    def resolve_id(self, prefix: str) -> TaskId | None:
        return task_tree.resolve_id_prefix(self._tree, prefix)

    def depth(self, node_id: TaskId) -> int | None:
        return task_tree.node_depth(self._tree, node_id)

    def tag_index(self) -> set[str]:
        return task_tree.collect_tags(self._tree)

    def all_tags(self) -> list[str]:
        return task_tree.sorted_tags(self.tag_index())

    def view(self, query: TaskQuery | None = None) -> TaskView:
        return build_view(self._tree, query or TaskQuery())

    def suggest_tags(self, text: str, cursor: int | None = None) -> list[str]:
        pos = len(text) if cursor is None else cursor
        return suggest(text, pos, self.tag_index(), limit=self._suggestion_limit)

    def insert_tag(self, text: str, cursor: int | None, tag: str) -> tuple[str, int]:
        pos = len(text) if cursor is None else cursor
        return insert_tag(text, pos, tag)
