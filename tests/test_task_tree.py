# tests/test_task_tree.py

from __future__ import annotations

import pytest

from focuslog.tasks import task_tree
from focuslog.tasks.task_models import TaskNode, TaskTree

from .fakes import make_node

NOW = "2026-10-18T12:00:00.000Z"
LATER = "2026-10-18T12:05:00.000Z"


@pytest.fixture()
def tree() -> TaskTree:
    """
    A
    ├── A1
    │   └── A1a
    └── A2
    B
    """
    a1a = make_node("A1a", parent_id="A1", tags=("deep",))
    a1 = make_node("A1", parent_id="A", subtasks=(a1a,))
    a2 = make_node("A2", parent_id="A", completed_at="2026-10-02T10:00:00.000Z")
    a = make_node("A", tags=("work",), subtasks=(a1, a2))
    b = make_node("B", tags=("home", "Work"))
    return (a, b)


def _ids(tree: TaskTree) -> list[str]:
    return [n.id for n in task_tree.iter_nodes(tree)]


def test_iter_nodes_is_preorder(tree: TaskTree) -> None:
    assert _ids(tree) == ["A", "A1", "A1a", "A2", "B"]
    assert task_tree.count_nodes(tree) == 5


def test_toggle_deep_node_sets_and_clears_completion(tree: TaskTree) -> None:
    once = task_tree.toggle_completion(tree, "A1a", now=NOW)
    node = task_tree.find_node(once, "A1a")
    assert node is not None
    assert node.is_completed is True
    assert node.completed_at == NOW
    assert node.updated_at == NOW

    twice = task_tree.toggle_completion(once, "A1a", now=LATER)
    node2 = task_tree.find_node(twice, "A1a")
    original = task_tree.find_node(tree, "A1a")
    assert node2 is not None and original is not None
    assert (node2.is_completed, node2.completed_at) == (original.is_completed, original.completed_at)
    assert node2.updated_at == LATER


def test_mutation_leaves_input_untouched_and_shares_siblings(tree: TaskTree) -> None:
    new_tree = task_tree.toggle_completion(tree, "A1a", now=NOW)

    untouched = task_tree.find_node(tree, "A1a")
    assert untouched is not None and untouched.is_completed is False

    assert new_tree[1] is tree[1]
    assert new_tree[0] is not tree[0]
    assert new_tree[0].subtasks[1] is tree[0].subtasks[1]


@pytest.mark.parametrize(
    "op",
    [
        lambda t: task_tree.toggle_completion(t, "nope", now=NOW),
        lambda t: task_tree.update_fields(t, "nope", {"title": "x"}, now=NOW),
        lambda t: task_tree.delete_node(t, "nope"),
        lambda t: task_tree.insert_child(t, "nope", make_node("C"), now=NOW),
    ],
    ids=["toggle", "update", "delete", "insert"],
)
def test_unknown_id_is_a_noop(tree: TaskTree, op) -> None:
    result = op(tree)
    assert result == tree
    assert result is tree


def test_delete_removes_whole_subtree(tree: TaskTree) -> None:
    before = task_tree.count_nodes(tree)
    new_tree = task_tree.delete_node(tree, "A1")
    assert task_tree.count_nodes(new_tree) == before - 2
    assert task_tree.find_node(new_tree, "A1") is None
    assert task_tree.find_node(new_tree, "A1a") is None
    assert _ids(new_tree) == ["A", "A2", "B"]


def test_delete_root(tree: TaskTree) -> None:
    new_tree = task_tree.delete_node(tree, "A")
    assert _ids(new_tree) == ["B"]


def test_insert_child_appends_and_sets_parent(tree: TaskTree) -> None:
    child = make_node("new")
    new_tree = task_tree.insert_child(tree, "A1a", child, now=NOW)

    parent = task_tree.find_node(new_tree, "A1a")
    assert parent is not None
    assert [st.id for st in parent.subtasks] == ["new"]
    assert parent.subtasks[0].parent_id == "A1a"
    assert parent.updated_at == NOW


def test_insert_child_keeps_insertion_order(tree: TaskTree) -> None:
    t1 = task_tree.insert_child(tree, "A", make_node("A3"), now=NOW)
    t2 = task_tree.insert_child(t1, "A", make_node("A4"), now=NOW)
    assert [st.id for st in t2[0].subtasks] == ["A1", "A2", "A3", "A4"]


def test_update_fields_merges_and_ignores_protected(tree: TaskTree) -> None:
    new_tree = task_tree.update_fields(
        tree,
        "A2",
        {
            "title": "Renamed",
            "description": "notes",
            "tags": ["x", "y"],
            "id": "hijack",
            "created_at": "1999-01-01T00:00:00.000Z",
            "subtasks": (),
            "bogus": 1,
        },
        now=NOW,
    )
    node = task_tree.find_node(new_tree, "A2")
    assert node is not None
    assert node.title == "Renamed"
    assert node.description == "notes"
    assert node.tags == ("x", "y")
    assert node.created_at == "2026-10-01T08:00:00.000Z"
    assert node.parent_id == "A"
    assert node.updated_at == NOW


def test_update_fields_keeps_completion_invariant(tree: TaskTree) -> None:
    done = task_tree.update_fields(tree, "B", {"is_completed": True}, now=NOW)
    node = task_tree.find_node(done, "B")
    assert node is not None
    assert node.is_completed and node.completed_at == NOW

    reopened = task_tree.update_fields(done, "B", {"is_completed": False}, now=LATER)
    node2 = task_tree.find_node(reopened, "B")
    assert node2 is not None
    assert node2.is_completed is False and node2.completed_at is None


def test_collect_tags_is_recursive_and_case_sensitive(tree: TaskTree) -> None:
    assert task_tree.collect_tags(tree) == {"work", "Work", "home", "deep"}


def test_sorted_tags_ignores_case() -> None:
    assert task_tree.sorted_tags({"beta", "Alpha", "gamma"}) == ["Alpha", "beta", "gamma"]


def test_subtask_progress(tree: TaskTree) -> None:
    assert task_tree.subtask_progress(tree[0]) == (1, 2)
    assert task_tree.subtask_progress(tree[1]) == (0, 0)


def test_resolve_id_prefix() -> None:
    tree: tuple[TaskNode, ...] = (
        make_node("abc123", subtasks=(make_node("abd456", parent_id="abc123"),)),
    )
    assert task_tree.resolve_id_prefix(tree, "abc") == "abc123"
    assert task_tree.resolve_id_prefix(tree, "abd456") == "abd456"
    assert task_tree.resolve_id_prefix(tree, "ab") is None
    assert task_tree.resolve_id_prefix(tree, "zz") is None
    assert task_tree.resolve_id_prefix(tree, "  ") is None


@pytest.mark.parametrize("title", ["", "   ", None, 42])
def test_update_fields_ignores_blank_title(tree: TaskTree, title) -> None:
    assert task_tree.update_fields(tree, "B", {"title": title}, now=NOW) is tree

    new_tree = task_tree.update_fields(tree, "B", {"title": title, "description": "d"}, now=NOW)
    node = task_tree.find_node(new_tree, "B")
    assert node is not None
    assert node.title == "B"
    assert node.description == "d"


def test_update_fields_strips_title(tree: TaskTree) -> None:
    new_tree = task_tree.update_fields(tree, "A1", {"title": "  Renamed  "}, now=NOW)
    node = task_tree.find_node(new_tree, "A1")
    assert node is not None and node.title == "Renamed"


def _chain(depth: int) -> TaskTree:
    node = make_node(f"n{depth}", parent_id=f"n{depth - 1}")
    for level in range(depth - 1, 0, -1):
        parent_id = f"n{level - 1}" if level > 1 else None
        node = make_node(f"n{level}", parent_id=parent_id, subtasks=(node,))
    return (node,)


def test_operations_work_on_very_deep_chains() -> None:
    depth = 5000
    tree = _chain(depth)
    deepest = f"n{depth}"

    assert task_tree.count_nodes(tree) == depth
    assert task_tree.node_depth(tree, deepest) == depth
    assert task_tree.resolve_id_prefix(tree, deepest) == deepest

    toggled = task_tree.toggle_completion(tree, deepest, now=NOW)
    node = task_tree.find_node(toggled, deepest)
    assert node is not None and node.is_completed and node.completed_at == NOW

    grown = task_tree.insert_child(toggled, deepest, make_node("leaf"), now=NOW)
    assert task_tree.node_depth(grown, "leaf") == depth + 1

    trimmed = task_tree.delete_node(grown, "n2")
    assert task_tree.count_nodes(trimmed) == 1
    assert trimmed[0].subtasks == ()

    assert task_tree.toggle_completion(tree, "missing", now=NOW) is tree
