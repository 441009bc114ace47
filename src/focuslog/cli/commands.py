# src/focuslog/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from typing import cast

from ..core.state import AppState
from ..tasks.task_input import parse_task_input
from ..tasks.task_models import StatusFilter
from ..tasks.task_query import TaskQuery, toggle_tag, today_iso_date
from ..tasks.task_tree import count_nodes
from ..tasks.tracker import MAX_NESTING_DEPTH
from .render import describe_query, render_view, short_id

CommandEmitter = Callable[[str], None]
ConfirmPrompt = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler4 = Callable[
    [AppState, list[str], CommandEmitter | None, ConfirmPrompt | None], str
]
CommandHandler = CommandHandler2 | CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /ls, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
        confirm: ConfirmPrompt | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 4

        if nparams >= 4:
            h4 = cast(CommandHandler4, handler)
            return h4(state, args, emit, confirm)

        if nparams == 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (plain text without a leading / adds a task)")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve(state: AppState, token: str) -> tuple[str | None, str]:
    task_id = state.tracker.resolve_id(token)
    if task_id is None:
        return None, f"No single task matches id {token!r}."
    return task_id, ""


def _clean_tag(raw: str) -> str:
    return raw.lstrip("#")


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    tree = state.tracker.tree
    done = sum(1 for t in tree if t.is_completed)
    return (
        "Status:\n"
        f"  Root tasks: {len(tree)} ({done} completed)\n"
        f"  All nodes: {count_nodes(tree)}\n"
        f"  Tags: {len(state.tracker.tag_index())}\n"
        f"  {describe_query(state.query)}\n"
        f"  Subtasks expanded: {'ON' if state.expand_subtasks else 'OFF'}\n"
        f"  Details: {'ON' if state.show_details else 'OFF'}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    node = state.tracker.add_root_task(" ".join(args))
    if node is None:
        return "Usage: /add <title> [#tag ...]"
    return f"Added {short_id(node)}: {node.title}"


def cmd_sub(state: AppState, args: list[str]) -> str:
    """
    /sub <id> <title> [#tag ...]
    """
    if len(args) < 2:
        return "Usage: /sub <id> <title> [#tag ...]"
    parent_id, err = _resolve(state, args[0])
    if parent_id is None:
        return err
    parsed = parse_task_input(" ".join(args[1:]))
    node = state.tracker.add_subtask(parent_id, parsed.title, parsed.tags)
    if node is None:
        if (state.tracker.depth(parent_id) or 0) >= MAX_NESTING_DEPTH:
            return f"Subtask not added: nesting is limited to {MAX_NESTING_DEPTH} levels."
        return "Subtask not added."
    return f"Added subtask {short_id(node)} under {parent_id[:6]}: {node.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id, err = _resolve(state, args[0])
    if task_id is None:
        return err
    state.tracker.toggle(task_id)
    node = state.tracker.find(task_id)
    if node is None:
        return "Task disappeared."
    return f"{'Completed' if node.is_completed else 'Reopened'}: {node.title}"


def cmd_rm(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
    confirm: ConfirmPrompt | None = None,
) -> str:
    """
    /rm <id>     -> delete a task and all its subtasks (asks first)
    /rm -y <id>  -> delete without asking
    """
    force = "-y" in args
    rest = [a for a in args if a != "-y"]
    if not rest:
        return "Usage: /rm [-y] <id>"
    task_id, err = _resolve(state, rest[0])
    if task_id is None:
        return err
    node = state.tracker.find(task_id)
    if node is None:
        return err

    ask = bool(getattr(state.settings, "confirm_delete", True)) and not force
    if ask:
        if confirm is None:
            return "Confirmation required: use /rm -y <id>."
        removed = count_nodes((node,))
        if not confirm(f"Delete {node.title!r} and {removed - 1} subtask(s)?"):
            return "Cancelled."

    state.tracker.delete_subtree(task_id)
    logger.debug("Deleted subtree id=%s", task_id)
    return f"Deleted: {node.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> <new title> [#tag ...]  (tags, if given, replace the old ones)
    """
    if len(args) < 2:
        return "Usage: /edit <id> <new title> [#tag ...]"
    task_id, err = _resolve(state, args[0])
    if task_id is None:
        return err
    parsed = parse_task_input(" ".join(args[1:]))
    if parsed.tags:
        state.tracker.update_fields(task_id, title=parsed.title, tags=parsed.tags)
    else:
        state.tracker.update_fields(task_id, title=parsed.title)
    return f"Updated {args[0]}: {parsed.title}"


def cmd_desc(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /desc <id> [text]  (no text clears the description)"
    task_id, err = _resolve(state, args[0])
    if task_id is None:
        return err
    text = " ".join(args[1:]).strip()
    state.tracker.update_fields(task_id, description=text or None)
    return "Description updated." if text else "Description cleared."


def cmd_retag(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /retag <id> [tag ...]"
    task_id, err = _resolve(state, args[0])
    if task_id is None:
        return err
    tags = [_clean_tag(a) for a in args[1:] if _clean_tag(a)]
    state.tracker.update_fields(task_id, tags=tags)
    return "Tags: " + (" ".join(f"#{t}" for t in tags) if tags else "(none)")


def cmd_ls(state: AppState, args: list[str]) -> str:
    view = state.tracker.view(state.query)
    body = render_view(
        view,
        expand_subtasks=state.expand_subtasks,
        show_details=state.show_details,
    )
    return f"{describe_query(state.query)}\n{body}"


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter status <all|active|completed>
    /filter search [text]        (no text clears the search)
    /filter date <YYYY-MM-DD|today|off>
    /filter tag <tag>            (toggles the tag in the selection)
    /filter clear
    """
    usage = (
        "Usage:\n"
        "  /filter status <all|active|completed>\n"
        "  /filter search [text]\n"
        "  /filter date <YYYY-MM-DD|today|off>\n"
        "  /filter tag <tag>\n"
        "  /filter clear"
    )
    if not args:
        return usage

    sub = args[0].lower()
    rest = args[1:]
    query = state.query

    if sub == "status":
        if not rest:
            return usage
        status = StatusFilter.parse(rest[0], default=query.status)
        state.query = replace(query, status=status)

    elif sub == "search":
        state.query = replace(query, search=" ".join(rest).strip())

    elif sub == "date":
        if not rest:
            return usage
        raw = rest[0].lower()
        if raw in ("off", "none", "clear"):
            state.query = replace(query, completion_date=None)
        else:
            day = today_iso_date() if raw == "today" else raw
            try:
                date.fromisoformat(day)
            except ValueError:
                return f"Not a date: {rest[0]!r} (expected YYYY-MM-DD)."
            state.query = replace(query, completion_date=day)

    elif sub == "tag":
        if not rest or not _clean_tag(rest[0]):
            return usage
        state.query = toggle_tag(query, _clean_tag(rest[0]))

    elif sub == "clear":
        state.query = TaskQuery()

    else:
        return usage

    return describe_query(state.query)


def cmd_tags(state: AppState, args: list[str]) -> str:
    tags = state.tracker.all_tags()
    if not tags:
        return "No tags yet."
    selected = set(state.query.tags)
    return "Tags: " + " ".join(f"[#{t}]" if t in selected else f"#{t}" for t in tags)


def cmd_suggest(state: AppState, args: list[str]) -> str:
    """
    /suggest <text>  -> tag completions for the last word of <text>
    """
    text = " ".join(args)
    matches = state.tracker.suggest_tags(text)
    if not matches:
        return "No suggestions."
    completed, _ = state.tracker.insert_tag(text, None, matches[0])
    return "Suggestions: " + ", ".join(f"#{t}" for t in matches) + f"\n  -> {completed}"


def cmd_expand(state: AppState, args: list[str]) -> str:
    state.expand_subtasks = not state.expand_subtasks
    return f"Subtasks {'expanded' if state.expand_subtasks else 'collapsed'}."


def cmd_details(state: AppState, args: list[str]) -> str:
    state.show_details = not state.show_details
    return f"Details {'shown' if state.show_details else 'hidden'}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show counts and current filters.")
registry.register("add", cmd_add, help_text="Add a task: /add Buy milk #groceries.")
registry.register("sub", cmd_sub, help_text="Add a subtask: /sub <id> <title> [#tag ...].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["x", "toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task and its subtasks: /rm [-y] <id>.", aliases=["del"])
registry.register("edit", cmd_edit, help_text="Change a title: /edit <id> <title> [#tag ...].")
registry.register("desc", cmd_desc, help_text="Set or clear notes: /desc <id> [text].")
registry.register("retag", cmd_retag, help_text="Replace tags: /retag <id> [tag ...].")
registry.register("ls", cmd_ls, help_text="List tasks for the current filters.", aliases=["list"])
registry.register(
    "filter", cmd_filter, help_text="Filters: /filter status|search|date|tag|clear ..."
)
registry.register("tags", cmd_tags, help_text="List all known tags.")
registry.register("suggest", cmd_suggest, help_text="Tag completions: /suggest Buy milk #gro.")
registry.register("expand", cmd_expand, help_text="Show/hide nested subtasks in /ls.")
registry.register("details", cmd_details, help_text="Show/hide descriptions in /ls.")
