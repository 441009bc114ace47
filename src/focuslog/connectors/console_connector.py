# src/focuslog/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.render import short_id
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return answer in ("y", "yes")


def handle_line(state: AppState, line: str) -> str | None:
    """
    One REPL step: slash commands go to the registry, anything else becomes
    a new root task. Returns the text to show (None for nothing).
    """
    line = line.strip()
    if not line:
        return None

    reply = command_registry.handle(state, line, emit=_print_ts, confirm=_confirm)
    if reply is not None:
        return reply

    node = state.tracker.add_root_task(line)
    if node is None:
        return None
    tags = " ".join(f"#{t}" for t in node.tags)
    return f"Added {short_id(node)}: {node.title}" + (f"  {tags}" if tags else "")


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (tasks=%d).", len(state.tracker.tree))
    app_name = str(getattr(state.settings, "app_name", "focuslog"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling that line."

        if reply:
            print(reply)

    logger.info("Console finished.")
