# src/focuslog/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(settings)

    logger.info("Starting %s...", settings.app_name)
    logger.debug("Logging to %s", log_file)

    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        # every mutation is already persisted; nothing to flush here
        logger.info("Bye. %d root task(s) in %s", len(state.tracker.tree), settings.tasks_path)


if __name__ == "__main__":
    main()
