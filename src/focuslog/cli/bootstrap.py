# src/focuslog/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the JSON file store into a TaskTracker and builds AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_models import StatusFilter
from ..tasks.task_query import TaskQuery
from ..tasks.task_store import JsonFileTaskStore
from ..tasks.tracker import TaskTracker

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    tracker = TaskTracker(
        JsonFileTaskStore(settings.tasks_path),
        suggestion_limit=settings.suggestion_limit,
    )
    status = StatusFilter.parse(getattr(settings, "default_status", None))
    logger.debug("Initial view status=%s", status)

    return AppState(settings=settings, tracker=tracker, query=TaskQuery(status=status))
