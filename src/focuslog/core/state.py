# src/focuslog/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_query import TaskQuery
from ..tasks.tracker import TaskTracker


@dataclass
class AppState:
    # Settings object (config.Settings in the app, SimpleNamespace in tests).
    settings: Any
    tracker: TaskTracker

    # Current view: filters plus display toggles.
    query: TaskQuery = field(default_factory=TaskQuery)
    expand_subtasks: bool = False
    show_details: bool = False
