# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from focuslog.core.state import AppState
from focuslog.tasks.tracker import TaskTracker

from .fakes import FakeBlobStore, FakeClock, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="focuslog-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        default_status="active",
        suggestion_limit=5,
        confirm_delete=True,
    )


@pytest.fixture()
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tracker(blob_store: FakeBlobStore, clock: FakeClock) -> TaskTracker:
    return TaskTracker(blob_store, clock=clock, id_factory=SequentialIds())


@pytest.fixture()
def state(settings: SimpleNamespace, tracker: TaskTracker) -> AppState:
    """AppState wired with the in-memory store and deterministic clock/ids."""
    return AppState(settings=settings, tracker=tracker)
