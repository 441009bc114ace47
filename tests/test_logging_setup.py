# tests/test_logging_setup.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from focuslog.logging_setup import _ReplConsoleFilter, resolve_level, setup_logging


@pytest.fixture()
def clean_root() -> Iterator[logging.Logger]:
    """Restore root handlers and level after a test installs its own."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_thresholds() -> None:
    f = _ReplConsoleFilter()
    assert f.filter(_record("focuslog.cli.main", logging.INFO))
    assert f.filter(_record("focuslog.connectors.console_connector", logging.INFO))
    assert not f.filter(_record("focuslog.tasks.tracker", logging.INFO))
    assert f.filter(_record("focuslog.tasks.tracker", logging.WARNING))
    assert not f.filter(_record("focuslog.tasks.task_store", logging.DEBUG))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("focuslogger", logging.WARNING))
    assert f.filter(_record("urllib3", logging.ERROR))


def test_resolve_level() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("chatty") == logging.INFO
    assert resolve_level(None, logging.WARNING) == logging.WARNING


def test_setup_logging_writes_file_and_is_idempotent(
    tmp_path: Path,
    clean_root: logging.Logger,
) -> None:
    settings = SimpleNamespace(
        app_name="focuslog-test",
        log_level="warning",
        data_dir=tmp_path / "data",
    )
    foreign = logging.NullHandler()
    clean_root.addHandler(foreign)

    log_file = setup_logging(settings)
    setup_logging(settings)

    assert log_file == tmp_path / "data" / "focuslog-test.log"
    assert foreign in clean_root.handlers
    owned = [h for h in clean_root.handlers if getattr(h, "_focuslog_handler", False)]
    assert len(owned) == 2
    console = next(h for h in owned if not isinstance(h, logging.FileHandler))
    assert console.level == logging.WARNING

    logging.getLogger("focuslog.tasks.tracker").debug("tree swapped")
    for h in owned:
        h.flush()
    assert "DEBUG focuslog.tasks.tracker: tree swapped" in log_file.read_text("utf-8")
    clean_root.removeHandler(foreign)
