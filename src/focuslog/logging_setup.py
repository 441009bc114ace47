# src/focuslog/logging_setup.py

"""
Logging for the interactive tracker.

The console is shared with the REPL prompt, so it only carries what the user
should see between commands: startup/shutdown lines, refused or discarded
task data, and errors. The rotating file under the data directory gets
everything at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3

FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Longest matching prefix wins; anything unmatched needs ERROR.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "focuslog.cli": logging.INFO,
    "focuslog.connectors": logging.INFO,
    "focuslog.tasks": logging.WARNING,
    "focuslog": logging.WARNING,
}

# Marks handlers installed here, so a second call replaces only ours.
_OWNED = "_focuslog_handler"


class _ReplConsoleFilter(logging.Filter):
    """Per-subsystem minimum level for records echoed next to the prompt."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        for prefix in sorted(_CONSOLE_THRESHOLDS, key=len, reverse=True):
            if name == prefix or name.startswith(prefix + "."):
                return record.levelno >= _CONSOLE_THRESHOLDS[prefix]
        return record.levelno >= logging.ERROR


def resolve_level(name: Any, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / 10 -> logging level; unknown names give `default`."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(settings: Any, *, console_level: int | None = None) -> Path:
    """
    Install the console and file handlers on the root logger.

    Levels come from settings.log_level unless console_level is given.
    Calling again replaces the handlers from the previous call and leaves
    foreign handlers alone. Returns the log file path.
    """
    log_dir = Path(settings.data_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{settings.app_name}.log"

    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, _OWNED, False):
            root.removeHandler(h)
            h.close()
    root.setLevel(logging.DEBUG)

    if console_level is None:
        console_level = resolve_level(settings.log_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.addFilter(_ReplConsoleFilter())

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    for h in (console, file_handler):
        setattr(h, _OWNED, True)
        root.addHandler(h)

    logging.captureWarnings(True)
    return log_file
