# src/focuslog/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The tracker depends on Protocols instead of concrete implementations, so the
storage backend is swappable and tests can run fully in memory.
"""

from collections.abc import Callable
from typing import Protocol

Clock = Callable[[], str]
# Returns an ISO-8601 UTC timestamp string.

IdFactory = Callable[[], str]


class TaskBlobStore(Protocol):
    """
    Persistence collaborator: an opaque serialized blob.

    load() returns the last saved blob, or None if nothing was saved yet.
    save() is called after every mutation; failures are the caller's to log.
    """

    def load(self) -> str | None: ...

    def save(self, blob: str) -> None: ...
