"""FocusLog: a personal task tracker with nested subtasks and #tags."""

__version__ = "0.1.0"
