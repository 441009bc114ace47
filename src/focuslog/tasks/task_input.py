# src/focuslog/tasks/task_input.py

from __future__ import annotations

import re
from dataclasses import dataclass

TAG_REGEX = re.compile(r"#[\w-]+")


@dataclass(frozen=True, slots=True)
class ParsedInput:
    title: str
    tags: list[str]


def parse_task_input(raw: str) -> ParsedInput:
    """
    Split free text into a title and its inline #tags.

    "Buy milk #groceries #urgent" -> title "Buy milk", tags [groceries, urgent].

    When the input holds nothing but tags, the raw input is kept as the title
    so a tag-only submission still produces a visible task.
    """
    tags = [m.group(0)[1:] for m in TAG_REGEX.finditer(raw)]
    title = TAG_REGEX.sub("", raw).strip()
    return ParsedInput(title=title or raw, tags=tags)
