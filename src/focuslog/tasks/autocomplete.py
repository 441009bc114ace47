# src/focuslog/tasks/autocomplete.py

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_SUGGESTION_LIMIT = 5


def current_word(text: str, cursor: int) -> tuple[int, str]:
    """
    Word under the cursor: from the nearest space before `cursor` (or the
    start of the text) up to the cursor.

    Returns (start_index, word).
    """
    cursor = max(0, min(cursor, len(text)))
    start = text.rfind(" ", 0, cursor) + 1
    return start, text[start:cursor]


def suggest(
    text: str,
    cursor: int,
    known_tags: Iterable[str],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[str]:
    """
    Rank known tags for the '#tag' token being typed at `cursor`.

    Matching is case-insensitive substring; tags starting with the term come
    first, then alphabetical. A bare '#' or a non-tag word yields [].
    """
    _, word = current_word(text, cursor)
    if not word.startswith("#") or len(word) <= 1:
        return []

    term = word[1:].lower()
    matches = [t for t in set(known_tags) if term in t.lower()]
    matches.sort(key=lambda t: (not t.lower().startswith(term), t.lower(), t))
    return matches[: max(0, limit)]


def insert_tag(text: str, cursor: int, tag: str) -> tuple[str, int]:
    """
    Replace the word under the cursor with '#tag'.

    A single space follows the tag unless the next character already is
    whitespace. Returns (new_text, new_cursor).
    """
    cursor = max(0, min(cursor, len(text)))
    start, _ = current_word(text, cursor)
    before, after = text[:start], text[cursor:]
    spacer = "" if after[:1].isspace() else " "
    new_text = f"{before}#{tag}{spacer}{after}"
    return new_text, len(before) + 1 + len(tag) + len(spacer)
