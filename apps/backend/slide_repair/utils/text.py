"""
Text heuristics shared by the repair engine and the validators.
"""
from typing import Any

from slide_repair.repair.constants import (
    GARBAGE_MIN_CHARS,
    GARBAGE_MIN_WORDS,
    GARBAGE_UNIQUE_RATIO,
    PLACEHOLDER_VALUES,
)

ELLIPSIS = '…'
ELLIPSIS_MARKERS = ('...', ELLIPSIS)


def is_garbage(text: Any) -> bool:
    """
    Detect degenerate, repetitive generator output.

    A string of at least 20 characters with more than five words is garbage
    when fewer than half of its words are distinct (case-insensitive).
    """
    if not isinstance(text, str) or len(text) < GARBAGE_MIN_CHARS:
        return False
    words = text.split()
    if len(words) < GARBAGE_MIN_WORDS:
        return False
    unique_words = {w.lower() for w in words}
    return len(unique_words) < len(words) * GARBAGE_UNIQUE_RATIO


def is_placeholder(value: Any) -> bool:
    """True for missing values, blank strings and the placeholder vocabulary."""
    if value is None:
        return True
    raw = str(value).strip().lower()
    if not raw:
        return True
    return raw in PLACEHOLDER_VALUES


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
