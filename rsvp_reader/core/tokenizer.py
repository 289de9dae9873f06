"""Whitespace tokenizer feeding the playback controller.

WHY: RSVP shows whatever sits between two runs of whitespace as one word,
punctuation included: "fox." keeps its period so the reader pauses after
it. No language-specific rules apply.

HOW: str.split() with no separator collapses runs of any whitespace
(spaces, tabs, newlines) and drops leading/trailing whitespace.

RULES:
- Output tokens are non-empty and contain no whitespace
- Empty or whitespace-only input yields an empty list
"""

from __future__ import annotations

from typing import List


def tokenize(text: str) -> List[str]:
    """Split raw text into the ordered word sequence shown by the reader."""
    return text.split()


def count_words(text: str) -> int:
    return len(tokenize(text))
