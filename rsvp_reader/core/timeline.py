"""Offline reading timeline: when each word appears and for how long.

WHY: The CLI's --stats mode and the HTTP API need the full schedule of a
text without actually playing it: total reading time, where the long
punctuation pauses fall, and the split to render for each word. This is
also the ideal, drift-free deadline line the live scheduler tracks.

HOW: Walks the words once, accumulating word_interval_ms() into a running
start offset. WPM is clamped the same way the controller clamps it.

RULES:
- entries[n].start_ms == sum of intervals of entries[0..n-1]
- total_ms == sum of all intervals (0.0 for an empty text)
- start offsets are relative to the first word appearing, in milliseconds
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from rsvp_reader.core.metrics import (
    clamp_wpm,
    should_pause,
    split_at_orp,
    word_interval_ms,
)
from rsvp_reader.core.model import WordDisplaySplit


@dataclass
class TimelineEntry:
    """One word's place in the reading schedule."""

    index: int
    word: str
    split: WordDisplaySplit
    start_ms: float
    interval_ms: float

    @property
    def end_ms(self) -> float:
        return self.start_ms + self.interval_ms


@dataclass
class Timeline:
    """The complete reading schedule for a word sequence at one speed."""

    wpm: int
    entries: List[TimelineEntry] = field(default_factory=list)
    total_ms: float = 0.0

    @property
    def word_count(self) -> int:
        return len(self.entries)

    @property
    def pause_count(self) -> int:
        """Number of words that carry a punctuation pause."""
        return sum(1 for e in self.entries if should_pause(e.word))

    @property
    def effective_wpm(self) -> float:
        """Words per minute actually achieved once pauses are included."""
        if self.total_ms <= 0:
            return 0.0
        return self.word_count * 60000 / self.total_ms


def build_timeline(words: Iterable[str], wpm: float) -> Timeline:
    """Compute the reading schedule for ``words`` at ``wpm``.

    Args:
        words: Ordered word tokens, typically from tokenize().
        wpm: Requested speed; clamped into the supported range.

    Returns:
        A Timeline with one entry per word and the total duration.
    """
    clamped = clamp_wpm(wpm)
    timeline = Timeline(wpm=clamped)
    offset = 0.0
    for index, word in enumerate(words):
        interval = word_interval_ms(word, clamped)
        timeline.entries.append(TimelineEntry(
            index=index,
            word=word,
            split=split_at_orp(word),
            start_ms=offset,
            interval_ms=interval,
        ))
        offset += interval
    timeline.total_ms = offset
    return timeline
