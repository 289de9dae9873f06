"""Data model shared by the engine and every front end.

WHY: Renderers need one well-typed value describing "what to show right
now" without reaching into the controller's internals. The controller needs
a closed set of playback states so transitions stay explicit.

HOW: Three types:
  WordDisplaySplit — a word cut at its Optimal Recognition Point
  PlaybackStatus   — the four controller states
  PlaybackSnapshot — read-only view of a playback session for renderers

RULES:
- WordDisplaySplit and PlaybackSnapshot are frozen; they are recomputed,
  never mutated
- PlaybackStatus inherits from str so values serialize cleanly to JSON
- progress is a percentage in [0, 100]
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WordDisplaySplit:
    """A word partitioned around its focus character.

    RULES:
    - prefix + focus_char + suffix == the original word
    - focus_char is a single character (empty only for an empty word)
    """

    prefix: str
    focus_char: str
    suffix: str

    @property
    def word(self) -> str:
        return self.prefix + self.focus_char + self.suffix


class PlaybackStatus(str, enum.Enum):
    """Valid states for a playback session.

    RULES:
    - idle: initial state, and the state after reset() or new text
    - playing: a deadline is armed for the current word
    - paused: no deadline armed, position kept
    - finished: every word has been shown; terminal until reset or new text
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Everything a renderer needs to draw one frame of the reader.

    Attributes:
        current_split: The word to display, split at its ORP, or None when
                       there is nothing to display (no text loaded).
        progress: Percentage of words already read, 0–100.
        status: Current playback state.
        word_index: Index of the current word (equals word_count when finished).
        word_count: Number of words in the loaded text.
        wpm: Current reading speed.
        minutes_remaining: Whole minutes left at the current speed.
    """

    current_split: Optional[WordDisplaySplit]
    progress: float
    status: PlaybackStatus
    word_index: int
    word_count: int
    wpm: int
    minutes_remaining: int
