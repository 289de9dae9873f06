"""Playback state machine: the single owner of a reading session.

WHY: Play, pause, reset, speed changes, and new text can arrive at any
moment from buttons, keyboard shortcuts, or a UI race. Every one of them
must leave exactly zero or one deadline armed, and a stale deadline must
never fire after a transition invalidated it. A small explicit state
machine makes that auditable.

HOW: PlaybackController holds the word sequence, the current index, the
WPM, and a PlaybackStatus. Each transition first cancels the in-flight
tick, updates state, then (when playing) arms the scheduler with the
*current* word's interval. The scheduler's fire calls _advance(), which
moves to the next word and re-arms from inside the fire so deadlines chain
without drift.

    IDLE ──play──▶ PLAYING ──pause──▶ PAUSED ──play──▶ PLAYING
                      │ last word's interval elapses
                      ▼
                   FINISHED ──reset / load_text──▶ IDLE

RULES:
- Invalid calls are silent no-ops; nothing here raises in normal use
- 0 <= word_index <= word_count at all times
- FINISHED is only reached by natural advance; reset() forces IDLE, index 0
- set_wpm() while playing discards the pending tick and re-times the
  current word at the new speed
- When FINISHED, the last word stays displayed (current_split is its split)
- Listeners receive a fresh PlaybackSnapshot after every effective change
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from rsvp_reader.config import DEFAULT_WPM
from rsvp_reader.core.metrics import (
    clamp_wpm,
    minutes_remaining,
    split_at_orp,
    word_interval_ms,
)
from rsvp_reader.core.model import PlaybackSnapshot, PlaybackStatus, WordDisplaySplit
from rsvp_reader.core.tokenizer import tokenize
from rsvp_reader.engine.frames import FrameSource
from rsvp_reader.engine.scheduler import DriftCorrectedScheduler

logger = logging.getLogger(__name__)

Listener = Callable[[PlaybackSnapshot], None]


class PlaybackController:
    """Owns the word sequence, position, speed, and status of one reading session.

    Args:
        scheduler: The scheduler this controller arms. Must not be shared
                   with another controller.
        wpm: Initial speed; clamped into [MIN_WPM, MAX_WPM].
    """

    def __init__(
        self,
        scheduler: DriftCorrectedScheduler,
        wpm: float = DEFAULT_WPM,
    ) -> None:
        self._scheduler = scheduler
        self._words: Tuple[str, ...] = ()
        self._index = 0
        self._wpm = clamp_wpm(wpm)
        self._status = PlaybackStatus.IDLE
        self._listeners: List[Listener] = []

    @classmethod
    def on_frames(cls, frames: FrameSource, wpm: float = DEFAULT_WPM) -> PlaybackController:
        """Build a controller with its own scheduler on ``frames``."""
        return cls(DriftCorrectedScheduler(frames), wpm=wpm)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def scheduler(self) -> DriftCorrectedScheduler:
        return self._scheduler

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    @property
    def word_count(self) -> int:
        return len(self._words)

    @property
    def word_index(self) -> int:
        return self._index

    @property
    def wpm(self) -> int:
        return self._wpm

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def is_playing(self) -> bool:
        return self._status == PlaybackStatus.PLAYING

    @property
    def current_word(self) -> Optional[str]:
        """The word on screen: the current one, or the last one once finished."""
        if not self._words:
            return None
        return self._words[min(self._index, len(self._words) - 1)]

    @property
    def current_split(self) -> Optional[WordDisplaySplit]:
        word = self.current_word
        return split_at_orp(word) if word is not None else None

    @property
    def progress(self) -> float:
        """Percentage of words already read, 0–100."""
        if not self._words:
            return 0.0
        return self._index / len(self._words) * 100

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            current_split=self.current_split,
            progress=self.progress,
            status=self._status,
            word_index=self._index,
            word_count=len(self._words),
            wpm=self._wpm,
            minutes_remaining=minutes_remaining(len(self._words) - self._index, self._wpm),
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def load_text(self, words: Iterable[str]) -> None:
        """Replace the word sequence wholesale and return to IDLE at word 0.

        WHY: New text invalidates the position and any pending deadline.
        A session's value is continuity, so a malformed token is dropped
        rather than rejecting the whole text.

        RULES:
        - Empty and whitespace-only tokens are skipped with a warning
        - Tokens are stored as given, never split or trimmed
        """
        self._scheduler.disarm()
        kept: List[str] = []
        skipped = 0
        for word in words:
            if not word or word.isspace():
                skipped += 1
                continue
            kept.append(word)
        if skipped:
            logger.warning("Skipped %d empty token(s) while loading text", skipped)

        self._words = tuple(kept)
        self._index = 0
        self._status = PlaybackStatus.IDLE
        logger.debug("Loaded %d words", len(self._words))
        self._notify()

    def load_raw_text(self, text: str) -> None:
        """Tokenize ``text`` on whitespace and load the resulting words."""
        self.load_text(tokenize(text))

    def play(self) -> None:
        """Start or resume playback from the current word.

        No-op unless IDLE or PAUSED with at least one unread word.
        """
        if self._status not in (PlaybackStatus.IDLE, PlaybackStatus.PAUSED):
            return
        if self._index >= len(self._words):
            return
        self._status = PlaybackStatus.PLAYING
        self._arm_current()
        logger.debug("Playing from word %d at %d WPM", self._index, self._wpm)
        self._notify()

    def pause(self) -> None:
        if self._status != PlaybackStatus.PLAYING:
            return
        self._scheduler.disarm()
        self._status = PlaybackStatus.PAUSED
        logger.debug("Paused at word %d", self._index)
        self._notify()

    def toggle(self) -> None:
        """Pause when playing, otherwise play. Bound to the space bar."""
        if self._status == PlaybackStatus.PLAYING:
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        """Stop playback and rewind to the first word, from any state."""
        self._scheduler.disarm()
        if self._index == 0 and self._status == PlaybackStatus.IDLE:
            return
        self._index = 0
        self._status = PlaybackStatus.IDLE
        logger.debug("Reset to word 0")
        self._notify()

    def set_wpm(self, wpm: float) -> None:
        """Change the reading speed, clamped into [MIN_WPM, MAX_WPM].

        While playing, the outstanding tick was timed at the old speed, so
        it is discarded and the current word is re-armed at the new one.
        Words already shown are not replayed.
        """
        new_wpm = clamp_wpm(wpm)
        if new_wpm == self._wpm:
            return
        old_wpm = self._wpm
        self._wpm = new_wpm
        if self._status == PlaybackStatus.PLAYING:
            self._scheduler.disarm()
            self._arm_current()
        logger.debug("WPM changed %d -> %d", old_wpm, new_wpm)
        self._notify()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _arm_current(self) -> None:
        word = self._words[self._index]
        self._scheduler.arm(word_interval_ms(word, self._wpm), self._advance)

    def _advance(self) -> None:
        """Scheduler fire: move past the current word, re-arm or finish."""
        if self._status != PlaybackStatus.PLAYING:
            return
        self._index += 1
        if self._index >= len(self._words):
            self._index = len(self._words)
            self._status = PlaybackStatus.FINISHED
            self._scheduler.disarm()
            logger.debug("Finished after %d words", len(self._words))
        else:
            self._arm_current()
        self._notify()
