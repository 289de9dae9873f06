"""Drift-corrected one-shot scheduler polled by the host's frame callback.

WHY: A reader at 600 WPM shows a new word every 100 ms, and a 20-minute
text is thousands of words. If each word's delay were measured from the
moment the previous word actually fired, every frame of polling latency
(up to ~16 ms) would be added to the total, and the reader would fall
seconds behind the requested speed. Deadlines therefore sit on an absolute
timeline: a word re-armed from inside a fire is due one interval after the
*previous deadline*, not after "now".

HOW: arm() records an absolute deadline and asks the FrameSource for a
frame. Each frame, the poller compares now_ms() with the deadline. Still
early, it requests another frame; due, it clears the tick and calls
on_fire() exactly once. The caller (the playback controller) computes the
next interval and calls arm() again from inside on_fire(); the scheduler
knows nothing about words, only about the next deadline.

RULES:
- At most one live ScheduledTick; arm() always disarms the previous one
- A tick is cleared *before* on_fire() runs, so on_fire() may re-arm and a
  raising on_fire() never leaves a stale tick behind
- Deadlines chain from the previous deadline only when arm() is called
  from inside on_fire(); fresh arms (play, resume, speed change) start
  from now
- A chained deadline lagging now by more than resync_after_ms (host was
  suspended) is rebased on now instead of bursting through the backlog
- interval_ms must be positive and finite
"""

from __future__ import annotations

import functools
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from rsvp_reader.config import RESYNC_AFTER_MS
from rsvp_reader.engine.frames import FrameSource

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTick:
    """Handle for one armed deadline.

    RULES:
    - live is True from arm() until the tick fires or is disarmed
    - fired_at_ms is the frame time at which on_fire() ran, or None
    """

    interval_ms: float
    deadline_ms: float
    on_fire: Callable[[], None]
    frame_handle: Any = None
    live: bool = True
    polls: int = 0
    fired_at_ms: Optional[float] = None

    @property
    def lateness_ms(self) -> Optional[float]:
        """How long after its deadline the tick actually fired."""
        if self.fired_at_ms is None:
            return None
        return self.fired_at_ms - self.deadline_ms


class DriftCorrectedScheduler:
    """Fires a callback at an absolute deadline, re-armable on every fire.

    Args:
        frames: The host's per-frame callback primitive.
        resync_after_ms: Maximum lag of a chained deadline behind the clock
                         before it is rebased on the current time.
    """

    def __init__(
        self,
        frames: FrameSource,
        resync_after_ms: float = RESYNC_AFTER_MS,
    ) -> None:
        self._frames = frames
        self._resync_after_ms = resync_after_ms
        self._tick: Optional[ScheduledTick] = None
        # Deadline of the tick whose on_fire() is currently running
        self._firing_deadline: Optional[float] = None

    @property
    def frames(self) -> FrameSource:
        return self._frames

    @property
    def armed(self) -> bool:
        return self._tick is not None

    @property
    def tick(self) -> Optional[ScheduledTick]:
        return self._tick

    @property
    def deadline_ms(self) -> Optional[float]:
        return self._tick.deadline_ms if self._tick is not None else None

    def arm(self, interval_ms: float, on_fire: Callable[[], None]) -> ScheduledTick:
        """Schedule ``on_fire`` to run ``interval_ms`` after the current base time.

        Any previously armed tick is cancelled first.

        Raises:
            ValueError: If interval_ms is not a positive finite number.
        """
        if not (math.isfinite(interval_ms) and interval_ms > 0):
            raise ValueError(
                "interval_ms must be a positive finite number, got {!r}".format(interval_ms)
            )
        self.disarm()

        now = self._frames.now_ms()
        base = now
        if self._firing_deadline is not None:
            base = self._firing_deadline
            lag = now - base
            if lag > self._resync_after_ms:
                logger.info("Deadline %.0f ms behind the clock, resynchronising", lag)
                base = now

        tick = ScheduledTick(
            interval_ms=interval_ms,
            deadline_ms=base + interval_ms,
            on_fire=on_fire,
        )
        self._tick = tick
        tick.frame_handle = self._frames.request_frame(functools.partial(self._poll, tick))
        return tick

    def disarm(self) -> None:
        """Cancel the pending deadline, if any. Safe to call repeatedly."""
        tick = self._tick
        if tick is None:
            return
        self._tick = None
        tick.live = False
        self._frames.cancel_frame(tick.frame_handle)
        tick.frame_handle = None

    def _poll(self, tick: ScheduledTick) -> None:
        if tick is not self._tick:
            return
        tick.polls += 1
        now = self._frames.now_ms()
        if now < tick.deadline_ms:
            tick.frame_handle = self._frames.request_frame(functools.partial(self._poll, tick))
            return

        self._tick = None
        tick.live = False
        tick.frame_handle = None
        tick.fired_at_ms = now
        self._firing_deadline = tick.deadline_ms
        try:
            tick.on_fire()
        finally:
            self._firing_deadline = None
