"""Frame sources: the host's per-frame callback, behind one small interface.

WHY: The scheduler polls "has the deadline passed?" once per host frame.
Where frames come from depends on the front end — Tkinter's event loop in
the GUI, a sleep loop in the terminal, a simulated clock in tests. The
scheduler must not care which.

HOW: FrameSource is an ABC with three methods: now_ms(), request_frame(),
and cancel_frame(). Each request is one-shot; a poller that wants to keep
polling requests another frame from inside its callback.
  ManualFrameSource   — simulated clock, stepped explicitly (tests, dry runs)
  RealtimeFrameSource — blocking monotonic-clock loop (terminal playback)
  TkFrameSource       — widget.after() / after_cancel() (desktop GUI)

RULES:
- Callbacks requested during a frame run on the *next* frame, never the
  current one
- Cancelling an unknown or already-run handle is a no-op
- now_ms() is monotonic and in milliseconds
"""

from __future__ import annotations

import itertools
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, Optional, Sequence

from rsvp_reader.config import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameSource(ABC):
    """Abstract per-frame callback primitive used by the scheduler."""

    @abstractmethod
    def now_ms(self) -> float:
        """Current time in milliseconds on this source's clock."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> Any:
        """Run ``callback`` once on the next frame. Returns a cancel handle."""

    @abstractmethod
    def cancel_frame(self, handle: Any) -> None:
        """Cancel a pending request. Unknown handles are ignored."""


class _QueuedFrameSource(FrameSource):
    """Shared bookkeeping for sources that dispatch their own frames."""

    def __init__(self, frame_ms: float) -> None:
        if not frame_ms > 0:
            raise ValueError("frame_ms must be greater than 0, got {}".format(frame_ms))
        self.frame_ms = frame_ms
        self._pending: Dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    def _dispatch(self) -> None:
        """Run every callback that was pending when the frame started."""
        handles = list(self._pending)
        for handle in handles:
            # An earlier callback in this frame may have cancelled this one
            callback = self._pending.pop(handle, None)
            if callback is not None:
                callback()


class ManualFrameSource(_QueuedFrameSource):
    """Simulated clock that only moves when stepped.

    WHY: Timing behaviour (drift, punctuation pauses, WPM changes) must be
    testable deterministically, without sleeping and without flaky
    wall-clock assertions.

    HOW: step() moves the clock forward by one frame period (plus the next
    jitter value, if any) and dispatches pending callbacks. advance() and
    run_until() are loops over step().

    RULES:
    - The clock starts at start_ms and never moves except in step()
    - jitter_ms values are cycled; each adds to one frame's period
    """

    def __init__(
        self,
        frame_ms: float = FRAME_INTERVAL_MS,
        start_ms: float = 0.0,
        jitter_ms: Optional[Sequence[float]] = None,
    ) -> None:
        super().__init__(frame_ms)
        self._now = start_ms
        self._jitter: Optional[Iterator[float]] = (
            itertools.cycle(jitter_ms) if jitter_ms else None
        )
        self.frames = 0

    def now_ms(self) -> float:
        return self._now

    def step(self) -> None:
        """Advance one frame and run the callbacks requested before it."""
        period = self.frame_ms
        if self._jitter is not None:
            period += next(self._jitter)
        self._now += period
        self.frames += 1
        self._dispatch()

    def advance(self, ms: float) -> None:
        """Step frames until at least ``ms`` milliseconds have elapsed."""
        target = self._now + ms
        while self._now < target:
            self.step()

    def run_until(self, predicate: Callable[[], bool], max_ms: float = 600000.0) -> bool:
        """Step frames until ``predicate()`` is true or ``max_ms`` has elapsed.

        Returns:
            True if the predicate became true, False on timeout.
        """
        deadline = self._now + max_ms
        while not predicate():
            if self._now >= deadline:
                return False
            self.step()
        return True


class RealtimeFrameSource(_QueuedFrameSource):
    """Blocking frame loop on the monotonic clock, for terminal playback.

    HOW: run() sleeps until each frame boundary and dispatches pending
    callbacks. It returns when nothing is pending (playback finished or
    paused) or when stop() is called.

    RULES:
    - run() must be called from the thread that owns the controller
    - A late frame does not trigger catch-up frames; the next boundary is
      rebased on the current time
    """

    def __init__(self, frame_ms: float = FRAME_INTERVAL_MS) -> None:
        super().__init__(frame_ms)
        self._running = False

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def run(self) -> None:
        self._running = True
        next_frame = self.now_ms() + self.frame_ms
        while self._running and self._pending:
            delay = next_frame - self.now_ms()
            if delay > 0:
                time.sleep(delay / 1000.0)
            now = self.now_ms()
            next_frame += self.frame_ms
            if next_frame <= now:
                logger.debug("Frame loop behind by %.1f ms, rebasing", now - next_frame)
                next_frame = now + self.frame_ms
            self._dispatch()
        self._running = False

    def stop(self) -> None:
        self._running = False


class TkFrameSource(FrameSource):
    """Frame source backed by a Tkinter widget's ``after`` timer.

    Any object with ``after(ms, func)`` and ``after_cancel(id)`` works, so
    this module does not import tkinter itself.
    """

    def __init__(self, widget: Any, frame_ms: float = FRAME_INTERVAL_MS) -> None:
        self._widget = widget
        self._delay = max(1, int(round(frame_ms)))

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def request_frame(self, callback: FrameCallback) -> Any:
        return self._widget.after(self._delay, callback)

    def cancel_frame(self, handle: Any) -> None:
        # after_cancel() rejects empty ids but tolerates ids that already ran
        if not handle:
            return
        self._widget.after_cancel(handle)
