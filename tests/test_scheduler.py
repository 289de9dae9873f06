"""Unit tests for frame sources and the drift-corrected scheduler.

WHY: The scheduler is the only thing standing between "600 WPM" and a
reader that slowly falls behind. A deadline measured from the wrong base,
a stale tick that survives a disarm, or two ticks racing would all go
unnoticed in casual use and show up as drift over a long text.

HOW: Tests are organized by concern:
  - TestManualFrameSource: frame dispatch semantics of the simulated clock
  - TestRealtimeFrameSource: the blocking loop drains and stops
  - TestTkFrameSource: after()/after_cancel() delegation
  - TestArmAndFire: deadlines, single firing, polling
  - TestDisarm: cancellation and idempotence
  - TestDeadlineChaining: re-arming from inside on_fire, resync
  - TestDriftBound: many chained ticks stay within one frame of ideal

RULES:
- All scheduler tests run on ManualFrameSource (no wall-clock timing)
- Callbacks record the frame time at which they ran
"""

import math
from unittest.mock import MagicMock

import pytest

from rsvp_reader.engine.frames import ManualFrameSource, RealtimeFrameSource, TkFrameSource
from rsvp_reader.engine.scheduler import DriftCorrectedScheduler

FRAME_MS = 16.0


# ---------------------------------------------------------------------------
# Frame sources
# ---------------------------------------------------------------------------


class TestManualFrameSource:
    """ManualFrameSource only runs callbacks when stepped."""

    def test_clock_moves_one_frame_per_step(self, frames):
        frames.step()
        frames.step()
        assert frames.now_ms() == pytest.approx(2 * FRAME_MS)
        assert frames.frames == 2

    def test_callback_runs_on_next_step_only(self, frames):
        calls = []
        frames.request_frame(lambda: calls.append(frames.now_ms()))
        assert calls == []
        frames.step()
        assert calls == [FRAME_MS]
        frames.step()
        assert calls == [FRAME_MS]

    def test_callback_requested_during_frame_waits_for_next(self, frames):
        calls = []

        def first():
            calls.append("first")
            frames.request_frame(lambda: calls.append("second"))

        frames.request_frame(first)
        frames.step()
        assert calls == ["first"]
        frames.step()
        assert calls == ["first", "second"]

    def test_cancel(self, frames):
        calls = []
        handle = frames.request_frame(lambda: calls.append(1))
        frames.cancel_frame(handle)
        frames.cancel_frame(handle)
        frames.cancel_frame(9999)
        frames.step()
        assert calls == []
        assert frames.pending == 0

    def test_callback_cancelled_by_earlier_callback_in_same_frame(self, frames):
        calls = []
        handles = {}
        handles["first"] = frames.request_frame(lambda: frames.cancel_frame(handles["second"]))
        handles["second"] = frames.request_frame(lambda: calls.append("second"))
        frames.step()
        assert calls == []

    def test_jitter_is_cycled(self):
        frames = ManualFrameSource(frame_ms=10.0, jitter_ms=[0.0, 5.0])
        frames.step()
        frames.step()
        frames.step()
        assert frames.now_ms() == pytest.approx(35.0)

    def test_advance_and_run_until(self, frames):
        frames.advance(100)
        assert frames.now_ms() >= 100
        assert frames.now_ms() < 100 + FRAME_MS
        assert frames.run_until(lambda: frames.now_ms() >= 500)
        assert not frames.run_until(lambda: False, max_ms=50)

    def test_rejects_non_positive_frame(self):
        with pytest.raises(ValueError):
            ManualFrameSource(frame_ms=0)


class TestRealtimeFrameSource:
    """RealtimeFrameSource.run() dispatches until nothing is pending."""

    def test_run_drains_chained_callbacks(self):
        frames = RealtimeFrameSource(frame_ms=1.0)
        calls = []

        def tick():
            calls.append(frames.now_ms())
            if len(calls) < 3:
                frames.request_frame(tick)

        frames.request_frame(tick)
        frames.run()
        assert len(calls) == 3
        assert calls == sorted(calls)
        assert frames.pending == 0

    def test_stop_ends_loop(self):
        frames = RealtimeFrameSource(frame_ms=1.0)
        calls = []

        def tick():
            calls.append(1)
            frames.request_frame(tick)
            frames.stop()

        frames.request_frame(tick)
        frames.run()
        assert calls == [1]
        assert frames.pending == 1


class TestTkFrameSource:
    """TkFrameSource delegates to the widget's after() timer."""

    def test_request_and_cancel(self):
        widget = MagicMock()
        widget.after.return_value = "after#1"
        frames = TkFrameSource(widget, frame_ms=16.4)
        callback = MagicMock()

        handle = frames.request_frame(callback)
        assert handle == "after#1"
        widget.after.assert_called_once_with(16, callback)

        frames.cancel_frame(handle)
        widget.after_cancel.assert_called_once_with("after#1")

    def test_cancel_empty_handle_is_ignored(self):
        widget = MagicMock()
        frames = TkFrameSource(widget)
        frames.cancel_frame(None)
        widget.after_cancel.assert_not_called()

    def test_minimum_delay_is_one_ms(self):
        widget = MagicMock()
        frames = TkFrameSource(widget, frame_ms=0.2)
        frames.request_frame(lambda: None)
        assert widget.after.call_args[0][0] == 1


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


class TestArmAndFire:
    """arm() fires exactly once, on the first frame at or after the deadline."""

    def test_deadline_is_now_plus_interval(self, frames, scheduler):
        frames.advance(40)
        now = frames.now_ms()
        tick = scheduler.arm(100, lambda: None)
        assert tick.deadline_ms == pytest.approx(now + 100)
        assert scheduler.deadline_ms == tick.deadline_ms
        assert scheduler.armed

    def test_fires_once_at_first_frame_past_deadline(self, frames, scheduler):
        fired = []
        tick = scheduler.arm(100, lambda: fired.append(frames.now_ms()))
        frames.advance(500)
        assert fired == [112.0]
        assert not scheduler.armed
        assert not tick.live
        assert tick.lateness_ms == pytest.approx(12.0)

    def test_does_not_fire_early(self, frames, scheduler):
        fired = []
        scheduler.arm(100, lambda: fired.append(1))
        for _ in range(6):  # t = 96
            frames.step()
        assert fired == []
        assert scheduler.armed
        assert scheduler.tick.polls == 6

    def test_fires_exactly_on_deadline(self, frames, scheduler):
        fired = []
        scheduler.arm(64, lambda: fired.append(frames.now_ms()))
        frames.advance(200)
        assert fired == [64.0]

    def test_rearm_replaces_previous_tick(self, frames, scheduler):
        fired = []
        first = scheduler.arm(100, lambda: fired.append("first"))
        second = scheduler.arm(50, lambda: fired.append("second"))
        assert not first.live
        assert second.live
        assert frames.pending == 1
        frames.advance(500)
        assert fired == ["second"]

    @pytest.mark.parametrize("interval", [0, -10, math.inf, math.nan])
    def test_rejects_invalid_interval(self, scheduler, interval):
        with pytest.raises(ValueError):
            scheduler.arm(interval, lambda: None)
        assert not scheduler.armed

    def test_raising_callback_leaves_scheduler_disarmed(self, frames, scheduler):
        def boom():
            raise RuntimeError("render failed")

        scheduler.arm(16, boom)
        with pytest.raises(RuntimeError):
            frames.step()
        assert not scheduler.armed
        assert frames.pending == 0


class TestDisarm:
    """disarm() cancels the pending tick and is idempotent."""

    def test_disarm_prevents_fire(self, frames, scheduler):
        fired = []
        tick = scheduler.arm(100, lambda: fired.append(1))
        frames.advance(50)
        scheduler.disarm()
        frames.advance(500)
        assert fired == []
        assert not tick.live
        assert frames.pending == 0

    def test_disarm_twice(self, scheduler):
        scheduler.arm(100, lambda: None)
        scheduler.disarm()
        scheduler.disarm()
        assert not scheduler.armed
        assert scheduler.deadline_ms is None

    def test_disarm_when_never_armed(self, scheduler):
        scheduler.disarm()
        assert not scheduler.armed


class TestDeadlineChaining:
    """Re-arming from inside on_fire chains from the previous deadline."""

    def test_rearm_inside_fire_uses_previous_deadline(self, frames, scheduler):
        deadlines = []

        def on_fire():
            if len(deadlines) < 3:
                deadlines.append(scheduler.arm(100, on_fire).deadline_ms)

        scheduler.arm(100, on_fire)
        frames.advance(1000)
        # Fires land at 112, 208, 304 but deadlines stay on the 100 ms grid
        assert deadlines == pytest.approx([200, 300, 400])

    def test_fresh_arm_after_fire_uses_now(self, frames, scheduler):
        scheduler.arm(100, lambda: None)
        frames.advance(200)
        now = frames.now_ms()
        tick = scheduler.arm(100, lambda: None)
        assert tick.deadline_ms == pytest.approx(now + 100)

    def test_resync_after_host_suspension(self):
        frames = ManualFrameSource(frame_ms=16.0)
        scheduler = DriftCorrectedScheduler(frames, resync_after_ms=500)
        ticks = []

        def on_fire():
            ticks.append(scheduler.arm(100, lambda: None))

        scheduler.arm(100, on_fire)
        # One very long frame, as if the window was hidden for two seconds
        frames.frame_ms = 2000.0
        frames.step()
        assert len(ticks) == 1
        assert ticks[0].deadline_ms == pytest.approx(frames.now_ms() + 100)

    def test_small_lag_is_not_resynced(self):
        frames = ManualFrameSource(frame_ms=16.0)
        scheduler = DriftCorrectedScheduler(frames, resync_after_ms=500)
        ticks = []

        def on_fire():
            ticks.append(scheduler.arm(100, lambda: None))

        scheduler.arm(100, on_fire)
        frames.frame_ms = 400.0
        frames.step()
        assert ticks[0].deadline_ms == pytest.approx(200)


class TestDriftBound:
    """N chained ticks finish within one frame period of N * interval."""

    @pytest.mark.parametrize("interval", [60.0, 100.0, 180.18, 240.0, 600.0])
    @pytest.mark.parametrize("jitter", [None, [0.0, 3.0, 7.0, 1.0, 11.0]])
    def test_total_elapsed_within_one_frame(self, interval, jitter):
        frames = ManualFrameSource(frame_ms=FRAME_MS, jitter_ms=jitter)
        scheduler = DriftCorrectedScheduler(frames)
        count = 200
        fired = []

        def on_fire():
            fired.append(frames.now_ms())
            if len(fired) < count:
                scheduler.arm(interval, on_fire)

        scheduler.arm(interval, on_fire)
        frames.run_until(lambda: len(fired) == count)

        longest_frame = FRAME_MS + max(jitter or [0.0])
        ideal = count * interval
        assert fired[-1] >= ideal - 1e-6
        assert fired[-1] - ideal < longest_frame

    def test_relative_rearm_would_drift(self):
        """Measuring from 'now' at fire time falls behind by about a frame per tick."""
        frames = ManualFrameSource(frame_ms=FRAME_MS)
        scheduler = DriftCorrectedScheduler(frames)
        count = 50
        fired = []

        def on_fire():
            fired.append(frames.now_ms())
            if len(fired) < count:
                # Arming outside the fire context measures from now
                frames.request_frame(lambda: scheduler.arm(100, on_fire))

        scheduler.arm(100, on_fire)
        frames.run_until(lambda: len(fired) == count)
        assert fired[-1] - count * 100 > count * 4
