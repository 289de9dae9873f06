"""Timing engine: frame sources, the drift-corrected scheduler, and playback.

WHY: The core metrics say how long each word should stay up; the engine
makes that happen on a real (or simulated) clock, cooperatively, on the
host's own frame loop.

HOW: frames.py abstracts the host's per-frame callback, scheduler.py turns
it into absolute-deadline one-shot ticks, controller.py is the playback
state machine that arms a tick per word.

RULES:
- Single-threaded: every callback runs on the host's frame loop
- Only controller.py arms the scheduler
"""

from rsvp_reader.engine.controller import PlaybackController
from rsvp_reader.engine.frames import (
    FrameSource,
    ManualFrameSource,
    RealtimeFrameSource,
    TkFrameSource,
)
from rsvp_reader.engine.scheduler import DriftCorrectedScheduler, ScheduledTick

__all__ = [
    "DriftCorrectedScheduler",
    "FrameSource",
    "ManualFrameSource",
    "PlaybackController",
    "RealtimeFrameSource",
    "ScheduledTick",
    "TkFrameSource",
]
