"""Shared test fixtures for the rsvp_reader test suite.

WHY: Most engine tests need the same simulated clock, a controller wired
to it, and the reference sentence used to check end-to-end timing.
Centralizing them here avoids duplication and keeps every timing test on
a deterministic clock.

HOW: Pytest fixtures provide a ManualFrameSource (16 ms frames starting
at t=0), a DriftCorrectedScheduler and a PlaybackController on top of it,
and the five-word reference sentence.

RULES:
- No test sleeps or reads the wall clock; time only moves via step()
- The reference controller runs at 600 WPM, i.e. 100 ms per plain word
- Each fixture returns fresh objects (no shared mutable state)
"""

from typing import List

import pytest

from rsvp_reader.core.model import PlaybackSnapshot
from rsvp_reader.engine.controller import PlaybackController
from rsvp_reader.engine.frames import ManualFrameSource
from rsvp_reader.engine.scheduler import DriftCorrectedScheduler

FRAME_MS = 16.0

# "fox." carries the 750 ms sentence pause
REFERENCE_WORDS: List[str] = ["The", "quick", "fox.", "jumps", "high"]
REFERENCE_WPM = 600


@pytest.fixture
def frames():
    """Simulated 60 Hz frame source starting at t=0."""
    return ManualFrameSource(frame_ms=FRAME_MS, start_ms=0.0)


@pytest.fixture
def scheduler(frames):
    return DriftCorrectedScheduler(frames)


@pytest.fixture
def controller(scheduler):
    """Controller at 600 WPM with nothing loaded."""
    return PlaybackController(scheduler, wpm=REFERENCE_WPM)


@pytest.fixture
def reference_words():
    return list(REFERENCE_WORDS)


@pytest.fixture
def loaded_controller(controller, reference_words):
    """Controller at 600 WPM with the reference sentence loaded, IDLE."""
    controller.load_text(reference_words)
    return controller


class SnapshotRecorder:
    """Listener that records every snapshot together with the frame time."""

    def __init__(self, frames: ManualFrameSource) -> None:
        self._frames = frames
        self.events: List[tuple] = []

    def __call__(self, snapshot: PlaybackSnapshot) -> None:
        self.events.append((self._frames.now_ms(), snapshot))

    @property
    def snapshots(self) -> List[PlaybackSnapshot]:
        return [s for _, s in self.events]

    @property
    def indices(self) -> List[int]:
        return [s.word_index for _, s in self.events]


@pytest.fixture
def recorder(frames):
    return SnapshotRecorder(frames)
