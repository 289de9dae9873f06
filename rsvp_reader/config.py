"""Configuration constants, punctuation pauses, and .env loading.

WHY: Centralizes all tunable values so they are easy to find, update, and
override. The WPM range, punctuation pauses, and frame cadence are plain
data rather than buried in the timing logic, so both humans and coding agents
can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level ints, floats, and dicts. Values that make sense to tune
per machine (default speed, frame cadence, API binding) can be overridden
via environment variables; malformed overrides fail fast with ValueError.

RULES:
- MIN_WPM / MAX_WPM bound every WPM the engine ever sees (100–1000)
- PUNCTUATION_PAUSES_MS is keyed by the word's final character only
- FRAME_INTERVAL_MS and RESYNC_AFTER_MS must be positive
- DEFAULT_WPM is clamped into [MIN_WPM, MAX_WPM], never rejected
"""

from __future__ import annotations

import math
import os

from dotenv import load_dotenv

# Load .env from the project root (where the reader is run from)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, raising a clear error when malformed."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise ValueError(
            "{} must be a finite number, got {!r}. Fix it in the .env file "
            "or the environment.".format(name, raw)
        )
    return value


def _env_positive_float(name: str, default: float) -> float:
    value = _env_float(name, default)
    if not value > 0:
        raise ValueError("{} must be greater than 0, got {}".format(name, value))
    return value


# ---------------------------------------------------------------------------
# Reading speed
# ---------------------------------------------------------------------------

MIN_WPM = 100
MAX_WPM = 1000

DEFAULT_WPM = int(round(min(max(_env_float("RSVP_DEFAULT_WPM", 300), MIN_WPM), MAX_WPM)))
"""Starting speed for new controllers and front ends, clamped to the WPM range."""

WPM_STEP = 25
"""Speed change per arrow key press in the GUI."""

REFERENCE_WORD_MS = 200
"""Base display time at 300 WPM, used for the legacy comfort multiplier."""

# Upper bounds (exclusive) for the human-readable speed labels, checked in order.
SPEED_LABELS: list[tuple[int, str]] = [
    (200, "Slow"),
    (400, "Normal"),
    (600, "Fast"),
    (800, "Very Fast"),
]
FASTEST_SPEED_LABEL = "Lightning"

# ---------------------------------------------------------------------------
# Punctuation pauses
# ---------------------------------------------------------------------------

SENTENCE_PAUSE_MS = 750
CLAUSE_PAUSE_MS = 375

PUNCTUATION_PAUSES_MS: dict[str, int] = {
    ".": SENTENCE_PAUSE_MS,
    "!": SENTENCE_PAUSE_MS,
    "?": SENTENCE_PAUSE_MS,
    ",": CLAUSE_PAUSE_MS,
}
"""Extra display time keyed by a word's last character. Anything else pauses 0 ms."""

# ---------------------------------------------------------------------------
# Scheduler cadence
# ---------------------------------------------------------------------------

FRAME_INTERVAL_MS = _env_positive_float("RSVP_FRAME_INTERVAL_MS", 16.0)
"""Host frame period. 16 ms matches a 60 Hz display refresh."""

RESYNC_AFTER_MS = _env_positive_float("RSVP_RESYNC_AFTER_MS", 1000.0)
"""How far a chained deadline may lag behind the clock before it is rebased on now."""

# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------

API_HOST = os.getenv("RSVP_API_HOST", "127.0.0.1")
API_PORT = int(_env_float("RSVP_API_PORT", 8000))
