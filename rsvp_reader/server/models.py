"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint has its own response model; the timeline endpoint also
takes a request body. All models include Field descriptions for rich
OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- wpm accepts any positive number; the engine clamps it and the response
  reports the speed actually used
- Response models never expose internal dataclasses directly
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from rsvp_reader.config import DEFAULT_WPM


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TimelineRequest(BaseModel):
    """Text and speed to build a reading timeline for."""

    text: str = Field(
        description="Raw text. Split on whitespace into words.",
    )
    wpm: float = Field(
        default=DEFAULT_WPM,
        gt=0,
        description="Requested reading speed in words per minute. Clamped to 100-1000.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class WordSplit(BaseModel):
    """A word split at its optimal recognition point."""

    prefix: str = Field(description="Characters before the focus character.")
    focus_char: str = Field(description="The highlighted character.")
    suffix: str = Field(description="Characters after the focus character.")


class SplitResponse(WordSplit):
    """ORP split and display interval for a single word."""

    word: str = Field(description="The word as given.")
    wpm: int = Field(description="Reading speed used, after clamping.")
    interval_ms: float = Field(description="How long the word stays on screen.")
    pause_ms: int = Field(description="Punctuation pause included in interval_ms.")


class TimelineWord(BaseModel):
    """One word's slot in the reading timeline."""

    index: int = Field(description="0-based position in the word sequence.")
    word: str = Field(description="The word token, punctuation included.")
    split: WordSplit = Field(description="ORP split for rendering.")
    start_ms: float = Field(description="Offset from the first word's appearance.")
    interval_ms: float = Field(description="Display duration of this word.")


class TimelineResponse(BaseModel):
    """Complete reading schedule for a text."""

    wpm: int = Field(description="Reading speed used, after clamping.")
    word_count: int = Field(description="Number of words in the text.")
    total_ms: float = Field(description="Total reading time in milliseconds.")
    words: List[TimelineWord] = Field(description="Per-word schedule, in reading order.")


class ErrorResponse(BaseModel):
    """Standard error body."""

    detail: str = Field(description="Human-readable error message.")


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: str = Field(description="Always 'ok' when the service is up.")
    version: str = Field(description="Package version.")
