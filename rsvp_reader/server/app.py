"""FastAPI application exposing the RSVP word-timing engine over HTTP.

WHY: Browser and mobile front ends render words themselves but should not
re-implement ORP placement or punctuation pauses. The API hands them the
exact split and interval for every word, computed by the same functions
the desktop reader uses.

HOW: A single FastAPI app exposes three endpoints:
  GET  /health        — liveness check
  POST /timeline      — tokenize a text and return the full schedule
  GET  /split/{word}  — ORP split and interval for one word

RULES:
- Every endpoint has OpenAPI descriptions on its parameters and responses
- Error responses use the ErrorResponse schema
- WPM is clamped, never rejected, except non-positive values (422)
- Text with no words is a 400, not an empty timeline
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Query

from rsvp_reader import __version__
from rsvp_reader.config import API_HOST, API_PORT, DEFAULT_WPM
from rsvp_reader.core.metrics import (
    clamp_wpm,
    punctuation_pause_ms,
    split_at_orp,
    word_interval_ms,
)
from rsvp_reader.core.model import WordDisplaySplit
from rsvp_reader.core.timeline import build_timeline
from rsvp_reader.core.tokenizer import tokenize
from rsvp_reader.server.models import (
    ErrorResponse,
    HealthResponse,
    SplitResponse,
    TimelineRequest,
    TimelineResponse,
    TimelineWord,
    WordSplit,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="RSVP Reader API",
    description=(
        "Word-timing engine for Rapid Serial Visual Presentation readers. "
        "Returns optimal recognition point splits and per-word display "
        "intervals, including punctuation pauses."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


def _to_word_split(split: WordDisplaySplit) -> WordSplit:
    return WordSplit(prefix=split.prefix, focus_char=split.focus_char, suffix=split.suffix)


# ---------------------------------------------------------------------------
# Endpoints: Timing
# ---------------------------------------------------------------------------


@app.post(
    "/timeline",
    response_model=TimelineResponse,
    tags=["timing"],
    summary="Build a reading timeline",
    description=(
        "Splits the text on whitespace and returns, for every word, its ORP "
        "split, its start offset, and how long it stays on screen."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "The text contains no words."},
    },
)
async def create_timeline(request: TimelineRequest) -> TimelineResponse:
    words = tokenize(request.text)
    if not words:
        raise HTTPException(status_code=400, detail="Text contains no words")

    timeline = build_timeline(words, request.wpm)
    logger.info("Built timeline: %d words at %d WPM", timeline.word_count, timeline.wpm)
    return TimelineResponse(
        wpm=timeline.wpm,
        word_count=timeline.word_count,
        total_ms=timeline.total_ms,
        words=[
            TimelineWord(
                index=entry.index,
                word=entry.word,
                split=_to_word_split(entry.split),
                start_ms=entry.start_ms,
                interval_ms=entry.interval_ms,
            )
            for entry in timeline.entries
        ],
    )


@app.get(
    "/split/{word}",
    response_model=SplitResponse,
    tags=["timing"],
    summary="Split one word at its ORP",
    description="Returns the ORP split and display interval for a single word.",
)
async def split_word(
    word: str,
    wpm: float = Query(
        default=DEFAULT_WPM,
        gt=0,
        description="Reading speed in words per minute. Clamped to 100-1000.",
    ),
) -> SplitResponse:
    clamped = clamp_wpm(wpm)
    split = split_at_orp(word)
    return SplitResponse(
        word=word,
        prefix=split.prefix,
        focus_char=split.focus_char,
        suffix=split.suffix,
        wpm=clamped,
        interval_ms=word_interval_ms(word, clamped),
        pause_ms=punctuation_pause_ms(word),
    )


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api() -> None:
    """Entry point for the rsvp-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    run_api()
