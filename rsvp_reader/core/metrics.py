"""Per-word metrics: ORP placement and display intervals.

WHY: Two things decide how a word is shown: where the eye should land
(the Optimal Recognition Point) and how long the word stays up. Both are
functions of the word alone (plus the reading speed), so they live here
as pure functions that the controller, the timeline builder, and the HTTP
API all share.

HOW: orp_offset() is a step function of word length. split_at_orp() cuts
the word around that offset. word_interval_ms() adds a punctuation pause,
keyed by the final character, to the base 60000 / WPM duration.

RULES:
- Only the final character of a word decides its punctuation pause
- orp_offset() never returns an index outside a non-empty word
- base_interval_ms() assumes wpm > 0; clamp_wpm() is the single place
  that guarantees it
"""

from __future__ import annotations

import math

from rsvp_reader.config import (
    FASTEST_SPEED_LABEL,
    MAX_WPM,
    MIN_WPM,
    PUNCTUATION_PAUSES_MS,
    REFERENCE_WORD_MS,
    SPEED_LABELS,
)
from rsvp_reader.core.model import WordDisplaySplit

# (max length inclusive, offset). Words longer than the last bound use _LONG_WORD_OFFSET.
_ORP_STEPS: list[tuple[int, int]] = [
    (1, 0),
    (5, 1),
    (9, 2),
    (13, 3),
]
_LONG_WORD_OFFSET = 4


def orp_offset(word: str) -> int:
    """Return the 0-indexed character the reader's eye should fixate on.

    WHY: The natural fixation point sits a little left of a word's centre
    and moves right as words get longer. Aligning every word on that
    character keeps the eye still between words.

    RULES:
    - length 1 → 0, 2–5 → 1, 6–9 → 2, 10–13 → 3, 14+ → 4
    - the empty string maps to 0
    """
    length = len(word)
    for max_length, offset in _ORP_STEPS:
        if length <= max_length:
            return offset
    return _LONG_WORD_OFFSET


def split_at_orp(word: str) -> WordDisplaySplit:
    """Split a word into prefix, focus character, and suffix.

    The offset is clamped to the last character so short or empty inputs
    still produce a valid split.
    """
    index = max(0, min(orp_offset(word), len(word) - 1))
    return WordDisplaySplit(
        prefix=word[:index],
        focus_char=word[index:index + 1],
        suffix=word[index + 1:],
    )


def base_interval_ms(wpm: float) -> float:
    """Display time of an unpunctuated word: 60000 / WPM."""
    return 60000 / wpm


def punctuation_pause_ms(word: str) -> int:
    """Extra display time for a word based on its last character.

    RULES:
    - ``.`` ``!`` ``?`` → 750 ms, ``,`` → 375 ms, anything else → 0
    - internal punctuation ("e.g", "U.S") is ignored
    """
    if not word:
        return 0
    return PUNCTUATION_PAUSES_MS.get(word[-1], 0)


def word_interval_ms(word: str, wpm: float) -> float:
    """Total time a word stays on screen before the reader advances."""
    return base_interval_ms(wpm) + punctuation_pause_ms(word)


def should_pause(word: str) -> bool:
    return punctuation_pause_ms(word) > 0


def comfort_multiplier(word: str) -> float:
    """Display-time multiplier relative to an unpunctuated word at 300 WPM.

    Kept for callers that scale their own delays instead of adding a pause.
    """
    return (REFERENCE_WORD_MS + punctuation_pause_ms(word)) / REFERENCE_WORD_MS


def clamp_wpm(wpm: float) -> int:
    """Round and clamp a requested speed into [MIN_WPM, MAX_WPM].

    WHY: Every interval divides by WPM. Clamping at the single mutation
    point means a zero, negative, or absurd speed can never reach
    base_interval_ms().

    RULES:
    - Non-finite input (NaN) falls back to MIN_WPM
    - Infinite input clamps to the nearest bound
    """
    if math.isnan(wpm):
        return MIN_WPM
    if wpm <= MIN_WPM:
        return MIN_WPM
    if wpm >= MAX_WPM:
        return MAX_WPM
    return int(round(wpm))


def speed_label(wpm: float) -> str:
    """Human-readable name for a reading speed, e.g. 'Normal' for 300 WPM."""
    for upper_bound, label in SPEED_LABELS:
        if wpm < upper_bound:
            return label
    return FASTEST_SPEED_LABEL


def minutes_remaining(words_remaining: int, wpm: float) -> int:
    """Whole minutes needed to read the remaining words, rounded up."""
    if words_remaining <= 0 or wpm <= 0:
        return 0
    return math.ceil(words_remaining / wpm)
