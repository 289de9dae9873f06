"""RSVP Reader — one-word-at-a-time speed reading with ORP highlighting.

WHY: Rapid Serial Visual Presentation shows a text one word at a time at a
fixed point on screen, so the eye never has to travel. Reading speed is then
set purely by timing, and that timing has to stay accurate across thousands
of words at up to 1000 words per minute.

HOW: Three layers — pure word metrics (ORP position, per-word interval),
a drift-corrected scheduler driven by the host's per-frame callback, and a
playback state machine that ties them together. Front ends (terminal CLI,
Tkinter GUI, HTTP API) only call into the controller's public operations.

RULES:
- Word metrics are pure functions; no state lives in core/
- Exactly one pending deadline per controller at any time
- Front ends never touch the scheduler directly
"""

__version__ = "0.1.0"
