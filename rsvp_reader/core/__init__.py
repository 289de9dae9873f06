"""Pure word-timing logic and the shared data model.

WHY: Everything that can be computed without a clock lives here: ORP
placement, per-word intervals, tokenization, and precomputed timelines.
Keeping it pure makes it trivially testable and reusable from the CLI,
the GUI, and the HTTP API alike.

HOW: model.py defines the dataclasses and the status enum, metrics.py the
per-word functions, tokenizer.py the whitespace splitter, timeline.py the
offline schedule builder.

RULES:
- No module in core/ imports from engine/ or any front end
- No function here keeps state between calls
"""
