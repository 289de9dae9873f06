"""HTTP API for the word-timing engine.

WHY: Web front ends render words themselves but need the same ORP splits
and intervals as the desktop reader.

HOW: app.py defines the FastAPI application, models.py the pydantic
request/response schemas.

RULES:
- The API is stateless; it never runs a PlaybackController
"""
