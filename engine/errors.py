"""
engine/errors.py — Exception types raised by the deck engine.
"""

from __future__ import annotations

from typing import Optional


class MalformedDeckError(ValueError):
    """Deck text could not be decoded or is missing `theme` / `slides`.

    Fatal for the whole request: no partial document is produced.
    ``diagnostic`` keeps the decoder's own message so callers can surface it.
    """

    def __init__(self, message: str, diagnostic: Optional[str] = None) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic or message


class SlideRenderError(Exception):
    """A single slide could not be built by its template builder."""

    def __init__(self, slide_type: Optional[str], message: str) -> None:
        super().__init__(message)
        self.slide_type = slide_type
