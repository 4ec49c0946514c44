"""
engine/deck_parser.py — Turns raw AI output into a validated Deck.
Strips markdown fences, repairs unescaped quotes inside string values,
validates the top-level structure and backfills missing theme colours.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from engine.errors import MalformedDeckError
from engine.pipeline_logger import PipelineLogger
from models import DEFAULT_AUTHOR_COLORS, AuthorTheme, Deck, Slide

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_CLOSING_DELIMITERS = frozenset(":,]}")
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def strip_code_fence(text: str) -> str:
    """Return the inner text of the first fenced block, or *text* trimmed."""
    text = text.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def repair_unescaped_quotes(text: str) -> str:
    """Single character-level pass that escapes stray quotes inside strings.

    A quote met while inside a string only closes it when the next
    non-whitespace character is a structural delimiter or end of input;
    otherwise it belongs to the string content and is escaped. Raw control
    characters inside strings are escaped on the way through.
    """
    out: List[str] = []
    in_string = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
            i += 1
            continue

        if ch == "\\" and i + 1 < n:
            out.append(text[i:i + 2])
            i += 2
            continue

        if ch == '"':
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j >= n or text[j] in _CLOSING_DELIMITERS:
                in_string = False
                out.append(ch)
            else:
                out.append('\\"')
            i += 1
            continue

        out.append(_CONTROL_ESCAPES.get(ch, ch))
        i += 1
    return "".join(out)


class DeckParser:
    """Decodes and validates slide-deck JSON produced by the content generator."""

    def __init__(self) -> None:
        self._log = PipelineLogger("DeckParser")

    def parse(self, raw_text: str) -> Deck:
        """Parse *raw_text* into a Deck or raise MalformedDeckError."""
        if not isinstance(raw_text, str) or not raw_text.strip():
            raise MalformedDeckError("Invalid slide deck JSON: empty input")

        payload = strip_code_fence(raw_text)
        data = self._decode(payload)

        if not isinstance(data, dict):
            raise MalformedDeckError(
                "Slide deck JSON must be an object with 'theme' and 'slides'"
            )
        theme = data.get("theme")
        if not isinstance(theme, dict):
            raise MalformedDeckError('Slide deck JSON missing required "theme" object')
        slides = data.get("slides")
        if not isinstance(slides, list) or not slides:
            raise MalformedDeckError('Slide deck JSON missing required "slides" array')

        deck = Deck(
            theme=self._build_theme(theme),
            slides=[self._build_slide(i, s) for i, s in enumerate(slides)],
        )
        self._log.info(f"Parsed deck: {len(deck.slides)} slides")
        return deck

    # ── Decoding ────────────────────────────────────────────

    def _decode(self, payload: str) -> Any:
        try:
            return json.loads(payload)
        except json.JSONDecodeError as original:
            self._log.warning(f"Strict decode failed ({original}); attempting quote repair")
            try:
                data = json.loads(repair_unescaped_quotes(payload))
            except json.JSONDecodeError:
                raise MalformedDeckError(
                    f"Invalid slide deck JSON: {original}", diagnostic=str(original)
                ) from original
            self._log.info("Deck JSON recovered by quote repair")
            return data

    # ── Model Construction ──────────────────────────────────

    def _build_theme(self, theme: Dict[str, Any]) -> AuthorTheme:
        missing = [f for f in DEFAULT_AUTHOR_COLORS if not theme.get(f)]
        if missing:
            self._log.debug(f"Theme backfilled with defaults: {', '.join(missing)}")
        present = {k: v for k, v in theme.items() if k in DEFAULT_AUTHOR_COLORS and v}
        return AuthorTheme(**present)

    def _build_slide(self, index: int, raw: Any) -> Slide:
        if not isinstance(raw, dict):
            self._log.warning(f"Slide {index + 1} is not an object; keeping it empty")
            return Slide()
        try:
            return Slide.model_validate(raw)
        except ValidationError as e:
            self._log.warning(f"Slide {index + 1} failed validation ({e.error_count()} errors); keeping it empty")
            return Slide()
