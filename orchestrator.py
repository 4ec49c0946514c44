"""
orchestrator.py — Render pipeline controller and public entry points.
Runs raw deck text through parse → theme → layout plan → renderer and
hands back the document bytes.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Type, Union

from config import Settings, get_settings
from engine.deck_parser import DeckParser
from engine.layout_dispatcher import LayoutDispatcher
from engine.pipeline_logger import PipelineLogger
from generators.page_renderer import PageDeckRenderer
from generators.ppt_generator import ShapeDeckRenderer
from generators.themes import ThemeResolver
from generators.themes import list_valid_theme_selectors as _preset_selectors
from models import RenderRequest, RenderResult

FORMAT_PPTX = "pptx"
FORMAT_PDF = "pdf"

MEDIA_TYPES: Dict[str, str] = {
    FORMAT_PPTX: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    FORMAT_PDF: "application/pdf",
}

MAX_FILENAME_STEM = 80

RendererType = Union[Type[ShapeDeckRenderer], Type[PageDeckRenderer]]


class DeckOrchestrator:
    """Drives one render per call; holds no state between calls.

    on_status_change(status, detail) is invoked as the pass moves through
    parsing → theming → planning → rendering → done.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_status_change: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._log = PipelineLogger("Orchestrator")
        self._parser = DeckParser()
        self._themes = ThemeResolver()
        self._dispatcher = LayoutDispatcher()
        # Renderers keep per-pass state, so each render builds its own
        self._renderers: Dict[str, RendererType] = {
            FORMAT_PPTX: ShapeDeckRenderer,
            FORMAT_PDF: PageDeckRenderer,
        }
        self._on_status_change = on_status_change

    def _set_status(self, status: str, detail: str = "") -> None:
        self._log.debug(f"Render status: {status} | {detail}")
        if self._on_status_change:
            self._on_status_change(status, detail)

    def list_theme_selectors(self) -> List[str]:
        return self._themes.list_selectors()

    def render(self, request: RenderRequest, fmt: str = FORMAT_PPTX) -> RenderResult:
        """Render *request* as `pptx` or `pdf`.

        Raises MalformedDeckError when the deck text is unusable; individual
        slide failures are reported in RenderResult.slides instead.
        """
        renderer_cls = self._renderers.get(fmt)
        if renderer_cls is None:
            raise ValueError(f"Unsupported document format '{fmt}' (expected pptx or pdf)")
        renderer = renderer_cls(self._settings)

        with self._log.step_start(f"Render {fmt.upper()}"):
            self._set_status("parsing")
            deck = self._parser.parse(request.deck_text)

            self._set_status("theming", request.theme)
            theme = self._themes.resolve(
                request.theme or self._settings.default_theme, deck.theme
            )

            self._set_status("planning", f"{len(deck.slides)} slides")
            plan = self._dispatcher.plan(deck.slides)

            self._set_status("rendering", fmt)
            content, outcomes = renderer.render(
                deck, theme, plan, document_title=request.document_title,
            )

        result = RenderResult(
            content=content,
            media_type=MEDIA_TYPES[fmt],
            extension=fmt,
            theme_id=theme.id,
            slides=outcomes,
        )
        if result.fallback_count:
            self._log.warning(
                f"{result.fallback_count} of {result.slide_count} slides rendered in fallback form"
            )
        self._set_status("done", f"{len(content)} bytes")
        return result


# ── Module-level API ─────────────────────────────────────────

def _render_bytes(raw_text: str, document_title: str, theme: str, fmt: str) -> bytes:
    request = RenderRequest(deck_text=raw_text, document_title=document_title, theme=theme)
    return DeckOrchestrator().render(request, fmt).content


def generate_shape_document(raw_text: str, document_title: str = "", theme: str = "auto") -> bytes:
    """Raw deck text → .pptx bytes (raises MalformedDeckError)."""
    return _render_bytes(raw_text, document_title, theme, FORMAT_PPTX)


def generate_page_document(raw_text: str, document_title: str = "", theme: str = "auto") -> bytes:
    """Raw deck text → .pdf bytes (raises MalformedDeckError)."""
    return _render_bytes(raw_text, document_title, theme, FORMAT_PDF)


def list_valid_theme_selectors() -> List[str]:
    """'auto' followed by every built-in preset id."""
    return _preset_selectors()


def generate_filename(title: str, fmt: str = FORMAT_PPTX) -> str:
    """Download-safe file name: lowercase a-z0-9 and dashes, '-slides.<fmt>' suffix."""
    stem = (title or "").lower().strip()
    stem = re.sub(r"[^a-z0-9\s-]", "", stem)
    stem = re.sub(r"\s+", "-", stem)
    stem = re.sub(r"-{2,}", "-", stem).strip("-")[:MAX_FILENAME_STEM].rstrip("-")
    return f"{stem or 'presentation'}-slides.{fmt}"
