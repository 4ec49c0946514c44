"""Tests for orchestrator.py"""

import io
from concurrent.futures import ThreadPoolExecutor

import pytest
from pptx import Presentation

from engine.errors import MalformedDeckError
from models import RenderRequest
from orchestrator import (
    DeckOrchestrator,
    generate_filename,
    generate_page_document,
    generate_shape_document,
    list_valid_theme_selectors,
)


class TestFilename:
    @pytest.mark.parametrize("title,fmt,expected", [
        ("Q3 Review: Growth & Churn!", "pptx", "q3-review-growth-churn-slides.pptx"),
        ("  Multiple   Spaces  ", "pdf", "multiple-spaces-slides.pdf"),
        ("Already-dashed - title", "pptx", "already-dashed-title-slides.pptx"),
        ("", "pdf", "presentation-slides.pdf"),
        ("!!!", "pptx", "presentation-slides.pptx"),
    ])
    def test_sanitised(self, title, fmt, expected):
        assert generate_filename(title, fmt) == expected

    def test_length_capped(self):
        name = generate_filename("a" * 200, "pdf")
        assert name == "a" * 80 + "-slides.pdf"


class TestPublicApi:
    def test_selectors(self):
        selectors = list_valid_theme_selectors()
        assert selectors[0] == "auto"
        assert len(selectors) == 11
        assert "midnight_gold" in selectors

    def test_shape_document(self, three_slide_deck, as_text):
        content = generate_shape_document(as_text(three_slide_deck, fenced=True), "Deck")
        assert content[:2] == b"PK"
        assert len(Presentation(io.BytesIO(content)).slides) == 3

    def test_page_document(self, three_slide_deck, as_text):
        content = generate_page_document(as_text(three_slide_deck), "Deck", theme="ocean_blue")
        assert content.startswith(b"%PDF")

    @pytest.mark.parametrize("generate", [generate_shape_document, generate_page_document])
    def test_malformed_input_raises(self, generate):
        with pytest.raises(MalformedDeckError):
            generate('{"slides": []}', "Deck")


class TestDeckOrchestrator:
    def test_render_result(self, three_slide_deck, as_text):
        result = DeckOrchestrator().render(
            RenderRequest(deck_text=as_text(three_slide_deck), document_title="Deck", theme="slate_pro"),
            "pptx",
        )
        assert result.extension == "pptx"
        assert result.media_type.endswith("presentationml.presentation")
        assert result.theme_id == "slate_pro"
        assert result.slide_count == 3
        assert result.fallback_count == 0

    def test_fallback_count_reported(self, three_slide_deck, as_text):
        three_slide_deck["slides"].insert(1, {"title": "no type"})
        result = DeckOrchestrator().render(RenderRequest(deck_text=as_text(three_slide_deck)), "pdf")
        assert result.media_type == "application/pdf"
        assert result.slide_count == 4
        assert result.fallback_count == 1
        assert result.slides[1].fallback

    def test_unknown_selector_derives(self, three_slide_deck, as_text):
        result = DeckOrchestrator().render(
            RenderRequest(deck_text=as_text(three_slide_deck), theme="neon"), "pptx",
        )
        assert result.theme_id == "auto"

    def test_status_callbacks(self, three_slide_deck, as_text):
        seen = []
        orchestrator = DeckOrchestrator(on_status_change=lambda status, detail: seen.append(status))
        orchestrator.render(RenderRequest(deck_text=as_text(three_slide_deck)), "pptx")
        assert seen == ["parsing", "theming", "planning", "rendering", "done"]

    def test_unsupported_format(self, three_slide_deck, as_text):
        with pytest.raises(ValueError, match="Unsupported"):
            DeckOrchestrator().render(RenderRequest(deck_text=as_text(three_slide_deck)), "docx")

    def test_shared_instance_concurrent_renders(self, full_deck, as_text):
        orchestrator = DeckOrchestrator()
        request = RenderRequest(deck_text=as_text(full_deck), document_title="Deck")
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: orchestrator.render(request, "pptx"), range(8)))

        expected = len(full_deck["slides"])
        for result in results:
            assert result.slide_count == expected
            assert result.fallback_count == 0
            assert len(Presentation(io.BytesIO(result.content)).slides) == expected
