"""Tests for engine/deck_parser.py"""

import json

import pytest

from engine.deck_parser import DeckParser, repair_unescaped_quotes, strip_code_fence
from engine.errors import MalformedDeckError
from models import DEFAULT_AUTHOR_COLORS, SlideType


@pytest.fixture
def parser():
    return DeckParser()


class TestStripCodeFence:
    def test_plain_text_is_trimmed(self):
        assert strip_code_fence("  {\"a\": 1}\n") == '{"a": 1}'

    def test_json_fence(self):
        assert strip_code_fence('Here you go:\n```json\n{"a": 1}\n```\nEnjoy') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'


class TestRepair:
    def test_inner_quotes_are_escaped(self):
        broken = '{"quote": "He said "hi" to me", "n": 1}'
        assert json.loads(repair_unescaped_quotes(broken)) == {"quote": 'He said "hi" to me', "n": 1}

    def test_valid_json_is_unchanged(self):
        valid = '{"a": "x \\"y\\" z", "b": [1, 2]}'
        assert repair_unescaped_quotes(valid) == valid

    def test_raw_newline_inside_string_is_escaped(self):
        broken = '{"a": "line one\nline two"}'
        assert json.loads(repair_unescaped_quotes(broken)) == {"a": "line one\nline two"}


class TestParse:
    def test_round_trip(self, parser, three_slide_deck, as_text):
        deck = parser.parse(as_text(three_slide_deck))
        assert len(deck.slides) == 3
        assert [s.kind for s in deck.slides] == [SlideType.TITLE, SlideType.BULLETS, SlideType.SUMMARY]
        assert deck.slides[1].bullets == ["Revenue up", "Churn down"]
        assert deck.theme.accent_color == "#3182ce"

    def test_fence_is_idempotent(self, parser, full_deck, as_text):
        plain = parser.parse(as_text(full_deck))
        fenced = parser.parse(as_text(full_deck, fenced=True))
        assert plain.model_dump() == fenced.model_dump()

    def test_unescaped_quotes_are_recovered(self, parser):
        raw = (
            '{"theme": {"primary_color": "#112233"}, "slides": ['
            '{"slide_type": "quote", "quote": "They called it "the best" release", '
            '"attribution": "Press"}]}'
        )
        deck = parser.parse(raw)
        assert deck.slides[0].quote == 'They called it "the best" release'
        assert deck.slides[0].attribution == "Press"

    def test_unrepairable_text_keeps_original_diagnostic(self, parser):
        raw = '{"theme": {}, "slides": [{"slide_type": "title"'
        with pytest.raises(json.JSONDecodeError) as original:
            json.loads(raw)
        with pytest.raises(MalformedDeckError) as exc:
            parser.parse(raw)
        assert exc.value.diagnostic == str(original.value)
        assert isinstance(exc.value, ValueError)

    @pytest.mark.parametrize("raw", [
        "",
        "   ",
        "[1, 2, 3]",
        '{"slides": [{"slide_type": "title"}]}',
        '{"theme": "dark", "slides": [{"slide_type": "title"}]}',
        '{"theme": {}}',
        '{"theme": {}, "slides": []}',
        '{"theme": {}, "slides": {"slide_type": "title"}}',
    ])
    def test_structurally_invalid_decks(self, parser, raw):
        with pytest.raises(MalformedDeckError):
            parser.parse(raw)

    def test_missing_theme_colors_are_backfilled(self, parser):
        deck = parser.parse('{"theme": {"accent_color": "#ff0000"}, "slides": [{"slide_type": "title"}]}')
        assert deck.theme.accent_color == "#ff0000"
        assert deck.theme.primary_color == DEFAULT_AUTHOR_COLORS["primary_color"]
        assert deck.theme.text_color == DEFAULT_AUTHOR_COLORS["text_color"]

    def test_unparsable_theme_colors_fall_back(self, parser):
        deck = parser.parse('{"theme": {"primary_color": "navy", "secondary_color": "#ABC"}, '
                            '"slides": [{"slide_type": "title"}]}')
        assert deck.theme.primary_color == DEFAULT_AUTHOR_COLORS["primary_color"]
        assert deck.theme.secondary_color == "#aabbcc"

    def test_non_object_slides_are_kept_empty(self, parser):
        deck = parser.parse('{"theme": {}, "slides": ["oops", {"slide_type": "title", "title": "T"}, 7]}')
        assert len(deck.slides) == 3
        assert deck.slides[0].slide_type is None
        assert deck.slides[2].slide_type is None
        assert deck.slides[1].title == "T"

    def test_slide_type_is_normalised(self, parser):
        deck = parser.parse('{"theme": {}, "slides": [{"slide_type": " Bullets "}, {"slide_type": 5}]}')
        assert deck.slides[0].kind is SlideType.BULLETS
        assert deck.slides[1].slide_type is None

    def test_unknown_fields_are_retained(self, parser):
        deck = parser.parse('{"theme": {}, "slides": [{"slide_type": "mystery", "speaker_notes": "hi"}]}')
        slide = deck.slides[0]
        assert slide.kind is None
        assert slide.raw_fields()["speaker_notes"] == "hi"
