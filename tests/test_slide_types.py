"""Tests for generators/slide_types.py"""

import pytest

from engine.errors import SlideRenderError
from generators.slide_types import (
    SLIDE_ICONS,
    extract_columns,
    extract_icon,
    extract_icon_override,
    extract_image,
    extract_items,
    extract_quote,
    extract_stats,
    extract_subtitle,
    extract_table,
    extract_title,
    fallback_lines,
    require_known_type,
)
from models import Slide, SlideType


def make(**fields) -> Slide:
    return Slide.model_validate(fields)


class TestTitleAndSubtitle:
    def test_title_precedence(self):
        assert extract_title(make(heading="H", topic="T")) == "H"
        assert extract_title(make(title="", heading="", topic="T")) == "T"
        assert extract_title(make(title="A", heading="H")) == "A"

    def test_wrong_types_degrade_to_empty(self):
        assert extract_title(make(title=["x"], heading={"a": 1})) == ""
        assert extract_title(make(title=42)) == "42"

    def test_subtitle_precedence(self):
        assert extract_subtitle(make(quote="Q", attribution="A")) == "Q"
        assert extract_subtitle(make(attribution="A", call_to_action="C")) == "A"
        assert extract_subtitle(make(call_to_action="C")) == "C"
        assert extract_subtitle(make()) == ""


class TestItems:
    def test_bullets_first(self):
        assert extract_items(make(bullets=["a", "", None, "b"], takeaways=["t"])) == ["a", "b"]

    def test_takeaways_when_no_bullets(self):
        assert extract_items(make(bullets=[], takeaways=["t1", "t2"])) == ["t1", "t2"]

    def test_stats_as_value_label(self):
        slide = make(stats=[{"value": "42%", "label": "Growth"}, {"value": "7"}, "loose"])
        assert extract_items(slide) == ["42% — Growth", "7", "loose"]

    def test_columns_merged(self):
        assert extract_items(make(left_items=["l1"], right_items=["r1", "r2"])) == ["l1", "r1", "r2"]

    def test_table_rows_joined(self):
        slide = make(headers=["A", "B"], rows=[["1", "2"], ["3"]])
        assert extract_items(slide) == ["1 | 2", "3"]

    def test_image_last(self):
        assert extract_items(make(image_description="A chart", caption="Fig 1")) == ["A chart", "Fig 1"]

    def test_nothing(self):
        assert extract_items(make(slide_type="bullets")) == []

    def test_bare_string_bullets(self):
        assert extract_items(make(bullets="just one")) == ["just one"]


class TestIcons:
    def test_default_glyph_per_type(self):
        assert extract_icon(make(slide_type="title")) == "✦"
        assert extract_icon(make(slide_type="summary")) == "✓"
        assert extract_icon(make(slide_type="statistics")) == "↑"
        assert len(SLIDE_ICONS) == len(SlideType)

    def test_override(self):
        assert extract_icon(make(slide_type="title", icon="🚀")) == "🚀"

    def test_unknown_type(self):
        assert extract_icon(make(slide_type="mystery")) == "•"

    def test_override_only(self):
        assert extract_icon_override(make(slide_type="title", icon=" ★ ")) == "★"
        assert extract_icon_override(make(slide_type="title")) == ""
        assert extract_icon_override(make(icon={"glyph": "x"})) == ""


class TestTypedAccessors:
    def test_stats_limit_and_garbage(self):
        slide = make(stats=[{"value": str(i), "label": f"L{i}"} for i in range(6)] + [{}, 3])
        assert extract_stats(slide, limit=4) == [("0", "L0"), ("1", "L1"), ("2", "L2"), ("3", "L3")]
        assert extract_stats(make(stats="nope")) == []

    def test_table_pads_and_truncates_to_header_width(self):
        slide = make(headers=["A", "B", "C"], rows=[["1"], ["1", "2", "3", "4"], "solo", []])
        headers, rows = extract_table(slide)
        assert headers == ["A", "B", "C"]
        assert rows == [["1", "", ""], ["1", "2", "3"], ["solo", "", ""]]

    def test_table_without_headers_uses_widest_row(self):
        headers, rows = extract_table(make(rows=[["a"], ["b", "c"]]))
        assert headers == []
        assert rows == [["a", ""], ["b", "c"]]

    def test_blank_header_keeps_its_column(self):
        headers, rows = extract_table(make(headers=["Region", "", "Revenue"], rows=[["NA", "Q1", "$2M"]]))
        assert headers == ["Region", "", "Revenue"]
        assert rows == [["NA", "Q1", "$2M"]]

    def test_all_blank_headers_are_dropped(self):
        headers, rows = extract_table(make(headers=["", None, " "], rows=[["a", "b"]]))
        assert headers == []
        assert rows == [["a", "b"]]

    def test_table_max_rows(self):
        _, rows = extract_table(make(headers=["A"], rows=[[str(i)] for i in range(20)]), max_rows=5)
        assert len(rows) == 5

    def test_columns_quote_image(self):
        slide = make(left_title="L", left_items="x", right_items=[1, 2],
                     quote=" Q ", attribution=None, image_description="D")
        assert extract_columns(slide) == ("L", ["x"], "", ["1", "2"])
        assert extract_quote(slide) == ("Q", "")
        assert extract_image(slide) == ("D", "")


class TestFallbackSupport:
    def test_require_known_type(self):
        assert require_known_type(make(slide_type="table")) is SlideType.TABLE
        with pytest.raises(SlideRenderError):
            require_known_type(make(slide_type="hologram"))
        with pytest.raises(SlideRenderError):
            require_known_type(make())

    def test_fallback_lines_dump_every_field(self):
        lines = fallback_lines(make(slide_type="hologram", title="T", extra={"k": [1, 2]}))
        assert "slide_type: hologram" in lines
        assert "title: T" in lines
        assert 'extra: {"k": [1, 2]}' in lines

    def test_fallback_lines_for_empty_slide(self):
        assert len(fallback_lines(Slide())) == 1
