"""Tests for generators/themes.py"""

import re

import pytest

from generators.colors import lighten, pick_darkest
from generators.themes import (
    AUTO_THEME_ID,
    DARK_SLIDE_TYPES,
    PRESET_THEMES,
    ResolvedTheme,
    ThemeResolver,
    list_valid_theme_selectors,
)
from models import AuthorTheme

HEX = re.compile(r"^#[0-9a-fA-F]{6}$")
COLOR_FIELDS = (
    "primary", "secondary", "accent", "dark_bg", "light_bg",
    "card_bg", "text_dark", "text_light", "text_muted", "card_border_top",
)

PRESET_IDS = [
    "executive_dark", "modern_warm", "ocean_blue", "forest_green", "sunset_bold",
    "royal_purple", "minimalist", "classic_crimson", "slate_pro", "midnight_gold",
]


@pytest.fixture
def resolver():
    return ThemeResolver()


@pytest.fixture
def author():
    return AuthorTheme(
        primary_color="#1a365d",
        secondary_color="#2d3748",
        accent_color="#3182ce",
        background_color="#f7fafc",
        text_color="#1a202c",
    )


class TestCatalog:
    def test_ten_presets_in_order(self):
        assert list(PRESET_THEMES) == PRESET_IDS

    def test_selector_list(self, resolver):
        assert resolver.list_selectors() == [AUTO_THEME_ID] + PRESET_IDS
        assert list_valid_theme_selectors() == [AUTO_THEME_ID] + PRESET_IDS

    @pytest.mark.parametrize("theme_id", PRESET_IDS)
    def test_presets_are_complete(self, theme_id):
        theme = PRESET_THEMES[theme_id]
        assert theme.id == theme_id
        for name in COLOR_FIELDS:
            assert HEX.match(getattr(theme, name)), f"{theme_id}.{name}"
        assert theme.heading_font == "Georgia"
        assert theme.body_font == "Arial"
        assert theme.dark_slide_types == DARK_SLIDE_TYPES

    def test_round_trip_dict(self):
        theme = PRESET_THEMES["ocean_blue"]
        assert ResolvedTheme.from_dict(theme.to_dict()) == theme

    def test_rgb_accessor(self):
        theme = PRESET_THEMES["minimalist"]
        assert str(theme.rgb("accent")) == "00ACC1"


class TestResolve:
    @pytest.mark.parametrize("theme_id", PRESET_IDS)
    def test_preset_is_returned_verbatim(self, resolver, author, theme_id):
        assert resolver.resolve(theme_id, author) is PRESET_THEMES[theme_id]

    @pytest.mark.parametrize("selector", ["auto", "", None, "no_such_theme"])
    def test_auto_empty_and_unknown_derive(self, resolver, author, selector):
        theme = resolver.resolve(selector, author)
        assert theme.id == AUTO_THEME_ID
        for name in COLOR_FIELDS:
            assert HEX.match(getattr(theme, name)), name

    def test_derivation_rules(self, resolver, author):
        theme = resolver.derive(author)
        assert theme.primary == author.primary_color
        assert theme.secondary == author.secondary_color
        assert theme.accent == author.accent_color
        assert theme.light_bg == author.background_color
        assert theme.text_dark == author.text_color
        assert theme.text_muted == author.secondary_color
        assert theme.card_border_top == author.accent_color
        assert theme.card_bg == "#FFFFFF"
        assert theme.text_light == lighten(author.background_color, 0.95)

    def test_dark_bg_is_darkest_author_color(self, resolver, author):
        theme = resolver.derive(author)
        assert theme.dark_bg == pick_darkest([
            author.primary_color, author.secondary_color, author.accent_color,
            author.background_color, author.text_color,
        ])
        assert theme.dark_bg == "#1a202c"

    def test_dark_bg_follows_palette_not_primary(self, resolver):
        light_primary = AuthorTheme(
            primary_color="#ffd166", secondary_color="#06d6a0", accent_color="#ef476f",
            background_color="#ffffff", text_color="#073b4c",
        )
        assert resolver.derive(light_primary).dark_bg == "#073b4c"

    def test_low_contrast_palette_is_not_altered(self, resolver):
        pale = AuthorTheme(
            primary_color="#eeeeee", secondary_color="#dddddd", accent_color="#cccccc",
            background_color="#ffffff", text_color="#bbbbbb",
        )
        theme = resolver.derive(pale)
        assert theme.dark_bg == "#bbbbbb"
        assert theme.text_light == "#ffffff"

    def test_prefers_dark(self, resolver, author):
        theme = resolver.derive(author)
        for slide_type in ("title", "section_divider", "quote", "summary"):
            assert theme.prefers_dark(slide_type)
        for slide_type in ("bullets", "table", None):
            assert not theme.prefers_dark(slide_type)

    def test_custom_catalog(self, author):
        custom = {"brand": PRESET_THEMES["slate_pro"]}
        resolver = ThemeResolver(catalog=custom)
        assert resolver.list_selectors() == ["auto", "brand"]
        assert resolver.resolve("brand", author) is PRESET_THEMES["slate_pro"]
        assert resolver.resolve("ocean_blue", author).id == AUTO_THEME_ID
