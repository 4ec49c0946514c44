"""
generators/themes.py — Presentation theme catalogue and resolution.
A ResolvedTheme is the complete 10-colour operational palette both
renderers draw with; it is either one of the built-in presets or derived
from the 5-colour author palette embedded in the deck.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional

from pptx.dml.color import RGBColor

from engine.pipeline_logger import PipelineLogger
from generators.colors import contrast_ratio, lighten, pick_darkest
from models import AuthorTheme, SlideType

AUTO_THEME_ID = "auto"

DARK_SLIDE_TYPES: FrozenSet[str] = frozenset({
    SlideType.TITLE.value,
    SlideType.SECTION_DIVIDER.value,
    SlideType.QUOTE.value,
    SlideType.SUMMARY.value,
})

# Below this ratio light text on the derived dark surface is hard to read.
MIN_READABLE_CONTRAST = 3.0


def to_rgb_color(hex_color: str) -> RGBColor:
    return RGBColor.from_string(hex_color.lstrip("#").upper())


@dataclass(frozen=True)
class ResolvedTheme:
    """A complete colour / font palette for one render pass (read-only)."""

    # Metadata
    id: str
    name: str
    description: str

    # Colours (hex strings)
    primary: str           # Headings on light slides, filled cards
    secondary: str         # Banners, muted fills
    accent: str            # Accent bars, underlines, bullets
    dark_bg: str           # Dark slide surface, header bands
    light_bg: str          # Light slide surface, table stripes
    card_bg: str           # Card panel body
    text_dark: str         # Body text on light surfaces
    text_light: str        # Body text on dark surfaces
    text_muted: str        # Captions, attributions
    card_border_top: str   # Card panel top border

    # Fonts
    heading_font: str = "Georgia"
    body_font: str = "Arial"

    dark_slide_types: FrozenSet[str] = field(default_factory=lambda: DARK_SLIDE_TYPES)

    def prefers_dark(self, slide_type: Optional[str]) -> bool:
        """Whether slides of this type render on the dark surface."""
        return slide_type in self.dark_slide_types

    def rgb(self, name: str) -> RGBColor:
        """A palette colour as a python-pptx RGBColor, e.g. theme.rgb("accent")."""
        return to_rgb_color(getattr(self, name))

    @property
    def colors(self) -> Dict[str, str]:
        return {
            "primary": self.primary,
            "secondary": self.secondary,
            "accent": self.accent,
            "dark_bg": self.dark_bg,
            "light_bg": self.light_bg,
            "card_bg": self.card_bg,
            "text_dark": self.text_dark,
            "text_light": self.text_light,
            "text_muted": self.text_muted,
            "card_border_top": self.card_border_top,
        }

    def to_dict(self) -> Dict:
        """Serialise for API responses / debugging."""
        d = asdict(self)
        d["dark_slide_types"] = sorted(self.dark_slide_types)
        return d

    @classmethod
    def from_dict(cls, d: Dict) -> ResolvedTheme:
        d = dict(d)
        if "dark_slide_types" in d:
            d["dark_slide_types"] = frozenset(d["dark_slide_types"])
        return cls(**d)


def _preset(theme_id: str, name: str, description: str, primary: str, secondary: str,
            accent: str, light_bg: str, text_dark: str, text_light: str,
            text_muted: str) -> ResolvedTheme:
    """Presets share the dark surface with primary and the border with accent."""
    return ResolvedTheme(
        id=theme_id, name=name, description=description,
        primary=primary, secondary=secondary, accent=accent,
        dark_bg=primary, light_bg=light_bg, card_bg="#FFFFFF",
        text_dark=text_dark, text_light=text_light, text_muted=text_muted,
        card_border_top=accent,
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Built-in Themes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

THEME_EXECUTIVE_DARK = _preset(
    "executive_dark", "Executive Dark", "Navy & gold corporate",
    primary="#1B2A4A", secondary="#2C3E6B", accent="#E8B931",
    light_bg="#F5F1EB", text_dark="#1A1A2E", text_light="#EDE8E0", text_muted="#7A8BB5",
)

THEME_MODERN_WARM = _preset(
    "modern_warm", "Modern Warm", "Brown & amber elegance",
    primary="#3E2723", secondary="#5D4037", accent="#C8A415",
    light_bg="#F5F0EB", text_dark="#2C1810", text_light="#FAF3ED", text_muted="#8D6E63",
)

THEME_OCEAN_BLUE = _preset(
    "ocean_blue", "Ocean Blue", "Deep navy & teal",
    primary="#0D1B2A", secondary="#1B3A5C", accent="#00BCD4",
    light_bg="#EEF5F9", text_dark="#0A1628", text_light="#E0F0F6", text_muted="#5B8BA0",
)

THEME_FOREST_GREEN = _preset(
    "forest_green", "Forest Green", "Natural & earthy",
    primary="#1B3A2D", secondary="#2E5E47", accent="#66BB6A",
    light_bg="#F0F7F0", text_dark="#142A20", text_light="#E5F2E5", text_muted="#6E9E7E",
)

THEME_SUNSET_BOLD = _preset(
    "sunset_bold", "Sunset Bold", "Warm purple & orange",
    primary="#2D1B2E", secondary="#4A2D4E", accent="#FF6B35",
    light_bg="#FFF5F0", text_dark="#231520", text_light="#F9ECE5", text_muted="#9E7AA0",
)

THEME_ROYAL_PURPLE = _preset(
    "royal_purple", "Royal Purple", "Deep purple & lavender",
    primary="#1A0933", secondary="#2E1A52", accent="#CE93D8",
    light_bg="#F5F0FF", text_dark="#140726", text_light="#EDE0F5", text_muted="#8E6BA5",
)

THEME_MINIMALIST = _preset(
    "minimalist", "Minimalist", "Clean black & teal",
    primary="#1A1A1A", secondary="#3A3A3A", accent="#00ACC1",
    light_bg="#FAFAFA", text_dark="#111111", text_light="#F0F0F0", text_muted="#888888",
)

THEME_CLASSIC_CRIMSON = _preset(
    "classic_crimson", "Classic Crimson", "Dark red scholarly",
    primary="#2D0A0A", secondary="#4A1A1A", accent="#C62828",
    light_bg="#FFF5F5", text_dark="#1F0808", text_light="#F5E0E0", text_muted="#A06060",
)

THEME_SLATE_PRO = _preset(
    "slate_pro", "Slate Professional", "Blue-gray & teal",
    primary="#263238", secondary="#37474F", accent="#26A69A",
    light_bg="#ECEFF1", text_dark="#1C262B", text_light="#DEE4E8", text_muted="#78909C",
)

THEME_MIDNIGHT_GOLD = _preset(
    "midnight_gold", "Midnight Gold", "Deep navy & gold",
    primary="#0A0A23", secondary="#1A1A40", accent="#FFD700",
    light_bg="#FFFFF0", text_dark="#08081A", text_light="#E8E8D0", text_muted="#7070A0",
)

# Registry
PRESET_THEMES: Dict[str, ResolvedTheme] = {
    t.id: t for t in [
        THEME_EXECUTIVE_DARK,
        THEME_MODERN_WARM,
        THEME_OCEAN_BLUE,
        THEME_FOREST_GREEN,
        THEME_SUNSET_BOLD,
        THEME_ROYAL_PURPLE,
        THEME_MINIMALIST,
        THEME_CLASSIC_CRIMSON,
        THEME_SLATE_PRO,
        THEME_MIDNIGHT_GOLD,
    ]
}


class ThemeResolver:
    """Maps a theme selector plus the deck's author palette to a ResolvedTheme.

    The preset catalogue is injected so tests (or callers with their own
    brand palettes) can swap it; it is only ever read.
    """

    def __init__(self, catalog: Optional[Mapping[str, ResolvedTheme]] = None) -> None:
        self._catalog = catalog if catalog is not None else PRESET_THEMES
        self._log = PipelineLogger("ThemeResolver")

    def list_selectors(self) -> List[str]:
        """Valid selectors for caller-side validation: 'auto' then preset ids."""
        return [AUTO_THEME_ID, *self._catalog.keys()]

    def resolve(self, selector: Optional[str], author_theme: AuthorTheme) -> ResolvedTheme:
        if selector and selector != AUTO_THEME_ID:
            preset = self._catalog.get(selector)
            if preset is not None:
                self._log.decision(f"Theme preset '{preset.id}'")
                return preset
            self._log.warning(f"Unknown theme selector '{selector}', deriving from deck palette")

        theme = self.derive(author_theme)
        self._log.decision(
            f"Theme derived from deck palette (dark_bg={theme.dark_bg})",
            reason="selector is 'auto' or unrecognised",
        )
        return theme

    def derive(self, author: AuthorTheme) -> ResolvedTheme:
        """Expand the 5-colour author palette to the 10-colour operational one."""
        dark_bg = pick_darkest([
            author.primary_color,
            author.secondary_color,
            author.accent_color,
            author.background_color,
            author.text_color,
        ])
        text_light = lighten(author.background_color, 0.95)

        ratio = contrast_ratio(dark_bg, text_light)
        if ratio < MIN_READABLE_CONTRAST:
            self._log.warning(
                f"Derived palette has low contrast ({ratio:.2f}:1) between "
                f"dark surface {dark_bg} and light text {text_light}"
            )

        return ResolvedTheme(
            id=AUTO_THEME_ID,
            name="Auto",
            description="Derived from the deck's own palette",
            primary=author.primary_color,
            secondary=author.secondary_color,
            accent=author.accent_color,
            dark_bg=dark_bg,
            light_bg=author.background_color,
            card_bg="#FFFFFF",
            text_dark=author.text_color,
            text_light=text_light,
            text_muted=author.secondary_color,
            card_border_top=author.accent_color,
        )


def list_valid_theme_selectors() -> List[str]:
    """'auto' followed by the 10 built-in preset ids."""
    return [AUTO_THEME_ID, *PRESET_THEMES.keys()]
