"""
engine/layout_dispatcher.py — Variant-cycling template selection.
Decides which visual template renders each slide: bookends are fixed,
structurally constrained types get their only compatible template, and
everything else round-robins through the general-purpose templates so
consecutive slides do not look identical.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from engine.pipeline_logger import PipelineLogger
from models import Slide, SlideType, TemplateAssignment

if TYPE_CHECKING:
    from generators.themes import ResolvedTheme

# ── Template Catalogue ──────────────────────────────────────
HERO = "hero"
CLOSING = "closing"
CENTERED_DIVIDER = "centered_divider"
QUOTE_PANEL = "quote_panel"
QUOTE_CARD = "quote_card"
TWO_COLUMN = "two_column"
STAT_COLUMNS = "stat_columns"
HEADER_CARD = "header_card"
DARK_BANNER = "dark_banner"
ICON_EMPHASIS = "icon_emphasis"

GENERAL_TEMPLATES = (HEADER_CARD, DARK_BANNER, ICON_EMPHASIS)

ALL_TEMPLATES = (
    HERO, CLOSING, CENTERED_DIVIDER, QUOTE_PANEL, QUOTE_CARD,
    TWO_COLUMN, STAT_COLUMNS, *GENERAL_TEMPLATES,
)

# Surface each template is drawn on; "auto" defers to the theme's
# dark-preferred slide types.
SURFACE_DARK = "dark"
SURFACE_LIGHT = "light"
SURFACE_AUTO = "auto"

TEMPLATE_SURFACES: Dict[str, str] = {
    HERO: SURFACE_DARK,
    CLOSING: SURFACE_DARK,
    CENTERED_DIVIDER: SURFACE_DARK,
    QUOTE_PANEL: SURFACE_DARK,
    QUOTE_CARD: SURFACE_LIGHT,
    TWO_COLUMN: SURFACE_LIGHT,
    STAT_COLUMNS: SURFACE_LIGHT,
    HEADER_CARD: SURFACE_LIGHT,
    DARK_BANNER: SURFACE_DARK,
    ICON_EMPHASIS: SURFACE_AUTO,
}


def surface_is_dark(template: str, slide_type: Optional[str], theme: ResolvedTheme) -> bool:
    """Whether *template* draws on the dark surface for this slide type."""
    surface = TEMPLATE_SURFACES.get(template, SURFACE_LIGHT)
    if surface == SURFACE_AUTO:
        return theme.prefers_dark(slide_type)
    return surface == SURFACE_DARK


def is_bookend(slide_index: int, total_slides: int) -> bool:
    return slide_index == 0 or slide_index == total_slides - 1


def assign_template(
    slide_index: int,
    slide: Slide,
    total_slides: int,
    counter: int,
) -> str:
    """Pick the template for one slide. Pure: same inputs, same template."""
    if slide_index == 0:
        return HERO
    if slide_index == total_slides - 1:
        return CLOSING

    kind = slide.kind
    if kind is SlideType.SECTION_DIVIDER:
        return CENTERED_DIVIDER
    if kind is SlideType.QUOTE:
        return QUOTE_PANEL if counter % 2 == 0 else QUOTE_CARD
    if kind is SlideType.TWO_COLUMN:
        return TWO_COLUMN
    if kind is SlideType.STATISTICS:
        return STAT_COLUMNS
    return GENERAL_TEMPLATES[counter % len(GENERAL_TEMPLATES)]


class LayoutDispatcher:
    """Plans the template for every slide of one deck (one render pass)."""

    def __init__(self) -> None:
        self._log = PipelineLogger("LayoutDispatcher")

    def plan(self, slides: Sequence[Slide]) -> List[TemplateAssignment]:
        total = len(slides)
        counter = 0
        plan: List[TemplateAssignment] = []
        for index, slide in enumerate(slides):
            template = assign_template(index, slide, total, counter)
            if not is_bookend(index, total):
                counter += 1
            plan.append(TemplateAssignment(
                index=index, slide_type=slide.slide_type, template=template,
            ))
            self._log.decision(f"Slide {index + 1} ({slide.slide_type}) → {template}")
        return plan
