"""
generators/ppt_generator.py — Shape-based PPTX renderer using python-pptx.
Every slide is assembled from primitive shapes on a blank layout; the
template chosen by the layout dispatcher plus the slide type pick the
builder. A builder that fails is replaced by a plain field dump on the
same slide so one bad slide never costs the whole deck.
"""

from __future__ import annotations

import io
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from pptx import Presentation
from pptx.enum.dml import MSO_LINE_DASH_STYLE
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.util import Inches, Pt

from config import Settings, get_settings
from engine.layout_dispatcher import (
    CENTERED_DIVIDER, CLOSING, DARK_BANNER, HEADER_CARD, HERO, ICON_EMPHASIS,
    QUOTE_CARD, QUOTE_PANEL, STAT_COLUMNS, TWO_COLUMN, surface_is_dark,
)
from engine.pipeline_logger import PipelineLogger
from generators.colors import lighten, pick_darkest
from generators.slide_types import (
    extract_call_to_action, extract_columns, extract_footer, extract_icon,
    extract_image, extract_items, extract_quote, extract_stats, extract_subtitle,
    extract_table, extract_takeaways, extract_title, fallback_lines,
    require_known_type,
)
from generators.stat_card_builder import StatCardBuilder
from generators.table_generator import TableGenerator
from generators.themes import ResolvedTheme, to_rgb_color
from models import Deck, Slide, SlideOutcome, SlideType, TemplateAssignment

# ── Layout Constants (inches) ─────────────────────────────────
HEADER_BAND_HEIGHT = 1.25
HEADER_UNDERLINE = 0.05
CARD_TOP_BORDER = 0.06
CARD_SHADOW_OFFSET = 0.06
ACCENT_BAR_WIDTH = 0.06
EDGE_STRIP_HEIGHT = 0.12
FOOTER_HEIGHT = 0.35

BULLET_MARKER = "●"
CHECK_MARKER = "✓"
ARROW_MARKER = "▸"

Builder = Callable[[object, Slide, TemplateAssignment], None]


class _Palette(NamedTuple):
    bg: str
    text: str
    heading: str
    muted: str


class _Box(NamedTuple):
    """Body area left free by a template frame."""
    left: float
    top: float
    width: float
    height: float
    palette: _Palette


class ShapeDeckRenderer:
    """Builds an editable PPTX deck from a parsed Deck and its template plan."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._log = PipelineLogger("ShapeRenderer")
        self._w = self._settings.slide_width_inches
        self._h = self._settings.slide_height_inches

        # Per-pass state (reset by render)
        self._prs = None
        self._theme: Optional[ResolvedTheme] = None
        self._table_gen: Optional[TableGenerator] = None
        self._stat_builder: Optional[StatCardBuilder] = None
        self._doc_title: str = ""
        self._total_slides: int = 0

        self._generic: Dict[str, Builder] = {
            HERO: self._build_hero,
            CLOSING: self._build_closing,
            CENTERED_DIVIDER: self._build_divider,
            QUOTE_PANEL: self._build_quote_panel,
            QUOTE_CARD: self._build_quote_card,
            TWO_COLUMN: self._build_two_column,
            STAT_COLUMNS: self._build_stat_columns,
            HEADER_CARD: self._build_header_card,
            DARK_BANNER: self._build_dark_banner,
            ICON_EMPHASIS: self._build_icon_emphasis,
        }
        self._builders: Dict[Tuple[SlideType, str], Builder] = {
            (SlideType.BULLETS, HEADER_CARD): self._build_bullets_header_card,
            (SlideType.BULLETS, DARK_BANNER): self._build_bullets_dark_banner,
            (SlideType.BULLETS, ICON_EMPHASIS): self._build_bullets_icon_emphasis,
            (SlideType.TABLE, HEADER_CARD): self._build_table_header_card,
            (SlideType.TABLE, DARK_BANNER): self._build_table_dark_banner,
            (SlideType.TABLE, ICON_EMPHASIS): self._build_table_icon_emphasis,
            (SlideType.IMAGE_PLACEHOLDER, HEADER_CARD): self._build_image_header_card,
            (SlideType.IMAGE_PLACEHOLDER, DARK_BANNER): self._build_image_dark_banner,
            (SlideType.IMAGE_PLACEHOLDER, ICON_EMPHASIS): self._build_image_icon_emphasis,
            (SlideType.SUMMARY, HEADER_CARD): self._build_summary_header_card,
            (SlideType.SUMMARY, DARK_BANNER): self._build_summary_dark_banner,
            (SlideType.SUMMARY, ICON_EMPHASIS): self._build_summary_icon_emphasis,
        }

    # ── Entry Point ─────────────────────────────────────────

    def render(
        self,
        deck: Deck,
        theme: ResolvedTheme,
        plan: Sequence[TemplateAssignment],
        document_title: str = "",
    ) -> Tuple[bytes, List[SlideOutcome]]:
        """Render every slide and return the serialised .pptx plus outcomes."""
        self._log.action("Render PPTX", f"slides={len(deck.slides)}, theme={theme.id}")

        self._theme = theme
        self._table_gen = TableGenerator(theme=theme)
        self._stat_builder = StatCardBuilder(theme=theme)
        self._doc_title = document_title or self._settings.default_document_title
        self._total_slides = len(deck.slides)

        self._prs = Presentation()
        self._prs.slide_width = Inches(self._w)
        self._prs.slide_height = Inches(self._h)

        outcomes: List[SlideOutcome] = []
        for data, assignment in zip(deck.slides, plan):
            outcomes.append(self._render_slide(data, assignment))

        props = self._prs.core_properties
        props.title = self._doc_title
        props.author = self._settings.document_author

        buf = io.BytesIO()
        self._prs.save(buf)
        fallbacks = sum(1 for o in outcomes if o.fallback)
        self._log.info(f"PPTX rendered: {len(outcomes)} slides ({fallbacks} fallback)")
        return buf.getvalue(), outcomes

    # ── Slide Dispatcher ────────────────────────────────────

    def _builder_for(self, kind: SlideType, template: str) -> Builder:
        return self._builders.get((kind, template)) or self._generic[template]

    def _render_slide(self, data: Slide, assignment: TemplateAssignment) -> SlideOutcome:
        slide = self._add_blank_slide()
        try:
            kind = require_known_type(data)
            self._builder_for(kind, assignment.template)(slide, data, assignment)
        except Exception as e:
            self._log.warning(
                f"Slide {assignment.index + 1} ({assignment.slide_type or 'untyped'}, "
                f"{assignment.template}) fell back to field dump: {e}"
            )
            self._clear_slide(slide)
            self._build_fallback(slide, data, assignment)
            return SlideOutcome(
                index=assignment.index, slide_type=assignment.slide_type,
                template=assignment.template, fallback=True, error=str(e),
            )
        return SlideOutcome(
            index=assignment.index, slide_type=assignment.slide_type, template=assignment.template,
        )

    @staticmethod
    def _clear_slide(slide) -> None:
        """Drop every shape a failed builder left behind."""
        for shp in list(slide.shapes):
            el = shp._element
            el.getparent().remove(el)

    # ── Primitives ──────────────────────────────────────────

    def _add_blank_slide(self):
        layout = self._prs.slide_layouts[6]
        return self._prs.slides.add_slide(layout)

    def _palette(self, dark: bool) -> _Palette:
        t = self._theme
        if dark:
            return _Palette(t.dark_bg, t.text_light, t.text_light, lighten(t.dark_bg, 0.6))
        return _Palette(t.light_bg, t.text_dark, t.primary, t.text_muted)

    def _on_fill(self, fill: str) -> str:
        """Readable text colour on a filled shape."""
        t = self._theme
        return t.text_light if pick_darkest([fill, t.text_dark]) == fill else t.text_dark

    @staticmethod
    def _set_background(slide, color: str) -> None:
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = to_rgb_color(color)

    @staticmethod
    def _add_rect(slide, left: float, top: float, width: float, height: float,
                  color: str, shape=MSO_SHAPE.RECTANGLE):
        rect = slide.shapes.add_shape(
            shape, Inches(left), Inches(top), Inches(width), Inches(height),
        )
        rect.fill.solid()
        rect.fill.fore_color.rgb = to_rgb_color(color)
        rect.line.fill.background()
        rect.shadow.inherit = False
        return rect

    def _add_text(
        self,
        slide,
        left: float,
        top: float,
        width: float,
        height: float,
        text: str,
        size: float,
        color: str,
        bold: bool = False,
        italic: bool = False,
        heading: bool = False,
        align=PP_ALIGN.LEFT,
        anchor=MSO_ANCHOR.TOP,
    ):
        """Single-paragraph text box; nothing is added for empty text."""
        if not text:
            return None
        box = slide.shapes.add_textbox(Inches(left), Inches(top), Inches(width), Inches(height))
        tf = box.text_frame
        tf.word_wrap = True
        tf.auto_size = MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE
        tf.vertical_anchor = anchor
        p = tf.paragraphs[0]
        p.text = text
        p.font.size = Pt(size)
        p.font.bold = bold
        p.font.italic = italic
        p.font.color.rgb = to_rgb_color(color)
        p.font.name = self._theme.heading_font if heading else self._theme.body_font
        p.alignment = align
        return box

    def _add_bullet_list(
        self,
        slide,
        left: float,
        top: float,
        width: float,
        height: float,
        items: Sequence[str],
        color: str,
        marker: str = BULLET_MARKER,
        numbered: bool = False,
        size: Optional[float] = None,
    ) -> None:
        if not items:
            return
        t = self._theme
        if size is None:
            size = 18 if len(items) <= 4 else 15 if len(items) <= 7 else 12
        box = slide.shapes.add_textbox(Inches(left), Inches(top), Inches(width), Inches(height))
        tf = box.text_frame
        tf.word_wrap = True
        tf.auto_size = MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE

        for i, item in enumerate(items):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()

            marker_run = p.add_run()
            marker_run.text = f"{i + 1:02d}   " if numbered else f"{marker}  "
            marker_run.font.size = Pt(size if numbered else size * 0.65)
            marker_run.font.bold = numbered
            marker_run.font.color.rgb = t.rgb("accent")
            marker_run.font.name = t.heading_font

            text_run = p.add_run()
            text_run.text = item
            text_run.font.size = Pt(size)
            text_run.font.color.rgb = to_rgb_color(color)
            text_run.font.name = t.body_font

            p.space_before = Pt(size * 0.6)
            p.space_after = Pt(4)

    def _add_card_panel(self, slide, left: float, top: float, width: float, height: float) -> None:
        """White card: offset drop shadow, hairline border, accent top border."""
        t = self._theme
        self._add_rect(slide, left + CARD_SHADOW_OFFSET, top + CARD_SHADOW_OFFSET,
                       width, height, lighten(t.text_dark, 0.78))
        body = self._add_rect(slide, left, top, width, height, t.card_bg)
        body.line.color.rgb = to_rgb_color(lighten(t.text_dark, 0.85))
        body.line.width = Pt(0.75)
        self._add_rect(slide, left, top, width, CARD_TOP_BORDER, t.card_border_top)

    def _add_left_accent_bar(self, slide) -> None:
        self._add_rect(slide, 0, 0, ACCENT_BAR_WIDTH, self._h, self._theme.accent)

    def _add_edge_strips(self, slide) -> None:
        """Accent strips along the top and bottom edges of bookend slides."""
        self._add_rect(slide, 0, 0, self._w, 0.08, self._theme.accent)
        self._add_rect(slide, 0, self._h - EDGE_STRIP_HEIGHT, self._w, EDGE_STRIP_HEIGHT,
                       self._theme.accent)

    def _add_header_band(self, slide, title: str) -> None:
        t = self._theme
        self._add_rect(slide, 0, 0, self._w, HEADER_BAND_HEIGHT, t.dark_bg)
        self._add_rect(slide, 0, HEADER_BAND_HEIGHT, self._w, HEADER_UNDERLINE, t.accent)
        self._add_text(slide, 0.7, 0.18, self._w - 1.4, 0.9, title, 28, t.text_light,
                       bold=True, heading=True, anchor=MSO_ANCHOR.MIDDLE)

    def _add_heading(self, slide, left: float, top: float, width: float,
                     title: str, color: str, size: float = 30) -> None:
        """Heading with a short accent underline (underline only when titled)."""
        if not title:
            return
        self._add_text(slide, left, top, width, 0.85, title, size, color,
                       bold=True, heading=True, anchor=MSO_ANCHOR.BOTTOM)
        self._add_rect(slide, left, top + 0.92, 1.6, 0.05, self._theme.accent)

    def _add_icon_badge(self, slide, left: float, top: float, size: float, glyph: str) -> None:
        t = self._theme
        badge = self._add_rect(slide, left, top, size, size, t.accent, shape=MSO_SHAPE.OVAL)
        tf = badge.text_frame
        tf.vertical_anchor = MSO_ANCHOR.MIDDLE
        p = tf.paragraphs[0]
        p.text = glyph
        p.font.size = Pt(size * 28)
        p.font.bold = True
        p.font.color.rgb = to_rgb_color(self._on_fill(t.accent))
        p.alignment = PP_ALIGN.CENTER

    def _add_footer(self, slide, data: Slide, a: TemplateAssignment, color: str) -> None:
        top = self._h - 0.55
        self._add_text(slide, 0.7, top, self._w - 3.5, FOOTER_HEIGHT,
                       extract_footer(data), 10, color)
        self._add_text(slide, self._w - 2.7, top, 2.0, FOOTER_HEIGHT,
                       f"{a.index + 1} / {self._total_slides}", 10, color,
                       align=PP_ALIGN.RIGHT)

    # ── Structural Builders ─────────────────────────────────

    def _build_hero(self, slide, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._set_background(slide, pal.bg)
        self._add_edge_strips(slide)

        self._add_icon_badge(slide, self._w / 2 - 0.45, 1.0, 0.9, extract_icon(data))
        self._add_text(slide, 1.0, 2.1, self._w - 2.0, 1.9,
                       extract_title(data) or self._doc_title, 44, pal.heading,
                       bold=True, heading=True, align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.BOTTOM)
        self._add_rect(slide, self._w / 2 - 1.5, 4.2, 3.0, 0.06, t.accent,
                       shape=MSO_SHAPE.ROUNDED_RECTANGLE)
        self._add_text(slide, 1.5, 4.45, self._w - 3.0, 1.3, extract_subtitle(data), 20,
                       pal.muted, align=PP_ALIGN.CENTER)
        self._add_footer(slide, data, a, pal.muted)

    def _build_closing(self, slide, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._set_background(slide, pal.bg)
        self._add_edge_strips(slide)

        self._add_text(slide, 1.0, 0.7, self._w - 2.0, 1.3, extract_title(data) or "Thank You",
                       40, pal.heading, bold=True, heading=True,
                       align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.BOTTOM)
        self._add_rect(slide, self._w / 2 - 1.5, 2.1, 3.0, 0.06, t.accent,
                       shape=MSO_SHAPE.ROUNDED_RECTANGLE)

        takeaways = extract_takeaways(data) or extract_items(data)
        self._add_bullet_list(slide, 2.2, 2.4, self._w - 4.4, 3.0, takeaways[:5],
                              pal.text, marker=CHECK_MARKER)

        cta = extract_call_to_action(data)
        if cta:
            self._add_rect(slide, self._w / 2 - 3.5, 5.65, 7.0, 0.8, t.accent,
                           shape=MSO_SHAPE.ROUNDED_RECTANGLE)
            self._add_text(slide, self._w / 2 - 3.4, 5.7, 6.8, 0.7, cta, 18,
                           self._on_fill(t.accent), bold=True,
                           align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.MIDDLE)
        else:
            self._add_text(slide, 2.0, 5.65, self._w - 4.0, 0.8, extract_subtitle(data), 18,
                           pal.muted, align=PP_ALIGN.CENTER)

    def _build_divider(self, slide, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._set_background(slide, pal.bg)
        self._add_rect(slide, 0, 0, ACCENT_BAR_WIDTH * 2, self._h, t.accent)

        self._add_text(slide, 0, 1.6, self._w, 1.1, extract_icon(data), 48, t.accent,
                       align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.BOTTOM)
        self._add_text(slide, 1.0, 2.8, self._w - 2.0, 1.5, extract_title(data), 40,
                       pal.heading, bold=True, heading=True,
                       align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.MIDDLE)
        self._add_rect(slide, self._w / 2 - 1.0, 4.4, 2.0, 0.05, t.accent)
        self._add_text(slide, 2.0, 4.65, self._w - 4.0, 1.2, extract_subtitle(data), 18,
                       pal.muted, align=PP_ALIGN.CENTER)
        self._add_footer(slide, data, a, pal.muted)

    def _build_quote_panel(self, slide, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._set_background(slide, pal.bg)
        self._add_left_accent_bar(slide)

        quote, attribution = extract_quote(data)
        self._add_text(slide, 0.9, 0.5, 2.0, 2.0, "“", 120, t.accent, heading=True)
        self._add_text(slide, 1.6, 1.9, self._w - 3.2, 3.1, quote or extract_title(data), 28,
                       pal.text, italic=True, heading=True,
                       align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.MIDDLE)
        self._add_rect(slide, self._w / 2 - 0.8, 5.2, 1.6, 0.05, t.accent)
        if attribution:
            self._add_text(slide, 1.6, 5.4, self._w - 3.2, 0.6, f"— {attribution}", 18,
                           t.accent, align=PP_ALIGN.CENTER)
        self._add_footer(slide, data, a, pal.muted)

    def _build_quote_card(self, slide, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(False)
        self._set_background(slide, pal.bg)

        quote, attribution = extract_quote(data)
        title = extract_title(data)
        card_top = 1.3 if title else 0.9
        self._add_text(slide, 1.5, 0.35, self._w - 3.0, 0.8, title if quote else "", 24,
                       pal.heading, bold=True, heading=True)
        self._add_card_panel(slide, 1.5, card_top, self._w - 3.0, 5.0)
        self._add_text(slide, 1.8, card_top + 0.2, 1.2, 1.2, "“", 72, t.accent, heading=True)
        self._add_text(slide, 2.4, card_top + 1.0, self._w - 4.8, 2.8, quote or title, 24,
                       pal.text, italic=True, heading=True, anchor=MSO_ANCHOR.MIDDLE)
        if attribution:
            self._add_text(slide, 2.4, card_top + 4.0, self._w - 4.8, 0.6,
                           f"— {attribution}", 16, pal.muted, align=PP_ALIGN.RIGHT)
        self._add_footer(slide, data, a, pal.muted)

    def _build_two_column(self, slide, data: Slide, a: TemplateAssignment) -> None:
        pal = self._palette(False)
        self._set_background(slide, pal.bg)
        self._add_heading(slide, 0.6, 0.25, self._w - 1.2, extract_title(data), pal.heading)

        left_title, left_items, right_title, right_items = extract_columns(data)
        col_w = (self._w - 1.2 - 0.4) / 2
        for i, (col_title, items) in enumerate(((left_title, left_items), (right_title, right_items))):
            if not col_title and not items:
                continue
            left = 0.6 + i * (col_w + 0.4)
            self._add_card_panel(slide, left, 1.6, col_w, 5.2)
            self._add_text(slide, left + 0.3, 1.85, col_w - 0.6, 0.6, col_title, 20,
                           pal.heading, bold=True, heading=True)
            self._add_bullet_list(slide, left + 0.3, 2.55, col_w - 0.6, 4.0, items, pal.text)
        self._add_footer(slide, data, a, pal.muted)

    def _build_stat_columns(self, slide, data: Slide, a: TemplateAssignment) -> None:
        pal = self._palette(False)
        self._set_background(slide, pal.bg)
        self._add_heading(slide, 0.5, 0.15, self._w - 1.0, extract_title(data), pal.heading)

        stats = extract_stats(data, limit=self._settings.max_stat_cards)
        if stats:
            self._stat_builder.build(slide, stats)
            return
        items = extract_items(data)
        if items:
            self._add_card_panel(slide, 0.5, 1.55, self._w - 1.0, 5.3)
            self._add_bullet_list(slide, 0.9, 1.9, self._w - 1.8, 4.7, items, pal.text)

    # ── General Template Frames ─────────────────────────────

    def _frame_header_card(self, slide, data: Slide, a: TemplateAssignment) -> _Box:
        pal = self._palette(False)
        self._set_background(slide, pal.bg)
        self._add_header_band(slide, extract_title(data))
        self._add_card_panel(slide, 0.6, 1.65, self._w - 1.2, self._h - 2.45)
        self._add_footer(slide, data, a, pal.muted)
        return _Box(0.95, 1.95, self._w - 1.9, self._h - 3.0, pal)

    def _frame_dark_banner(self, slide, data: Slide, a: TemplateAssignment) -> _Box:
        pal = self._palette(True)
        self._set_background(slide, pal.bg)
        self._add_left_accent_bar(slide)
        self._add_heading(slide, 0.8, 0.3, self._w - 1.6, extract_title(data), pal.heading)
        self._add_footer(slide, data, a, pal.muted)
        return _Box(0.9, 1.65, self._w - 1.8, self._h - 2.4, pal)

    def _frame_icon_emphasis(self, slide, data: Slide, a: TemplateAssignment) -> _Box:
        pal = self._palette(surface_is_dark(a.template, a.slide_type, self._theme))
        self._set_background(slide, pal.bg)
        self._add_icon_badge(slide, 0.8, 0.7, 1.6, extract_icon(data))
        self._add_heading(slide, 2.8, 0.6, self._w - 3.6, extract_title(data), pal.heading)
        self._add_footer(slide, data, a, pal.muted)
        return _Box(2.8, 2.0, self._w - 3.6, self._h - 2.75, pal)

    # ── Body Fillers ────────────────────────────────────────

    def _fill_generic(self, slide, data: Slide, box: _Box) -> None:
        subtitle = extract_subtitle(data)
        body_h = box.height - (0.7 if subtitle else 0)
        self._add_bullet_list(slide, box.left, box.top, box.width, body_h,
                              extract_items(data), box.palette.text)
        self._add_text(slide, box.left, box.top + body_h, box.width, 0.6, subtitle, 16,
                       box.palette.muted, italic=True)

    def _fill_bullets(self, slide, data: Slide, box: _Box, **style) -> None:
        items = extract_items(data)
        if len(items) > 5 and not style:
            half = (len(items) + 1) // 2
            col_w = (box.width - 0.4) / 2
            self._add_bullet_list(slide, box.left, box.top, col_w, box.height,
                                  items[:half], box.palette.text, size=15)
            self._add_bullet_list(slide, box.left + col_w + 0.4, box.top, col_w, box.height,
                                  items[half:], box.palette.text, size=15)
        else:
            self._add_bullet_list(slide, box.left, box.top, box.width, box.height,
                                  items, box.palette.text, **style)

    def _fill_table(self, slide, data: Slide, box: _Box) -> None:
        headers, rows = extract_table(data, max_rows=self._settings.max_table_rows)
        if not headers and not rows:
            self._fill_generic(slide, data, box)
            return
        _, caption = extract_image(data)
        self._table_gen.add_table(
            slide, headers, rows,
            left=box.left, top=box.top, width=box.width, height=box.height - 0.5,
            caption=caption,
        )

    def _fill_image(self, slide, data: Slide, box: _Box) -> None:
        t = self._theme
        description, caption = extract_image(data)
        pal = box.palette
        frame_h = box.height - (0.6 if caption else 0)

        frame = self._add_rect(slide, box.left, box.top, box.width, frame_h,
                               lighten(t.dark_bg, 0.85) if pal.bg == t.dark_bg else t.light_bg,
                               shape=MSO_SHAPE.ROUNDED_RECTANGLE)
        frame.line.color.rgb = t.rgb("accent")
        frame.line.width = Pt(1.5)
        frame.line.dash_style = MSO_LINE_DASH_STYLE.DASH

        self._add_text(slide, box.left, box.top + frame_h * 0.18, box.width, 1.0,
                       "□", 54, t.accent, align=PP_ALIGN.CENTER)
        self._add_text(slide, box.left + 0.5, box.top + frame_h * 0.18 + 1.1,
                       box.width - 1.0, frame_h * 0.5, description or "Image", 16,
                       t.text_dark, italic=True, align=PP_ALIGN.CENTER)
        self._add_text(slide, box.left, box.top + frame_h + 0.1, box.width, 0.5,
                       caption, 13, pal.muted, align=PP_ALIGN.CENTER)

    def _fill_summary(self, slide, data: Slide, box: _Box) -> None:
        t = self._theme
        cta = extract_call_to_action(data)
        list_h = box.height - (0.9 if cta else 0)
        self._add_bullet_list(slide, box.left, box.top, box.width, list_h,
                              extract_takeaways(data) or extract_items(data),
                              box.palette.text, marker=CHECK_MARKER)
        if cta:
            self._add_rect(slide, box.left, box.top + list_h + 0.1, box.width, 0.7, t.accent,
                           shape=MSO_SHAPE.ROUNDED_RECTANGLE)
            self._add_text(slide, box.left + 0.2, box.top + list_h + 0.15, box.width - 0.4, 0.6,
                           cta, 16, self._on_fill(t.accent), bold=True,
                           align=PP_ALIGN.CENTER, anchor=MSO_ANCHOR.MIDDLE)

    # ── General Builders ────────────────────────────────────

    def _build_header_card(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_generic(slide, data, self._frame_header_card(slide, data, a))

    def _build_dark_banner(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_generic(slide, data, self._frame_dark_banner(slide, data, a))

    def _build_icon_emphasis(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_generic(slide, data, self._frame_icon_emphasis(slide, data, a))

    def _build_bullets_header_card(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_bullets(slide, data, self._frame_header_card(slide, data, a))

    def _build_bullets_dark_banner(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_bullets(slide, data, self._frame_dark_banner(slide, data, a), numbered=True)

    def _build_bullets_icon_emphasis(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_bullets(slide, data, self._frame_icon_emphasis(slide, data, a),
                           marker=ARROW_MARKER)

    def _build_table_header_card(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_table(slide, data, self._frame_header_card(slide, data, a))

    def _build_table_dark_banner(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_table(slide, data, self._frame_dark_banner(slide, data, a))

    def _build_table_icon_emphasis(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_table(slide, data, self._frame_icon_emphasis(slide, data, a))

    def _build_image_header_card(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_image(slide, data, self._frame_header_card(slide, data, a))

    def _build_image_dark_banner(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_image(slide, data, self._frame_dark_banner(slide, data, a))

    def _build_image_icon_emphasis(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_image(slide, data, self._frame_icon_emphasis(slide, data, a))

    def _build_summary_header_card(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_summary(slide, data, self._frame_header_card(slide, data, a))

    def _build_summary_dark_banner(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_summary(slide, data, self._frame_dark_banner(slide, data, a))

    def _build_summary_icon_emphasis(self, slide, data: Slide, a: TemplateAssignment) -> None:
        self._fill_summary(slide, data, self._frame_icon_emphasis(slide, data, a))

    # ── Fallback ────────────────────────────────────────────

    def _build_fallback(self, slide, data: Slide, a: TemplateAssignment) -> None:
        """Single-column dump of whatever fields the slide carried."""
        pal = self._palette(False)
        self._set_background(slide, pal.bg)
        self._add_header_band(slide, extract_title(data) or f"Slide {a.index + 1}")
        self._add_bullet_list(slide, 0.7, 1.6, self._w - 1.4, self._h - 2.3,
                              fallback_lines(data), pal.text, size=12)
