"""
generators/page_renderer.py — Page-based PDF renderer using matplotlib.
Each slide is drawn on its own 16:9 figure in inch coordinates (origin top
left, y grows downward) and appended to a PdfPages document. Shares the
template vocabulary of the PPTX renderer but none of its drawing code.
"""

from __future__ import annotations

import io
import textwrap
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.colors as mcolors
import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
import numpy as np

from config import Settings, get_settings
from engine.layout_dispatcher import (
    CENTERED_DIVIDER, CLOSING, DARK_BANNER, HEADER_CARD, HERO, ICON_EMPHASIS,
    QUOTE_CARD, QUOTE_PANEL, STAT_COLUMNS, TWO_COLUMN, surface_is_dark,
)
from engine.pipeline_logger import PipelineLogger
from generators.colors import lighten, pick_darkest
from generators.slide_types import (
    extract_call_to_action, extract_columns, extract_footer, extract_icon_override,
    extract_image, extract_items, extract_quote, extract_stats, extract_subtitle,
    extract_table, extract_takeaways, extract_title, fallback_lines,
    require_known_type, slide_kind,
)
from generators.themes import ResolvedTheme
from models import Deck, Slide, SlideOutcome, SlideType, TemplateAssignment

# ── Layout Constants (inches) ─────────────────────────────────
HEADER_BAND_HEIGHT = 1.25
HEADER_UNDERLINE = 0.05
CARD_TOP_BORDER = 0.06
CARD_SHADOW_OFFSET = 0.06
ACCENT_BAR_WIDTH = 0.06
STAT_GAP = 0.3
STAT_TOTAL_WIDTH = 12.3
STAT_TOP = 1.55
STAT_HEIGHT = 5.55

LINE_SPACING = 1.3
# Average glyph width as a fraction of the font size, used for wrapping
GLYPH_WIDTH = 0.52
SYMBOL_FONT = "DejaVu Sans"

Layout = Callable[[object, Slide, TemplateAssignment], None]


class _Palette(NamedTuple):
    bg: str
    text: str
    heading: str
    muted: str


class _Box(NamedTuple):
    left: float
    top: float
    width: float
    height: float
    palette: _Palette


def _wrap(text: str, width: float, size: float) -> List[str]:
    """Greedy word wrap for a column *width* inches wide at *size* points."""
    chars = max(8, int(width * 72 / (size * GLYPH_WIDTH)))
    lines: List[str] = []
    for para in text.splitlines() or [""]:
        lines.extend(textwrap.wrap(para, chars) or [""])
    return lines


def _line_height(size: float) -> float:
    return size * LINE_SPACING / 72


def _fit_size(text: str, width: float, height: float, size: float, min_size: float = 9) -> float:
    """Largest size <= *size* at which *text* wraps into *height* inches."""
    while size > min_size and len(_wrap(text, width, size)) * _line_height(size) > height:
        size -= 1
    return size


class PageDeckRenderer:
    """Draws a parsed Deck as a paginated PDF, one page per slide."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._log = PipelineLogger("PageRenderer")
        self._w = self._settings.slide_width_inches
        self._h = self._settings.slide_height_inches

        # Per-pass state
        self._theme: Optional[ResolvedTheme] = None
        self._doc_title: str = ""
        self._total_slides: int = 0

        self._layouts: Dict[str, Layout] = {
            HERO: self._layout_hero,
            CLOSING: self._layout_closing,
            CENTERED_DIVIDER: self._layout_divider,
            QUOTE_PANEL: self._layout_quote_panel,
            QUOTE_CARD: self._layout_quote_card,
            TWO_COLUMN: self._layout_two_column,
            STAT_COLUMNS: self._layout_stat_columns,
            HEADER_CARD: self._layout_header_card,
            DARK_BANNER: self._layout_dark_banner,
            ICON_EMPHASIS: self._layout_icon_emphasis,
        }
        self._glyphs: Dict[SlideType, Callable] = {
            SlideType.TITLE: self._glyph_star,
            SlideType.SECTION_DIVIDER: self._glyph_diamond,
            SlideType.BULLETS: self._glyph_list,
            SlideType.QUOTE: self._glyph_quote,
            SlideType.TWO_COLUMN: self._glyph_columns,
            SlideType.STATISTICS: self._glyph_arrow,
            SlideType.TABLE: self._glyph_grid,
            SlideType.IMAGE_PLACEHOLDER: self._glyph_picture,
            SlideType.SUMMARY: self._glyph_check,
        }

    # ── Entry Point ─────────────────────────────────────────

    def render(
        self,
        deck: Deck,
        theme: ResolvedTheme,
        plan: Sequence[TemplateAssignment],
        document_title: str = "",
    ) -> Tuple[bytes, List[SlideOutcome]]:
        """Render every slide to one PDF page; returns bytes plus outcomes."""
        self._log.action("Render PDF", f"slides={len(deck.slides)}, theme={theme.id}")

        self._theme = theme
        self._doc_title = document_title or self._settings.default_document_title
        self._total_slides = len(deck.slides)

        outcomes: List[SlideOutcome] = []
        buf = io.BytesIO()
        metadata = {"Title": self._doc_title, "Author": self._settings.document_author}
        with PdfPages(buf, metadata=metadata) as pdf:
            for data, assignment in zip(deck.slides, plan):
                fig, outcome = self._render_page(data, assignment)
                try:
                    pdf.savefig(fig)
                finally:
                    plt.close(fig)
                outcomes.append(outcome)

        fallbacks = sum(1 for o in outcomes if o.fallback)
        self._log.info(f"PDF rendered: {len(outcomes)} pages ({fallbacks} fallback)")
        return buf.getvalue(), outcomes

    def _render_page(self, data: Slide, assignment: TemplateAssignment):
        fig, ax = self._new_page()
        try:
            require_known_type(data)
            self._layouts[assignment.template](ax, data, assignment)
            # Lay the text out now so drawing errors surface inside the guard
            fig.canvas.draw()
        except Exception as e:
            plt.close(fig)
            self._log.warning(
                f"Page {assignment.index + 1} ({assignment.slide_type or 'untyped'}, "
                f"{assignment.template}) fell back to field dump: {e}"
            )
            fig, ax = self._new_page()
            self._layout_fallback(ax, data, assignment)
            return fig, SlideOutcome(
                index=assignment.index, slide_type=assignment.slide_type,
                template=assignment.template, fallback=True, error=str(e),
            )
        return fig, SlideOutcome(
            index=assignment.index, slide_type=assignment.slide_type, template=assignment.template,
        )

    # ── Figure Helpers ───────────────────────────────────────

    def _new_page(self):
        """A slide-sized figure whose single axes spans it in inch units."""
        fig = plt.figure(figsize=(self._w, self._h))
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, self._w)
        ax.set_ylim(self._h, 0)
        ax.axis("off")
        return fig, ax

    def _palette(self, dark: bool) -> _Palette:
        t = self._theme
        if dark:
            return _Palette(t.dark_bg, t.text_light, t.text_light, lighten(t.dark_bg, 0.6))
        return _Palette(t.light_bg, t.text_dark, t.primary, t.text_muted)

    def _on_fill(self, fill: str) -> str:
        t = self._theme
        return t.text_light if pick_darkest([fill, t.text_dark]) == fill else t.text_dark

    def _background(self, ax, color: str) -> None:
        ax.figure.patch.set_facecolor(color)
        self._rect(ax, 0, 0, self._w, self._h, color, zorder=0)

    def _gradient_background(self, ax, start: str, end: str) -> None:
        """Vertical two-stop gradient, as on the PPTX title slides."""
        ax.figure.patch.set_facecolor(start)
        gradient = np.linspace(0, 1, 256).reshape(-1, 1)
        gradient = np.hstack([gradient] * 16)
        cmap = mcolors.LinearSegmentedColormap.from_list("page_grad", [start, end])
        ax.imshow(
            gradient, aspect="auto", cmap=cmap,
            extent=[0, self._w, self._h, 0], zorder=0,
        )
        ax.set_xlim(0, self._w)
        ax.set_ylim(self._h, 0)

    @staticmethod
    def _rect(ax, left: float, top: float, width: float, height: float, color: str,
              zorder: float = 1, edgecolor: str = "none", **kwargs) -> mpatches.Rectangle:
        rect = mpatches.Rectangle(
            (left, top), width, height,
            facecolor=color, edgecolor=edgecolor, zorder=zorder, **kwargs,
        )
        ax.add_patch(rect)
        return rect

    def _text(
        self,
        ax,
        x: float,
        y: float,
        width: float,
        text: str,
        size: float,
        color: str,
        bold: bool = False,
        italic: bool = False,
        heading: bool = False,
        ha: str = "left",
        va: str = "top",
        max_height: Optional[float] = None,
    ) -> float:
        """Wrapped text block; returns the y just below it (y for empty text)."""
        if not text:
            return y
        t = self._theme
        if max_height is not None:
            size = _fit_size(text, width, max_height, size)
        lines = _wrap(text, width, size)
        if max_height is not None:
            lines = lines[:max(1, int(max_height / _line_height(size)))]
        ax.text(
            x, y, "\n".join(lines),
            fontsize=size, color=color, ha=ha, va=va,
            fontweight="bold" if bold else "normal",
            fontstyle="italic" if italic else "normal",
            fontfamily=[t.heading_font if heading else t.body_font, SYMBOL_FONT],
            linespacing=LINE_SPACING, parse_math=False, zorder=5,
        )
        return y + len(lines) * _line_height(size)

    def _bullets(
        self,
        ax,
        left: float,
        top: float,
        width: float,
        height: float,
        items: Sequence[str],
        color: str,
        marker: str = "●",
        numbered: bool = False,
        size: Optional[float] = None,
    ) -> None:
        if not items:
            return
        t = self._theme
        text_w = width - 0.45
        size = size or (18 if len(items) <= 4 else 15 if len(items) <= 7 else 12)
        while size > 9:
            needed = sum(len(_wrap(i, text_w, size)) * _line_height(size) + size * 0.6 / 72
                         for i in items)
            if needed <= height:
                break
            size -= 1

        y = top
        for i, item in enumerate(items):
            if y >= top + height:
                break
            ax.text(
                left, y + 0.02, f"{i + 1:02d}" if numbered else marker,
                fontsize=size * (0.8 if numbered else 0.6), color=t.accent,
                fontweight="bold", ha="left", va="top",
                fontfamily=SYMBOL_FONT, parse_math=False, zorder=5,
            )
            y = self._text(ax, left + 0.45, y, text_w, item, size, color)
            y += size * 0.6 / 72

    def _card_panel(self, ax, left: float, top: float, width: float, height: float) -> None:
        """Card with drop shadow, hairline border and accent top border."""
        t = self._theme
        self._rect(ax, left + CARD_SHADOW_OFFSET, top + CARD_SHADOW_OFFSET, width, height,
                   lighten(t.text_dark, 0.78), zorder=1)
        self._rect(ax, left, top, width, height, t.card_bg, zorder=2,
                   edgecolor=lighten(t.text_dark, 0.85), linewidth=0.75)
        self._rect(ax, left, top, width, CARD_TOP_BORDER, t.card_border_top, zorder=3)

    def _left_accent_bar(self, ax) -> None:
        self._rect(ax, 0, 0, ACCENT_BAR_WIDTH, self._h, self._theme.accent, zorder=3)

    def _edge_strips(self, ax) -> None:
        t = self._theme
        self._rect(ax, 0, 0, self._w, 0.08, t.accent, zorder=3)
        self._rect(ax, 0, self._h - 0.12, self._w, 0.12, t.accent, zorder=3)

    def _header_band(self, ax, title: str) -> None:
        t = self._theme
        self._rect(ax, 0, 0, self._w, HEADER_BAND_HEIGHT, t.dark_bg, zorder=2)
        self._rect(ax, 0, HEADER_BAND_HEIGHT, self._w, HEADER_UNDERLINE, t.accent, zorder=3)
        if title:
            size = _fit_size(title, self._w - 1.4, 0.9, 26, min_size=14)
            self._text(ax, 0.7, HEADER_BAND_HEIGHT / 2, self._w - 1.4,
                       _wrap(title, self._w - 1.4, size)[0], size, t.text_light,
                       bold=True, heading=True, va="center")

    def _heading(self, ax, left: float, top: float, width: float, title: str,
                 color: str, size: float = 28) -> None:
        if not title:
            return
        self._text(ax, left, top + 0.85, width, title, size, color,
                   bold=True, heading=True, va="bottom", max_height=0.85)
        self._rect(ax, left, top + 0.92, 1.6, 0.05, self._theme.accent, zorder=3)

    def _footer(self, ax, data: Slide, a: TemplateAssignment, color: str) -> None:
        y = self._h - 0.25
        footer = extract_footer(data)
        if footer:
            self._text(ax, 0.7, y, self._w - 3.5, footer, 9, color, va="bottom")
        self._text(ax, self._w - 0.7, y, 2.0, f"{a.index + 1} / {self._total_slides}",
                   9, color, ha="right", va="bottom")

    # ── Icon Glyphs ─────────────────────────────────────────

    def _icon_badge(self, ax, cx: float, cy: float, r: float, data: Slide) -> None:
        """Accent disc with a vector glyph for the slide type (or the override text)."""
        t = self._theme
        ink = self._on_fill(t.accent)
        ax.add_patch(mpatches.Circle((cx, cy), r, facecolor=t.accent, edgecolor="none", zorder=3))
        override = extract_icon_override(data)
        if override:
            ax.text(cx, cy, override, fontsize=r * 60, color=ink, ha="center",
                    va="center", fontfamily=SYMBOL_FONT, parse_math=False, zorder=4)
            return
        glyph = self._glyphs.get(slide_kind(data))
        if glyph is not None:
            glyph(ax, cx, cy, r * 0.55, ink)

    @staticmethod
    def _poly(ax, points, color: str) -> None:
        ax.add_patch(mpatches.Polygon(points, closed=True, facecolor=color,
                                      edgecolor="none", zorder=4))

    def _glyph_star(self, ax, cx, cy, s, color) -> None:
        pts = []
        for k in range(8):
            angle = np.pi / 2 + k * np.pi / 4
            rad = s if k % 2 == 0 else s * 0.35
            pts.append((cx + rad * np.cos(angle), cy - rad * np.sin(angle)))
        self._poly(ax, pts, color)

    def _glyph_diamond(self, ax, cx, cy, s, color) -> None:
        self._poly(ax, [(cx, cy - s), (cx + s, cy), (cx, cy + s), (cx - s, cy)], color)

    def _glyph_list(self, ax, cx, cy, s, color) -> None:
        for k in (-1, 0, 1):
            y = cy + k * s * 0.6
            ax.add_patch(mpatches.Circle((cx - s * 0.8, y), s * 0.13, facecolor=color,
                                         edgecolor="none", zorder=4))
            self._rect(ax, cx - s * 0.5, y - s * 0.08, s * 1.4, s * 0.16, color, zorder=4)

    def _glyph_quote(self, ax, cx, cy, s, color) -> None:
        ax.text(cx, cy + s * 0.35, "“", fontsize=s * 150, color=color, ha="center",
                va="center", fontfamily=SYMBOL_FONT, fontweight="bold",
                parse_math=False, zorder=4)

    def _glyph_columns(self, ax, cx, cy, s, color) -> None:
        self._rect(ax, cx - s * 0.9, cy - s * 0.8, s * 0.75, s * 1.6, color, zorder=4)
        self._rect(ax, cx + s * 0.15, cy - s * 0.8, s * 0.75, s * 1.6, color, zorder=4)

    def _glyph_arrow(self, ax, cx, cy, s, color) -> None:
        self._poly(ax, [(cx, cy - s), (cx + s * 0.8, cy), (cx - s * 0.8, cy)], color)
        self._rect(ax, cx - s * 0.25, cy, s * 0.5, s, color, zorder=4)

    def _glyph_grid(self, ax, cx, cy, s, color) -> None:
        cell = s * 0.55
        for row in range(3):
            for col in range(3):
                self._rect(ax, cx - s * 0.9 + col * (cell + s * 0.075),
                           cy - s * 0.9 + row * (cell + s * 0.075),
                           cell, cell, color, zorder=4)

    def _glyph_picture(self, ax, cx, cy, s, color) -> None:
        ax.add_patch(mpatches.Circle((cx + s * 0.45, cy - s * 0.45), s * 0.25,
                                     facecolor=color, edgecolor="none", zorder=4))
        self._poly(ax, [(cx - s, cy + s * 0.7), (cx - s * 0.2, cy - s * 0.3),
                        (cx + s * 0.3, cy + s * 0.2), (cx + s * 0.6, cy - s * 0.05),
                        (cx + s, cy + s * 0.7)], color)

    def _glyph_check(self, ax, cx, cy, s, color) -> None:
        ax.plot([cx - s * 0.8, cx - s * 0.2, cx + s * 0.9],
                [cy, cy + s * 0.6, cy - s * 0.7],
                color=color, linewidth=s * 14, solid_capstyle="round",
                solid_joinstyle="round", zorder=4)

    # ── Structural Layouts ──────────────────────────────────

    def _layout_hero(self, ax, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._gradient_background(ax, t.dark_bg, lighten(t.dark_bg, 0.12))
        self._edge_strips(ax)
        self._icon_badge(ax, self._w / 2, 1.45, 0.45, data)
        self._text(ax, self._w / 2, 4.0, self._w - 2.0, extract_title(data) or self._doc_title,
                   40, pal.heading, bold=True, heading=True, ha="center", va="bottom",
                   max_height=1.9)
        self._rect(ax, self._w / 2 - 1.5, 4.2, 3.0, 0.06, t.accent, zorder=3)
        self._text(ax, self._w / 2, 4.5, self._w - 3.0, extract_subtitle(data), 18,
                   pal.muted, ha="center", max_height=1.3)
        self._footer(ax, data, a, pal.muted)

    def _layout_closing(self, ax, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._gradient_background(ax, lighten(t.dark_bg, 0.12), t.dark_bg)
        self._edge_strips(ax)
        self._text(ax, self._w / 2, 2.0, self._w - 2.0, extract_title(data) or "Thank You",
                   38, pal.heading, bold=True, heading=True, ha="center", va="bottom",
                   max_height=1.3)
        self._rect(ax, self._w / 2 - 1.5, 2.1, 3.0, 0.06, t.accent, zorder=3)

        takeaways = (extract_takeaways(data) or extract_items(data))[:5]
        self._bullets(ax, 2.2, 2.45, self._w - 4.4, 3.0, takeaways, pal.text, marker="✓")

        cta = extract_call_to_action(data)
        if cta:
            ax.add_patch(mpatches.FancyBboxPatch(
                (self._w / 2 - 3.4, 5.7), 6.8, 0.7,
                boxstyle="round,pad=0.05,rounding_size=0.2",
                facecolor=t.accent, edgecolor="none", zorder=3,
            ))
            self._text(ax, self._w / 2, 6.05, 6.4, cta, 16, self._on_fill(t.accent),
                       bold=True, ha="center", va="center", max_height=0.6)
        else:
            self._text(ax, self._w / 2, 5.7, self._w - 4.0, extract_subtitle(data), 16,
                       pal.muted, ha="center", max_height=0.8)

    def _layout_divider(self, ax, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._background(ax, pal.bg)
        self._rect(ax, 0, 0, ACCENT_BAR_WIDTH * 2, self._h, t.accent, zorder=3)
        self._icon_badge(ax, self._w / 2, 2.1, 0.42, data)
        self._text(ax, self._w / 2, 3.55, self._w - 2.0, extract_title(data), 36,
                   pal.heading, bold=True, heading=True, ha="center", va="center",
                   max_height=1.4)
        self._rect(ax, self._w / 2 - 1.0, 4.4, 2.0, 0.05, t.accent, zorder=3)
        self._text(ax, self._w / 2, 4.65, self._w - 4.0, extract_subtitle(data), 16,
                   pal.muted, ha="center", max_height=1.2)
        self._footer(ax, data, a, pal.muted)

    def _layout_quote_panel(self, ax, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(True)
        self._background(ax, pal.bg)
        self._left_accent_bar(ax)
        quote, attribution = extract_quote(data)
        ax.text(1.0, 0.6, "“", fontsize=110, color=t.accent, ha="left", va="top",
                fontfamily=SYMBOL_FONT, parse_math=False, zorder=4)
        self._text(ax, self._w / 2, 3.45, self._w - 3.2, quote or extract_title(data), 26,
                   pal.text, italic=True, heading=True, ha="center", va="center",
                   max_height=3.0)
        self._rect(ax, self._w / 2 - 0.8, 5.2, 1.6, 0.05, t.accent, zorder=3)
        if attribution:
            self._text(ax, self._w / 2, 5.45, self._w - 3.2, f"— {attribution}", 16,
                       t.accent, ha="center")
        self._footer(ax, data, a, pal.muted)

    def _layout_quote_card(self, ax, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(False)
        self._background(ax, pal.bg)
        quote, attribution = extract_quote(data)
        title = extract_title(data)
        card_top = 1.3 if title and quote else 0.9
        if quote:
            self._text(ax, 1.5, 0.45, self._w - 3.0, title, 22, pal.heading,
                       bold=True, heading=True, max_height=0.8)
        self._card_panel(ax, 1.5, card_top, self._w - 3.0, 5.0)
        ax.text(1.85, card_top + 0.2, "“", fontsize=72, color=t.accent, ha="left", va="top",
                fontfamily=SYMBOL_FONT, parse_math=False, zorder=4)
        self._text(ax, 2.4, card_top + 2.4, self._w - 4.8, quote or title, 22, pal.text,
                   italic=True, heading=True, va="center", max_height=2.8)
        if attribution:
            self._text(ax, self._w - 2.4, card_top + 4.2, self._w - 4.8, f"— {attribution}",
                       14, pal.muted, ha="right")
        self._footer(ax, data, a, pal.muted)

    def _layout_two_column(self, ax, data: Slide, a: TemplateAssignment) -> None:
        pal = self._palette(False)
        self._background(ax, pal.bg)
        self._heading(ax, 0.6, 0.25, self._w - 1.2, extract_title(data), pal.heading)

        left_title, left_items, right_title, right_items = extract_columns(data)
        col_w = (self._w - 1.2 - 0.4) / 2
        for i, (col_title, items) in enumerate(((left_title, left_items), (right_title, right_items))):
            if not col_title and not items:
                continue
            left = 0.6 + i * (col_w + 0.4)
            self._card_panel(ax, left, 1.6, col_w, 5.2)
            y = self._text(ax, left + 0.3, 1.85, col_w - 0.6, col_title, 18, pal.heading,
                           bold=True, heading=True, max_height=0.6)
            self._bullets(ax, left + 0.3, max(y, 1.85) + 0.2, col_w - 0.6, 4.3, items, pal.text)
        self._footer(ax, data, a, pal.muted)

    def _layout_stat_columns(self, ax, data: Slide, a: TemplateAssignment) -> None:
        t = self._theme
        pal = self._palette(False)
        self._background(ax, pal.bg)
        self._heading(ax, 0.5, 0.15, self._w - 1.0, extract_title(data), pal.heading)

        stats = extract_stats(data, limit=self._settings.max_stat_cards)
        if not stats:
            items = extract_items(data)
            if items:
                self._card_panel(ax, 0.5, STAT_TOP, self._w - 1.0, 5.3)
                self._bullets(ax, 0.9, STAT_TOP + 0.35, self._w - 1.8, 4.7, items, pal.text)
            return

        n = len(stats)
        col_w = (STAT_TOTAL_WIDTH - (n - 1) * STAT_GAP) / n
        fills = (t.primary, t.secondary, t.accent)
        for i, (value, label) in enumerate(stats):
            left = 0.5 + i * (col_w + STAT_GAP)
            fill = fills[i % len(fills)]
            ink = self._on_fill(fill)
            self._rect(ax, left, STAT_TOP, col_w, STAT_HEIGHT, fill, zorder=2)
            self._text(ax, left + col_w / 2, STAT_TOP + STAT_HEIGHT * 0.48, col_w - 0.3,
                       value, 40 if len(value) <= 6 else 28, ink, bold=True, heading=True,
                       ha="center", va="bottom", max_height=STAT_HEIGHT * 0.3)
            self._rect(ax, left + col_w / 2 - 0.4, STAT_TOP + STAT_HEIGHT * 0.52, 0.8, 0.05,
                       t.card_border_top if fill != t.accent else ink, zorder=3)
            self._text(ax, left + col_w / 2, STAT_TOP + STAT_HEIGHT * 0.58, col_w - 0.4,
                       label, 15, ink, ha="center", max_height=STAT_HEIGHT * 0.35)

    # ── General Layouts ─────────────────────────────────────

    def _layout_header_card(self, ax, data: Slide, a: TemplateAssignment) -> None:
        pal = self._palette(False)
        self._background(ax, pal.bg)
        self._header_band(ax, extract_title(data))
        self._card_panel(ax, 0.6, 1.65, self._w - 1.2, self._h - 2.45)
        self._footer(ax, data, a, pal.muted)
        self._body(ax, data, _Box(0.95, 1.95, self._w - 1.9, self._h - 3.0, pal), split=True)

    def _layout_dark_banner(self, ax, data: Slide, a: TemplateAssignment) -> None:
        pal = self._palette(True)
        self._background(ax, pal.bg)
        self._left_accent_bar(ax)
        self._heading(ax, 0.8, 0.3, self._w - 1.6, extract_title(data), pal.heading)
        self._footer(ax, data, a, pal.muted)
        self._body(ax, data, _Box(0.9, 1.65, self._w - 1.8, self._h - 2.4, pal), numbered=True)

    def _layout_icon_emphasis(self, ax, data: Slide, a: TemplateAssignment) -> None:
        pal = self._palette(surface_is_dark(a.template, a.slide_type, self._theme))
        self._background(ax, pal.bg)
        self._icon_badge(ax, 1.6, 1.5, 0.8, data)
        self._heading(ax, 2.8, 0.6, self._w - 3.6, extract_title(data), pal.heading)
        self._footer(ax, data, a, pal.muted)
        self._body(ax, data, _Box(2.8, 2.0, self._w - 3.6, self._h - 2.75, pal), marker="▸")

    def _body(self, ax, data: Slide, box: _Box, split: bool = False, **style) -> None:
        """Body content of a general layout, shaped by the slide type."""
        kind = slide_kind(data)
        if kind is SlideType.TABLE and self._table(ax, data, box):
            return
        if kind is SlideType.IMAGE_PLACEHOLDER:
            self._image_placeholder(ax, data, box)
            return
        if kind is SlideType.SUMMARY:
            self._summary(ax, data, box)
            return

        items = extract_items(data)
        subtitle = "" if kind is SlideType.BULLETS else extract_subtitle(data)
        body_h = box.height - (0.7 if subtitle else 0)
        if split and kind is SlideType.BULLETS and len(items) > 5:
            half = (len(items) + 1) // 2
            col_w = (box.width - 0.4) / 2
            self._bullets(ax, box.left, box.top, col_w, body_h, items[:half],
                          box.palette.text, size=15)
            self._bullets(ax, box.left + col_w + 0.4, box.top, col_w, body_h, items[half:],
                          box.palette.text, size=15)
        else:
            if kind is not SlideType.BULLETS:
                style = {}
            self._bullets(ax, box.left, box.top, box.width, body_h, items,
                          box.palette.text, **style)
        self._text(ax, box.left, box.top + body_h + 0.1, box.width, subtitle, 14,
                   box.palette.muted, italic=True, max_height=0.6)

    def _table(self, ax, data: Slide, box: _Box) -> bool:
        """Draw the slide's table; False when there is nothing to tabulate."""
        t = self._theme
        headers, rows = extract_table(data, max_rows=self._settings.max_table_rows)
        n_cols = len(headers) or max((len(r) for r in rows), default=0)
        if n_cols == 0:
            return False

        _, caption = extract_image(data)
        grid = ([headers] if headers else []) + rows
        avail = box.height - (0.5 if caption else 0)
        row_h = min(0.5, avail / len(grid))
        col_w = box.width / n_cols
        size = 12 if row_h >= 0.4 else 9

        for r, row in enumerate(grid):
            is_header = bool(headers) and r == 0
            body_idx = r - (1 if headers else 0)
            fill = t.dark_bg if is_header else (t.light_bg if body_idx % 2 == 0 else t.card_bg)
            y = box.top + r * row_h
            self._rect(ax, box.left, y, box.width, row_h, fill, zorder=3,
                       edgecolor=lighten(t.text_dark, 0.85), linewidth=0.5)
            for c in range(n_cols):
                cell = row[c] if c < len(row) else ""
                limit = max(4, int(col_w * 72 / (size * GLYPH_WIDTH)) - 1)
                if len(cell) > limit:
                    cell = cell[:limit - 1] + "…"
                centered = c > 0 or is_header
                ax.text(
                    box.left + c * col_w + (col_w / 2 if centered else 0.1),
                    y + row_h / 2, cell,
                    fontsize=size, color=t.text_light if is_header else t.text_dark,
                    fontweight="bold" if is_header or c == 0 else "normal",
                    ha="center" if centered else "left", va="center",
                    fontfamily=[t.heading_font if is_header else t.body_font, SYMBOL_FONT],
                    parse_math=False, zorder=5,
                )
        if caption:
            self._text(ax, box.left, box.top + len(grid) * row_h + 0.12, box.width, caption,
                       10, box.palette.muted, italic=True, max_height=0.35)
        return True

    def _image_placeholder(self, ax, data: Slide, box: _Box) -> None:
        t = self._theme
        description, caption = extract_image(data)
        dark = box.palette.bg == t.dark_bg
        frame_h = box.height - (0.6 if caption else 0)
        ax.add_patch(mpatches.FancyBboxPatch(
            (box.left, box.top), box.width, frame_h,
            boxstyle="round,pad=0,rounding_size=0.15",
            facecolor=lighten(t.dark_bg, 0.85) if dark else t.light_bg,
            edgecolor=t.accent, linewidth=1.5, linestyle="--", zorder=3,
        ))
        cx = box.left + box.width / 2
        self._glyph_picture(ax, cx, box.top + frame_h * 0.3, 0.45, t.accent)
        self._text(ax, cx, box.top + frame_h * 0.3 + 0.75, box.width - 1.0,
                   description or "Image", 15, t.text_dark, italic=True, ha="center",
                   max_height=frame_h * 0.5)
        self._text(ax, cx, box.top + frame_h + 0.12, box.width, caption, 12,
                   box.palette.muted, ha="center", max_height=0.45)

    def _summary(self, ax, data: Slide, box: _Box) -> None:
        t = self._theme
        cta = extract_call_to_action(data)
        list_h = box.height - (0.9 if cta else 0)
        self._bullets(ax, box.left, box.top, box.width, list_h,
                      extract_takeaways(data) or extract_items(data),
                      box.palette.text, marker="✓")
        if cta:
            ax.add_patch(mpatches.FancyBboxPatch(
                (box.left, box.top + list_h + 0.1), box.width, 0.7,
                boxstyle="round,pad=0,rounding_size=0.15",
                facecolor=t.accent, edgecolor="none", zorder=3,
            ))
            self._text(ax, box.left + box.width / 2, box.top + list_h + 0.45,
                       box.width - 0.4, cta, 15, self._on_fill(t.accent), bold=True,
                       ha="center", va="center", max_height=0.6)

    # ── Fallback ────────────────────────────────────────────

    def _layout_fallback(self, ax, data: Slide, a: TemplateAssignment) -> None:
        """Plain field dump on a light page, used when a layout fails."""
        pal = self._palette(False)
        self._background(ax, pal.bg)
        self._header_band(ax, extract_title(data) or f"Slide {a.index + 1}")
        self._bullets(ax, 0.7, 1.6, self._w - 1.4, self._h - 2.3,
                      fallback_lines(data), pal.text, size=12)
