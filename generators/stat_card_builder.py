"""
generators/stat_card_builder.py — Stat column layout for `statistics` slides.
Each (value, label) pair becomes a filled column: big number on top, label
below, with text colour picked against the fill for legibility.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.slide import Slide
from pptx.util import Inches, Pt

from engine.pipeline_logger import PipelineLogger
from generators.colors import pick_darkest
from generators.themes import ResolvedTheme, to_rgb_color

# ── Layout Constants (inches) ─────────────────────────────────
COLUMNS_LEFT = 0.5
COLUMNS_TOP = 1.55
COLUMNS_TOTAL_WIDTH = 12.3
COLUMNS_HEIGHT = 5.55
COLUMN_GAP = 0.3


class StatCardBuilder:
    """Lays out up to N stat columns across the slide body."""

    def __init__(self, theme: ResolvedTheme) -> None:
        self._log = PipelineLogger("StatCardBuilder")
        self._theme = theme

    @property
    def theme(self) -> ResolvedTheme:
        return self._theme

    @theme.setter
    def theme(self, t: ResolvedTheme) -> None:
        self._theme = t

    def column_fills(self, count: int) -> List[str]:
        """Fill colour per column, cycling primary / secondary / accent."""
        t = self._theme
        cycle = (t.primary, t.secondary, t.accent)
        return [cycle[i % len(cycle)] for i in range(count)]

    def text_color_for(self, fill: str) -> str:
        """Light text on fills darker than the body text colour, dark otherwise."""
        t = self._theme
        return t.text_light if pick_darkest([fill, t.text_dark]) == fill else t.text_dark

    def build(
        self,
        slide: Slide,
        stats: Sequence[Tuple[str, str]],
        left: float = COLUMNS_LEFT,
        top: float = COLUMNS_TOP,
        total_width: float = COLUMNS_TOTAL_WIDTH,
        height: float = COLUMNS_HEIGHT,
    ) -> None:
        """Draw one filled column per stat pair (nothing when *stats* is empty)."""
        if not stats:
            return

        n = len(stats)
        width = (total_width - (n - 1) * COLUMN_GAP) / n
        for i, ((value, label), fill) in enumerate(zip(stats, self.column_fills(n))):
            self._add_column(
                slide,
                left=left + i * (width + COLUMN_GAP),
                top=top, width=width, height=height,
                value=value, label=label, fill=fill,
            )
        self._log.debug(f"Stat columns built: {n}")

    def _add_column(
        self,
        slide: Slide,
        left: float,
        top: float,
        width: float,
        height: float,
        value: str,
        label: str,
        fill: str,
    ) -> None:
        t = self._theme
        text_rgb = to_rgb_color(self.text_color_for(fill))

        shape = slide.shapes.add_shape(
            MSO_SHAPE.RECTANGLE, Inches(left), Inches(top), Inches(width), Inches(height),
        )
        shape.fill.solid()
        shape.fill.fore_color.rgb = to_rgb_color(fill)
        shape.line.fill.background()

        # Accent rule between value and label
        rule = slide.shapes.add_shape(
            MSO_SHAPE.RECTANGLE,
            Inches(left + width / 2 - 0.4), Inches(top + height * 0.52),
            Inches(0.8), Inches(0.05),
        )
        rule.fill.solid()
        rule.fill.fore_color.rgb = t.rgb("card_border_top") if fill != t.accent else text_rgb
        rule.line.fill.background()

        # Value (large)
        val_box = slide.shapes.add_textbox(
            Inches(left + 0.15), Inches(top + height * 0.18),
            Inches(width - 0.3), Inches(height * 0.3),
        )
        tf = val_box.text_frame
        tf.word_wrap = True
        tf.vertical_anchor = MSO_ANCHOR.BOTTOM
        p = tf.paragraphs[0]
        p.text = value
        p.font.size = Pt(44 if len(value) <= 6 else 32)
        p.font.bold = True
        p.font.color.rgb = text_rgb
        p.font.name = t.heading_font
        p.alignment = PP_ALIGN.CENTER

        # Label (below the rule)
        if label:
            label_box = slide.shapes.add_textbox(
                Inches(left + 0.2), Inches(top + height * 0.58),
                Inches(width - 0.4), Inches(height * 0.35),
            )
            tf = label_box.text_frame
            tf.word_wrap = True
            p = tf.paragraphs[0]
            p.text = label
            p.font.size = Pt(16)
            p.font.color.rgb = text_rgb
            p.font.name = t.body_font
            p.alignment = PP_ALIGN.CENTER
