"""
generators/table_generator.py — Native PPTX tables for `table` slides.
Header row on the theme's dark surface, striped body rows, optional caption.
"""

from __future__ import annotations

from typing import Sequence

from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.slide import Slide
from pptx.util import Inches, Pt

from engine.pipeline_logger import PipelineLogger
from generators.themes import ResolvedTheme


class TableGenerator:
    """Adds a styled data table to a PPTX slide."""

    def __init__(self, theme: ResolvedTheme) -> None:
        self._log = PipelineLogger("TableGenerator")
        self._theme = theme

    @property
    def theme(self) -> ResolvedTheme:
        return self._theme

    @theme.setter
    def theme(self, t: ResolvedTheme) -> None:
        self._theme = t

    def _colors(self):
        t = self._theme
        return {
            "header_bg": t.rgb("dark_bg"),
            "header_text": t.rgb("text_light"),
            "row_even": t.rgb("light_bg"),
            "row_odd": t.rgb("card_bg"),
            "cell_text": t.rgb("text_dark"),
            "caption": t.rgb("text_muted"),
        }

    def add_table(
        self,
        slide: Slide,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        left: float = 0.7,
        top: float = 1.6,
        width: float = 11.9,
        height: float = 4.8,
        caption: str = "",
    ) -> None:
        """Add a table; *rows* must already be padded to a common width.

        Without headers the body rows start at the top of the table.
        """
        n_cols = len(headers) or max((len(r) for r in rows), default=0)
        if n_cols == 0:
            raise ValueError("table has neither headers nor rows")

        c = self._colors()
        t = self._theme
        header_rows = 1 if headers else 0
        n_rows = header_rows + len(rows)

        # Cap row height so short tables do not stretch over the whole area
        height = min(height, 0.5 * n_rows)

        table_shape = slide.shapes.add_table(
            n_rows, n_cols, Inches(left), Inches(top), Inches(width), Inches(height)
        )
        table = table_shape.table

        col_width = int(Inches(width) / n_cols)
        for col_idx in range(n_cols):
            table.columns[col_idx].width = col_width

        # ── Header Row ──────────────────────────────────────
        for col_idx, header_text in enumerate(headers):
            cell = table.cell(0, col_idx)
            cell.text = header_text
            self._style_cell(
                cell,
                font_size=Pt(13),
                font_bold=True,
                font_color=c["header_text"],
                fill_color=c["header_bg"],
                alignment=PP_ALIGN.CENTER,
                font_name=t.heading_font,
            )

        # ── Data Rows ───────────────────────────────────────
        body_size = Pt(12) if len(rows) <= 6 else Pt(10)
        for row_idx, row_data in enumerate(rows):
            bg_color = c["row_even"] if row_idx % 2 == 0 else c["row_odd"]
            for col_idx in range(n_cols):
                cell = table.cell(row_idx + header_rows, col_idx)
                cell.text = row_data[col_idx] if col_idx < len(row_data) else ""
                self._style_cell(
                    cell,
                    font_size=body_size,
                    font_bold=col_idx == 0,
                    font_color=c["cell_text"],
                    fill_color=bg_color,
                    alignment=PP_ALIGN.LEFT if col_idx == 0 else PP_ALIGN.CENTER,
                    font_name=t.body_font,
                )

        # ── Caption ─────────────────────────────────────────
        if caption:
            txBox = slide.shapes.add_textbox(
                Inches(left), Inches(top + height + 0.1), Inches(width), Inches(0.35),
            )
            p = txBox.text_frame.paragraphs[0]
            p.text = caption
            p.font.size = Pt(10)
            p.font.italic = True
            p.font.color.rgb = c["caption"]
            p.font.name = t.body_font

        self._log.debug(f"Table added: {len(rows)} data rows x {n_cols} columns")

    @staticmethod
    def _style_cell(cell, font_size, font_bold: bool, font_color, fill_color,
                    alignment, font_name: str) -> None:
        """Apply consistent styling to a table cell."""
        for paragraph in cell.text_frame.paragraphs:
            paragraph.font.size = font_size
            paragraph.font.bold = font_bold
            paragraph.font.color.rgb = font_color
            paragraph.font.name = font_name
            paragraph.alignment = alignment

        cell.fill.solid()
        cell.fill.fore_color.rgb = fill_color
        cell.vertical_anchor = MSO_ANCHOR.MIDDLE

        cell.margin_left = Inches(0.1)
        cell.margin_right = Inches(0.1)
        cell.margin_top = Inches(0.05)
        cell.margin_bottom = Inches(0.05)

