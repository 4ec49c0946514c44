"""
generators/slide_types.py — Slide type registry and field extraction helpers.
Both renderers read slide content exclusively through these helpers so the
PPTX and PDF outputs never disagree about what a slide says. Every helper
tolerates missing or mistyped fields and degrades to an empty value.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from engine.errors import SlideRenderError
from models import Slide, SlideType

# Default glyph per slide type (overridable per slide via `icon`)
SLIDE_ICONS: Dict[SlideType, str] = {
    SlideType.TITLE: "✦",              # four-pointed star
    SlideType.SECTION_DIVIDER: "❖",    # black diamond minus white X
    SlideType.BULLETS: "•",            # bullet
    SlideType.QUOTE: "“",              # left double quotation
    SlideType.TWO_COLUMN: "☷",         # trigram
    SlideType.STATISTICS: "↑",         # upwards arrow
    SlideType.TABLE: "☰",              # trigram for heaven
    SlideType.IMAGE_PLACEHOLDER: "□",  # white square
    SlideType.SUMMARY: "✓",            # check mark
}
DEFAULT_ICON = "•"

STAT_SEPARATOR = " — "
ROW_SEPARATOR = " | "


# ── Primitive Coercion ──────────────────────────────────────

def _text(value: Any) -> str:
    """Scalar → stripped string; containers and None → ''."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value).strip()


def _text_list(value: Any) -> List[str]:
    """List of scalars → list of non-empty strings; a bare string → [string]."""
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [t for t in (_text(v) for v in value) if t]


def _first(*values: Any) -> str:
    for v in values:
        t = _text(v)
        if t:
            return t
    return ""


# ── Registry ────────────────────────────────────────────────

def slide_kind(slide: Slide) -> Optional[SlideType]:
    return slide.kind


def require_known_type(slide: Slide) -> SlideType:
    """Return the slide's type or raise so the renderer falls back."""
    kind = slide.kind
    if kind is None:
        raise SlideRenderError(
            slide.slide_type,
            f"unknown slide_type {slide.slide_type!r}" if slide.slide_type else "missing slide_type",
        )
    return kind


# ── Shared Extraction ───────────────────────────────────────

def extract_title(slide: Slide) -> str:
    """First non-empty of title, heading, topic."""
    return _first(slide.title, slide.heading, slide.topic)


def extract_subtitle(slide: Slide) -> str:
    """First non-empty of subtitle, quote, attribution, call-to-action."""
    return _first(slide.subtitle, slide.quote, slide.attribution, slide.call_to_action)


def extract_icon_override(slide: Slide) -> str:
    """The slide's own `icon` text, or '' when it relies on the type default."""
    return _text(slide.icon)


def extract_icon(slide: Slide) -> str:
    override = extract_icon_override(slide)
    if override:
        return override
    kind = slide.kind
    return SLIDE_ICONS.get(kind, DEFAULT_ICON) if kind else DEFAULT_ICON


def extract_stats(slide: Slide, limit: Optional[int] = None) -> List[Tuple[str, str]]:
    """(value, label) pairs; entries may be objects or plain strings."""
    stats: List[Tuple[str, str]] = []
    raw = slide.stats if isinstance(slide.stats, list) else []
    for entry in raw:
        if isinstance(entry, dict):
            value, label = _text(entry.get("value")), _text(entry.get("label"))
        else:
            value, label = _text(entry), ""
        if value or label:
            stats.append((value, label))
    return stats[:limit] if limit else stats


def extract_table(slide: Slide, max_rows: Optional[int] = None) -> Tuple[List[str], List[List[str]]]:
    """Headers plus rows padded / truncated to the header width.

    Without headers the widest row decides the column count.
    """
    if isinstance(slide.headers, (list, tuple)):
        # Blank cells keep their position so columns stay aligned
        headers = [_text(h) for h in slide.headers]
        if not any(headers):
            headers = []
    else:
        headers = _text_list(slide.headers)
    raw_rows = slide.rows if isinstance(slide.rows, list) else []
    rows: List[List[str]] = []
    for raw in raw_rows:
        if isinstance(raw, (list, tuple)):
            rows.append([_text(c) for c in raw])
        elif isinstance(raw, dict):
            rows.append([_text(v) for v in raw.values()])
        elif _text(raw):
            rows.append([_text(raw)])
    width = len(headers) or max((len(r) for r in rows), default=0)
    rows = [(r + [""] * width)[:width] for r in rows if any(r)]
    if max_rows is not None:
        rows = rows[:max_rows]
    return headers, rows


def extract_columns(slide: Slide) -> Tuple[str, List[str], str, List[str]]:
    """(left_title, left_items, right_title, right_items)."""
    return (
        _text(slide.left_title),
        _text_list(slide.left_items),
        _text(slide.right_title),
        _text_list(slide.right_items),
    )


def extract_quote(slide: Slide) -> Tuple[str, str]:
    return _text(slide.quote), _text(slide.attribution)


def extract_image(slide: Slide) -> Tuple[str, str]:
    """(description, caption)."""
    return _text(slide.image_description), _text(slide.caption)


def extract_takeaways(slide: Slide) -> List[str]:
    return _text_list(slide.takeaways) or _text_list(slide.bullets)


def extract_call_to_action(slide: Slide) -> str:
    return _text(slide.call_to_action)


def extract_footer(slide: Slide) -> str:
    return _text(slide.footer)


def extract_items(slide: Slide) -> List[str]:
    """The slide's body as a flat list of lines, whatever its type."""
    bullets = _text_list(slide.bullets)
    if bullets:
        return bullets
    takeaways = _text_list(slide.takeaways)
    if takeaways:
        return takeaways
    stats = extract_stats(slide)
    if stats:
        return [STAT_SEPARATOR.join(p for p in pair if p) for pair in stats]
    _, left, _, right = extract_columns(slide)
    if left or right:
        return left + right
    _, rows = extract_table(slide)
    if rows:
        return [ROW_SEPARATOR.join(c for c in row if c) for row in rows]
    return [t for t in extract_image(slide) if t]


def fallback_lines(slide: Slide) -> List[str]:
    """Raw dump of every populated field, one line each."""
    lines: List[str] = []
    for key, value in slide.raw_fields().items():
        if isinstance(value, (dict, list)):
            rendered = json.dumps(value, ensure_ascii=False, default=str)
        else:
            rendered = str(value)
        if rendered.strip():
            lines.append(f"{key}: {rendered}")
    return lines or ["(this slide had no readable content)"]
