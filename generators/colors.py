"""
generators/colors.py — Hex colour arithmetic shared by theme resolution
and both renderers.
Pure functions: lightening, relative luminance, darkest-of-N selection.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence, Tuple

_HEX6 = re.compile(r"^#?([0-9a-fA-F]{6})$")
_HEX3 = re.compile(r"^#?([0-9a-fA-F]{3})$")


def normalize_hex(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Coerce '#abc', 'abc', 'AABBCC' or '#aabbcc' to '#aabbcc'.

    Anything else (non-strings, named colours, bad lengths) returns *default*.
    """
    if not isinstance(value, str):
        return default
    text = value.strip()
    m = _HEX6.match(text)
    if m:
        return f"#{m.group(1).lower()}"
    m = _HEX3.match(text)
    if m:
        return "#" + "".join(ch * 2 for ch in m.group(1).lower())
    return default


def hex_to_rgb(h: str) -> Tuple[int, int, int]:
    """Convert '#RRGGBB' to an (r, g, b) tuple of 0-255 ints."""
    h = h.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def lighten(hex_color: str, factor: float) -> str:
    """Interpolate each channel toward 255 by *factor* (clamped to [0, 1])."""
    f = min(1.0, max(0.0, factor))
    r, g, b = hex_to_rgb(hex_color)
    # half-up rounding per channel
    return rgb_to_hex(
        int(r + (255 - r) * f + 0.5),
        int(g + (255 - g) * f + 0.5),
        int(b + (255 - b) * f + 0.5),
    )


def _linear(channel: int) -> float:
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_color: str) -> float:
    """Perceptual luminance in [0, 1] (sRGB, 0.2126/0.7152/0.0722 weights)."""
    r, g, b = hex_to_rgb(hex_color)
    return 0.2126 * _linear(r) + 0.7152 * _linear(g) + 0.0722 * _linear(b)


def pick_darkest(colors: Sequence[str]) -> str:
    """Return the colour with the lowest luminance; ties go to the first one."""
    if not colors:
        raise ValueError("pick_darkest() needs at least one colour")
    darkest = colors[0]
    darkest_lum = relative_luminance(darkest)
    for color in colors[1:]:
        lum = relative_luminance(color)
        if lum < darkest_lum:
            darkest, darkest_lum = color, lum
    return darkest


def contrast_ratio(a: str, b: str) -> float:
    """WCAG contrast ratio between two colours (1.0 – 21.0)."""
    la, lb = relative_luminance(a), relative_luminance(b)
    hi, lo = max(la, lb), min(la, lb)
    return (hi + 0.05) / (lo + 0.05)
