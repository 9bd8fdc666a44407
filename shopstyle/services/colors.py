"""Colour conversions and WCAG contrast maths."""

import re
from typing import NamedTuple


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class RGBA(NamedTuple):
    r: int
    g: int
    b: int
    a: float = 1.0


OPAQUE_BLACK = RGBA(0, 0, 0, 1.0)
OPAQUE_WHITE = RGB(255, 255, 255)

RGB_STRING_RE = re.compile(
    r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*(\d*\.?\d+)\s*)?\)",
    re.IGNORECASE,
)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def parse_rgb_string(value: str) -> RGBA:
    """Parse ``rgb(r, g, b)`` / ``rgba(r, g, b, a)``.

    Anything that doesn't look like either form comes back as opaque black.
    """
    match = RGB_STRING_RE.search(value or "")
    if not match:
        return OPAQUE_BLACK
    r, g, b, a = match.groups()
    return RGBA(int(r), int(g), int(b), float(a) if a else 1.0)


def parse_hex_color(value: str) -> RGB:
    """Parse ``#rgb`` or ``#rrggbb`` (the ``#`` is optional)."""
    c = value.strip().lstrip("#")
    if len(c) == 3:
        c = "".join(ch * 2 for ch in c)
    return RGB(int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16))


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color) -> float:
    r, g, b = color[0], color[1], color[2]
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def contrast_ratio(fg, bg) -> float:
    l1 = relative_luminance(fg)
    l2 = relative_luminance(bg)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)
