"""Heuristic for picking the primary call-to-action button on a page.

Each candidate starts at -1 and collects points for contrast against the page
background, call-to-action wording and size. Low-alpha and transparent buttons
are rejected outright so ghost buttons never win on text alone.
"""

import logging
import re
from typing import Iterable, Optional

from shopstyle.models import Candidate
from shopstyle.services.colors import (
    OPAQUE_WHITE,
    RGB,
    contrast_ratio,
    parse_hex_color,
    parse_rgb_string,
)

logger = logging.getLogger(__name__)

REJECT_SCORE = -1.0
MIN_ALPHA = 0.3

CONTRAST_WEIGHT = 3
PRIMARY_CTA_BONUS = 25
SECONDARY_CTA_BONUS = 15
COOKIE_PENALTY = 20
SIZE_BONUS = 5
SHORT_TEXT_PENALTY = 5

MIN_LARGE_WIDTH = 120
MIN_LARGE_HEIGHT = 35
MIN_TEXT_LENGTH = 3

TRANSPARENT = "transparent"

HEX_RE = re.compile(r"^#(?:[0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
PRIMARY_CTA_RE = re.compile(
    r"add\s*to\s*cart|add\s*to\s*bag|add\s*to\s*basket|buy\s*now|checkout|purchase"
    r"|subscribe|shop\s*now|get\s*started|order\s*now",
    re.IGNORECASE,
)
SECONDARY_CTA_RE = re.compile(r"add\s*to\s*wishlist", re.IGNORECASE)
COOKIE_RE = re.compile(r"accept\s*cookies|accept\s*all", re.IGNORECASE)


def _button_rgb(background_color: str) -> Optional[RGB]:
    """Resolve a button's own background, or None when it should be rejected."""
    value = (background_color or "").strip()
    if value.lower().startswith("rgb"):
        r, g, b, a = parse_rgb_string(value)
        if a < MIN_ALPHA:
            return None
        return RGB(r, g, b)
    if HEX_RE.match(value):
        return parse_hex_color(value)
    if value.lower() == TRANSPARENT:
        return None
    return OPAQUE_WHITE


def _keyword_score(text: str) -> int:
    if PRIMARY_CTA_RE.search(text):
        return PRIMARY_CTA_BONUS
    if SECONDARY_CTA_RE.search(text):
        return SECONDARY_CTA_BONUS
    if COOKIE_RE.search(text):
        return -COOKIE_PENALTY
    return 0


def score_button(candidate: Candidate, background) -> float:
    button_rgb = _button_rgb(candidate.background_color)
    if button_rgb is None:
        return REJECT_SCORE

    score = REJECT_SCORE
    score += CONTRAST_WEIGHT * contrast_ratio(button_rgb, background)

    text = candidate.text_content.strip().lower()
    score += _keyword_score(text)

    rect = candidate.bounding_rect
    if rect.width > MIN_LARGE_WIDTH and rect.height > MIN_LARGE_HEIGHT:
        score += SIZE_BONUS

    if len(text) < MIN_TEXT_LENGTH:
        score -= SHORT_TEXT_PENALTY

    return score


def pick_primary_button(candidates: Iterable[Candidate], background) -> Optional[Candidate]:
    """Highest scoring candidate; ties keep the first seen, nothing above -1 means None."""
    best = None
    best_score = REJECT_SCORE
    for candidate in candidates:
        score = score_button(candidate, background)
        if score > best_score:
            best, best_score = candidate, score

    if best is not None:
        logger.info(f"Primary button '{best.text_content[:40]}' scored {best_score:.1f}")
    return best
