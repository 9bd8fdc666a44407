import logging

from pydantic import ValidationError

from shopstyle.models import Candidate

logger = logging.getLogger(__name__)

BUTTON_SELECTORS = "button, a[class*='btn'], a[class*='button'], [role='button']"


# JS to read the computed look of one element, shared by every page-side script
# that hands a button back to us
READ_BUTTON_STYLE_JS = """
(el) => {
    const style = window.getComputedStyle(el);
    const rect = el.getBoundingClientRect();
    return {
        backgroundColor: style.backgroundColor,
        textColor: style.color,
        borderStyle: style.borderStyle,
        borderWidth: style.borderWidth,
        borderColor: style.borderColor,
        borderRadius: style.borderRadius,
        textTransform: (style.textTransform || '').toLowerCase() || 'none',
        fontFamily: style.fontFamily,
        fontWeight: style.fontWeight,
        padding: style.padding,
        boundingRect: { width: rect.width, height: rect.height },
        textContent: (el.textContent || '').trim().toLowerCase(),
    };
}
"""

# JS to list every visible button-like element, in document order
COLLECT_BUTTONS_JS = """
(selectors) => {
    const readStyle = __READ_BUTTON_STYLE__;

    const isVisible = (el) => {
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        return style.display !== 'none'
            && style.visibility !== 'hidden'
            && parseFloat(style.opacity || '1') > 0
            && rect.width > 0
            && rect.height > 0;
    };

    return Array.from(document.querySelectorAll(selectors))
        .filter(isVisible)
        .map(readStyle);
}
""".replace("__READ_BUTTON_STYLE__", READ_BUTTON_STYLE_JS.strip())


def parse_candidates(records: list[dict]) -> list[Candidate]:
    """Turn raw page records into Candidates, skipping anything malformed."""
    candidates = []
    for record in records or []:
        try:
            candidates.append(Candidate.model_validate(record))
        except ValidationError as e:
            logger.debug(f"Skipping malformed button record: {e}")
    return candidates


async def collect_candidates(page) -> list[Candidate]:
    records = await page.evaluate(COLLECT_BUTTONS_JS, BUTTON_SELECTORS)
    candidates = parse_candidates(records)
    logger.info(f"Collected {len(candidates)} visible button candidates")
    return candidates
