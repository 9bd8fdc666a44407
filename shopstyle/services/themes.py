"""Known Shopify themes and their primary button selectors.

When a store runs one of these themes we trust the theme's own primary
button class over anything the scoring heuristic would pick.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from shopstyle.models import ButtonStyle, Candidate
from shopstyle.services.candidates import READ_BUTTON_STYLE_JS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    name: str
    schema_name: str
    theme_store_id: int
    button_selector: str


THEMES = (
    Theme("Dawn", "Dawn", 887, ".button--primary"),
    Theme("Prestige", "Prestige", 855, ".Button--primary"),
    Theme("Broadcast", "Broadcast", 868, ".btn--primary"),
    Theme("Palo Alto", "palo-alto", 777, ".btn--primary"),
    Theme("Modular", "modular", 849, ".btn--primary"),
)

# JS to read the theme Shopify exposes on storefront pages
READ_THEME_JS = """
() => {
    const theme = window.Shopify && window.Shopify.theme;
    if (!theme) return null;
    return {
        schemaName: theme.schema_name ?? null,
        themeStoreId: theme.theme_store_id ?? null,
    };
}
"""

# JS to read the first element matching a selector; no visibility filter
READ_SELECTOR_STYLE_JS = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return null;
    return (__READ_BUTTON_STYLE__)(el);
}
""".replace("__READ_BUTTON_STYLE__", READ_BUTTON_STYLE_JS.strip())


def match_theme(schema_name: Optional[str] = None, theme_store_id: Optional[int] = None) -> Optional[Theme]:
    for theme in THEMES:
        if schema_name is not None and theme.schema_name == schema_name:
            return theme
        if theme_store_id is not None and theme.theme_store_id == theme_store_id:
            return theme
    return None


async def read_theme_descriptor(page) -> Optional[dict]:
    return await page.evaluate(READ_THEME_JS)


async def resolve_theme_button(page) -> Optional[ButtonStyle]:
    """Return the theme's primary button style, or None when there isn't one."""
    descriptor = await read_theme_descriptor(page)
    if not descriptor:
        return None

    theme = match_theme(descriptor.get("schemaName"), descriptor.get("themeStoreId"))
    if theme is None:
        logger.info(f"Unrecognised theme: {descriptor}")
        return None

    record = await page.evaluate(READ_SELECTOR_STYLE_JS, theme.button_selector)
    if not record:
        logger.info(f"Theme {theme.name} detected but no element matches {theme.button_selector}")
        return None

    try:
        button = Candidate.model_validate(record)
    except ValidationError as e:
        logger.warning(f"Theme {theme.name} button could not be read: {e}")
        return None

    logger.info(f"Using {theme.name} theme primary button ({theme.button_selector})")
    return button.to_button_style()
