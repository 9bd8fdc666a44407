import time
import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser

from shopstyle.models import (
    DEFAULT_BUTTON_STYLE,
    ButtonStyle,
    Candidate,
    ExtractOptions,
    StyleProfile,
)
from shopstyle.services.candidates import collect_candidates
from shopstyle.services.colors import RGB, rgb_to_hex
from shopstyle.services.palette import Swatch, get_dominant_color, get_palette, ranked_hexes
from shopstyle.services.product_feed import resolve_product_page_url
from shopstyle.services.renderer import (
    block_media_requests,
    capture_screenshot,
    hide_media,
    navigate,
    open_page,
    page_height,
    remove_overlays,
)
from shopstyle.services.scoring import pick_primary_button
from shopstyle.services.themes import resolve_theme_button

logger = logging.getLogger(__name__)


def assemble_profile(
    swatches: dict[str, Optional[Swatch]],
    dominant: RGB,
    candidates: list[Candidate],
    theme_button: Optional[ButtonStyle] = None,
) -> StyleProfile:
    """Merge the page analysis into a profile.

    The theme's own primary button beats the scored winner, which beats the
    default style.
    """
    background = RGB(*dominant)

    if theme_button is not None:
        primary_button = theme_button
    else:
        winner = pick_primary_button(candidates, background)
        primary_button = winner.to_button_style() if winner is not None else DEFAULT_BUTTON_STYLE

    return StyleProfile(
        palette=ranked_hexes(swatches),
        background_color=rgb_to_hex(*background),
        primary_button=primary_button,
    )


async def extract_styles(
    browser: Browser,
    url: str,
    options: Optional[ExtractOptions] = None,
) -> StyleProfile:
    """Render ``url`` and derive its palette, background and primary button.

    ``browser`` stays owned by the caller so it can be reused across calls;
    each call gets its own browser context which is closed before returning.
    """
    options = options or ExtractOptions()
    t0 = time.time()

    target_url = await resolve_product_page_url(url) if options.use_product_page else url
    logger.info(f"Extracting styles from {target_url}")

    with tempfile.TemporaryDirectory(prefix="shopstyle-") as tmp_dir:
        screenshot_file = Path(tmp_dir) / "screenshot.png"

        async with open_page(browser) as page:
            await block_media_requests(page)
            await navigate(page, target_url)
            await hide_media(page)
            total_height = await page_height(page)

            if options.remove_overlays:
                await remove_overlays(page)

            await capture_screenshot(page, screenshot_file, total_height)

            swatches, dominant, candidates, theme_button = await asyncio.gather(
                asyncio.to_thread(get_palette, screenshot_file),
                asyncio.to_thread(get_dominant_color, screenshot_file),
                collect_candidates(page),
                resolve_theme_button(page),
            )

    profile = assemble_profile(swatches, dominant, candidates, theme_button)
    logger.info(
        f"Extracted styles from {target_url}: {len(profile.palette)} palette colours, "
        f"background {profile.background_color} ({time.time() - t0:.1f}s)"
    )
    return profile
