import os
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from playwright.async_api import Browser, Page, Playwright, Route
from playwright_stealth import Stealth

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = int(os.getenv("NAVIGATION_TIMEOUT_MS", "10000"))
SCREENSHOT_WIDTH = 1300
MAX_SCREENSHOT_HEIGHT = 2000
FOOTER_MARGIN = 200  # px trimmed off the bottom so footers stay out of the capture
VIEWPORT_HEIGHT = 900
OVERLAY_SETTLE_MS = 500
BLOCKED_RESOURCE_TYPES = {"image", "media"}

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

OVERLAY_SELECTORS = [
    '[class*="cookie"]',
    '[class*="overlay"]',
    '[class*="modal"]',
    '[class*="banner"]',
    '[aria-label*="banner"]',
    '[aria-label*="cookie"]',
    '[aria-label*="modal"]',
    "#gdpr-banner",
    ".cc-banner",
    '[role="dialog"]',
    '[role="alertdialog"]',
    ".ReactModal__Overlay",
    'div[style*="fixed"]',
    'div[style*="sticky"]',
]


# JS to blank out media that loaded before request blocking kicked in
HIDE_MEDIA_JS = """
() => {
    const media = document.querySelectorAll('img, video, [style*="background-image"]');
    media.forEach(el => {
        el.style.background = 'transparent';
        el.style.opacity = '0';
    });
    return media.length;
}
"""

# JS to hide consent banners and modals, and drop full-screen fixed overlays
REMOVE_OVERLAYS_JS = """
(selectors) => {
    let hidden = 0;
    document.querySelectorAll(selectors).forEach(el => {
        el.style.display = 'none';
        el.style.opacity = '0';
        hidden++;
    });

    let removed = 0;
    for (const el of Array.from(document.querySelectorAll('body > *'))) {
        const style = window.getComputedStyle(el);
        if (style.position === 'fixed'
            && style.zIndex === '9999'
            && el.getBoundingClientRect().height > 100) {
            el.remove();
            removed++;
        }
    }
    return { hidden, removed };
}
"""

PAGE_HEIGHT_JS = "() => document.documentElement.scrollHeight"


async def launch_browser(playwright: Playwright) -> Browser:
    """Launch the shared headless Chromium. Callers keep it open across extractions."""
    return await playwright.chromium.launch(
        headless=True,
        args=[
            "--disable-blink-features=AutomationControlled",
            "--disable-infobars",
            "--no-first-run",
            "--no-default-browser-check",
            "--disable-background-timer-throttling",
            "--disable-backgrounding-occluded-windows",
            "--disable-renderer-backgrounding",
        ],
    )


@asynccontextmanager
async def open_page(browser: Browser):
    """Yield a page in its own browser context; the context is closed on every exit path."""
    context = await browser.new_context(
        viewport={"width": SCREENSHOT_WIDTH, "height": VIEWPORT_HEIGHT},
        user_agent=USER_AGENT,
        locale="en-US",
        color_scheme="light",
        java_script_enabled=True,
    )
    try:
        stealth = Stealth(
            navigator_webdriver=True,
            chrome_runtime=True,
            navigator_plugins=True,
            navigator_permissions=True,
            webgl_vendor=True,
        )
        await stealth.apply_stealth_async(context)
        yield await context.new_page()
    finally:
        await context.close()


async def block_media_requests(page: Page) -> None:
    async def _handle(route: Route):
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _handle)


async def navigate(page: Page, url: str) -> None:
    await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)


async def hide_media(page: Page) -> int:
    count = await page.evaluate(HIDE_MEDIA_JS)
    logger.info(f"Masked {count} media elements")
    return count


async def remove_overlays(page: Page) -> dict:
    """Hide overlays and wait for the layout to settle.

    Sometimes hides product imagery too when a theme wraps it in an overlay.
    """
    result = await page.evaluate(REMOVE_OVERLAYS_JS, ",".join(OVERLAY_SELECTORS))
    logger.info(f"Overlays: {result.get('hidden', 0)} hidden, {result.get('removed', 0)} removed")
    await page.wait_for_timeout(OVERLAY_SETTLE_MS)
    return result


async def page_height(page: Page) -> int:
    return int(await page.evaluate(PAGE_HEIGHT_JS))


def screenshot_clip(total_height: int) -> dict:
    height = max(1, min(total_height - FOOTER_MARGIN, MAX_SCREENSHOT_HEIGHT))
    return {"x": 0, "y": 0, "width": SCREENSHOT_WIDTH, "height": height}


async def capture_screenshot(page: Page, path: str | Path, total_height: int) -> Path:
    clip = screenshot_clip(total_height)
    await page.screenshot(path=str(path), clip=clip, full_page=True, type="png")
    logger.info(f"Screenshot captured: {clip['width']}x{clip['height']}px (page height: {total_height}px)")
    return Path(path)
