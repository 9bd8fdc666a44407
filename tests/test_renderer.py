import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shopstyle.services import renderer
from shopstyle.services.renderer import (
    OVERLAY_SELECTORS,
    REMOVE_OVERLAYS_JS,
    block_media_requests,
    capture_screenshot,
    open_page,
    remove_overlays,
    screenshot_clip,
)


def _browser():
    context = MagicMock()
    context.new_page = AsyncMock(return_value=MagicMock(name="page"))
    context.close = AsyncMock()
    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    return browser, context


@pytest.mark.parametrize("height, expected", [(5000, 2000), (1000, 800), (150, 1)])
def test_screenshot_clip(height, expected):
    assert screenshot_clip(height) == {"x": 0, "y": 0, "width": 1300, "height": expected}


def test_open_page_closes_context_on_error():
    browser, context = _browser()

    async def _run():
        async with open_page(browser) as page:
            assert page is context.new_page.return_value
            raise RuntimeError("navigation timed out")

    with patch("shopstyle.services.renderer.Stealth") as stealth:
        stealth.return_value.apply_stealth_async = AsyncMock()
        with pytest.raises(RuntimeError):
            asyncio.run(_run())

    stealth.return_value.apply_stealth_async.assert_awaited_once_with(context)
    context.close.assert_awaited_once()


def test_block_media_requests_aborts_images_and_video():
    page = MagicMock()
    page.route = AsyncMock()
    asyncio.run(block_media_requests(page))
    pattern, handler = page.route.await_args.args
    assert pattern == "**/*"

    for resource_type, blocked in [("image", True), ("media", True), ("document", False), ("stylesheet", False)]:
        route = MagicMock()
        route.request.resource_type = resource_type
        route.abort = AsyncMock()
        route.continue_ = AsyncMock()
        asyncio.run(handler(route))
        assert route.abort.await_count == int(blocked)
        assert route.continue_.await_count == int(not blocked)


def test_remove_overlays_hides_selectors_and_settles():
    page = MagicMock()
    page.evaluate = AsyncMock(return_value={"hidden": 3, "removed": 1})
    page.wait_for_timeout = AsyncMock()

    result = asyncio.run(remove_overlays(page))

    assert result == {"hidden": 3, "removed": 1}
    page.evaluate.assert_awaited_once_with(REMOVE_OVERLAYS_JS, ",".join(OVERLAY_SELECTORS))
    page.wait_for_timeout.assert_awaited_once_with(renderer.OVERLAY_SETTLE_MS)


def test_capture_screenshot_clips_from_top(tmp_path):
    page = MagicMock()
    page.screenshot = AsyncMock()
    path = tmp_path / "shot.png"

    asyncio.run(capture_screenshot(page, path, 1200))

    kwargs = page.screenshot.await_args.kwargs
    assert kwargs["path"] == str(path)
    assert kwargs["clip"] == {"x": 0, "y": 0, "width": 1300, "height": 1000}
