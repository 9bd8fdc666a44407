import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from shopstyle.models import DEFAULT_BUTTON_STYLE, ExtractOptions
from shopstyle.services import styles
from shopstyle.services.colors import RGB
from shopstyle.services.palette import Swatch
from shopstyle.services.styles import assemble_profile, extract_styles

SWATCHES = {
    "Vibrant": Swatch("#e61e1e", 120),
    "DarkVibrant": None,
    "Muted": Swatch("#8a8a80", 900),
}
WHITE = RGB(255, 255, 255)


def test_default_button_when_nothing_found():
    profile = assemble_profile(SWATCHES, WHITE, [], None)
    assert profile.primary_button == DEFAULT_BUTTON_STYLE


def test_default_button_when_every_candidate_is_rejected(make_candidate):
    ghost = make_candidate(backgroundColor="rgba(0, 0, 0, 0)")
    assert assemble_profile(SWATCHES, WHITE, [ghost], None).primary_button == DEFAULT_BUTTON_STYLE


def test_theme_button_overrides_scored_winner(make_candidate):
    strong = make_candidate(textContent="add to cart")
    theme_button = make_candidate(
        backgroundColor="rgb(240, 240, 240)",
        textContent="more",
        boundingRect={"width": 10, "height": 10},
    ).to_button_style()

    profile = assemble_profile(SWATCHES, WHITE, [strong], theme_button)

    assert profile.primary_button == theme_button


def test_scored_winner_loses_ephemeral_fields(make_candidate):
    profile = assemble_profile(SWATCHES, WHITE, [make_candidate()], None)

    dumped = profile.model_dump(by_alias=True)
    assert set(dumped) == {"palette", "backgroundColor", "primaryButton"}
    assert set(dumped["primaryButton"]) == {
        "backgroundColor",
        "textColor",
        "borderStyle",
        "borderWidth",
        "borderColor",
        "borderRadius",
        "textTransform",
        "fontFamily",
        "fontWeight",
        "padding",
    }


def test_palette_and_background():
    profile = assemble_profile(SWATCHES, (250, 249, 246), [], None)
    assert profile.palette == ["#8a8a80", "#e61e1e"]
    assert profile.background_color == "#faf9f6"


@pytest.fixture
def pipeline(monkeypatch, make_candidate):
    page = MagicMock(name="page")
    events = []

    @asynccontextmanager
    async def fake_open_page(browser):
        events.append("open")
        try:
            yield page
        finally:
            events.append("close")

    mocks = SimpleNamespace(
        page=page,
        events=events,
        resolve_product_page_url=AsyncMock(return_value="https://shop.test/products/classic-tee"),
        block_media_requests=AsyncMock(),
        navigate=AsyncMock(),
        hide_media=AsyncMock(return_value=4),
        page_height=AsyncMock(return_value=3200),
        remove_overlays=AsyncMock(),
        capture_screenshot=AsyncMock(),
        get_palette=MagicMock(return_value=SWATCHES),
        get_dominant_color=MagicMock(return_value=WHITE),
        collect_candidates=AsyncMock(return_value=[make_candidate(textContent="buy now")]),
        resolve_theme_button=AsyncMock(return_value=None),
    )
    monkeypatch.setattr(styles, "open_page", fake_open_page)
    for name, value in vars(mocks).items():
        if name not in ("page", "events"):
            monkeypatch.setattr(styles, name, value)
    return mocks


def test_extract_styles_uses_product_page(pipeline):
    profile = asyncio.run(extract_styles(MagicMock(), "https://shop.test"))

    pipeline.resolve_product_page_url.assert_awaited_once_with("https://shop.test")
    pipeline.navigate.assert_awaited_once_with(pipeline.page, "https://shop.test/products/classic-tee")
    pipeline.block_media_requests.assert_awaited_once_with(pipeline.page)
    pipeline.remove_overlays.assert_not_awaited()
    assert pipeline.capture_screenshot.await_args.args[2] == 3200
    assert profile.background_color == "#ffffff"
    assert profile.palette == ["#8a8a80", "#e61e1e"]
    assert profile.primary_button.background_color == "rgb(0, 0, 0)"
    assert pipeline.events == ["open", "close"]


def test_extract_styles_options(pipeline):
    options = ExtractOptions(use_product_page=False, remove_overlays=True)

    asyncio.run(extract_styles(MagicMock(), "https://shop.test", options))

    pipeline.resolve_product_page_url.assert_not_awaited()
    pipeline.navigate.assert_awaited_once_with(pipeline.page, "https://shop.test")
    pipeline.remove_overlays.assert_awaited_once_with(pipeline.page)


def test_extract_styles_analyses_the_captured_screenshot(pipeline):
    asyncio.run(extract_styles(MagicMock(), "https://shop.test"))

    screenshot_file = pipeline.capture_screenshot.await_args.args[1]
    pipeline.get_palette.assert_called_once_with(screenshot_file)
    pipeline.get_dominant_color.assert_called_once_with(screenshot_file)
    pipeline.collect_candidates.assert_awaited_once_with(pipeline.page)
    pipeline.resolve_theme_button.assert_awaited_once_with(pipeline.page)


def test_extract_styles_releases_page_on_failure(pipeline):
    pipeline.capture_screenshot.side_effect = RuntimeError("screenshot failed")

    with pytest.raises(RuntimeError, match="screenshot failed"):
        asyncio.run(extract_styles(MagicMock(), "https://shop.test"))

    assert pipeline.events == ["open", "close"]
    pipeline.get_palette.assert_not_called()


def test_extract_styles_prefers_theme_button(pipeline, make_candidate):
    theme_button = make_candidate(backgroundColor="rgb(18, 18, 18)").to_button_style()
    pipeline.resolve_theme_button.return_value = theme_button

    profile = asyncio.run(extract_styles(MagicMock(), "https://shop.test"))

    assert profile.primary_button == theme_button
