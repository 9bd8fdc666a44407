#!/usr/bin/env python3
"""Print the style profile of a shop as JSON.

Usage:
    shopstyle https://example-shop.com [--no-product-page] [--remove-overlays]
"""

import sys
import asyncio
import logging
import argparse

from dotenv import load_dotenv
from playwright.async_api import async_playwright

from shopstyle.models import ExtractOptions, StyleProfile
from shopstyle.services.renderer import launch_browser
from shopstyle.services.styles import extract_styles

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shopstyle", description="Extract a shop's palette and primary button style")
    parser.add_argument("url", help="Shop URL, e.g. https://example-shop.com")
    parser.add_argument(
        "--no-product-page",
        dest="use_product_page",
        action="store_false",
        help="Analyse the given URL instead of looking up a product page",
    )
    parser.add_argument(
        "--remove-overlays",
        action="store_true",
        help="Hide cookie banners, modals and fixed overlays before capturing",
    )
    return parser


async def run(url: str, options: ExtractOptions) -> StyleProfile:
    async with async_playwright() as p:
        browser = await launch_browser(p)
        try:
            return await extract_styles(browser, url, options)
        finally:
            await browser.close()


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    load_dotenv()

    args = build_parser().parse_args(argv)
    options = ExtractOptions(use_product_page=args.use_product_page, remove_overlays=args.remove_overlays)

    try:
        profile = asyncio.run(run(args.url, options))
    except Exception as e:
        logger.error(f"Failed to extract styles from {args.url}: {e}")
        return 1

    print(profile.model_dump_json(by_alias=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
