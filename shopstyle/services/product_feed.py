import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

PRODUCT_FEED_TIMEOUT = float(os.getenv("PRODUCT_FEED_TIMEOUT", "10"))
MIN_PRODUCT_AGE = timedelta(days=30)


def _parse_published_at(value: str) -> datetime:
    published = datetime.fromisoformat(value)
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published


def pick_product_handle(products: list[dict], now: datetime) -> Optional[str]:
    """First product that has an image and has been live for over 30 days."""
    cutoff = now - MIN_PRODUCT_AGE
    for product in products:
        if not product.get("images") or not product.get("published_at"):
            continue
        if _parse_published_at(product["published_at"]) < cutoff:
            return product["handle"]
    return None


async def _fetch_products(client: httpx.AsyncClient, base_url: str) -> list[dict]:
    resp = await client.get(f"{base_url}/products.json")
    resp.raise_for_status()
    return resp.json()["products"]


async def resolve_product_page_url(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> str:
    """Swap a shop URL for one of its established product pages.

    Product pages show the shop's real add-to-cart button, which the landing
    page often doesn't. Any failure returns ``url`` unchanged.
    """
    base_url = url.rstrip("/")
    now = now or datetime.now(timezone.utc)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=PRODUCT_FEED_TIMEOUT, follow_redirects=True) as own_client:
                products = await _fetch_products(own_client, base_url)
        else:
            products = await _fetch_products(client, base_url)

        handle = pick_product_handle(products, now)
        if not handle:
            raise LookupError("No product found")
    except Exception as e:
        logger.warning(f"Failed to get product page url, using main page instead: {e}")
        return url

    product_url = f"{base_url}/products/{handle}"
    logger.info(f"Using product page {product_url}")
    return product_url
