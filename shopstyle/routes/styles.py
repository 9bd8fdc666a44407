import os
import time
import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from shopstyle.models import ExtractOptions, StyleProfile
from shopstyle.services.styles import extract_styles

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Concurrency ──
MAX_CONCURRENT_EXTRACTIONS = int(os.getenv("MAX_CONCURRENT_EXTRACTIONS", "3"))
_extraction_semaphore = asyncio.Semaphore(MAX_CONCURRENT_EXTRACTIONS)


class StylesRequest(BaseModel):
    url: str
    use_product_page: bool = True
    remove_overlays: bool = False


def normalize_url(url: str) -> str:
    url = url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


@router.post("/api/styles", response_model=StyleProfile)
async def get_styles(request: StylesRequest, raw_request: Request):
    """Extract the palette, background colour and primary button of a shop."""
    url = normalize_url(request.url)

    if _extraction_semaphore.locked():
        logger.warning(f"[styles] Rejected {url}: all {MAX_CONCURRENT_EXTRACTIONS} slots busy")
        raise HTTPException(
            status_code=503,
            detail=f"Server busy, {MAX_CONCURRENT_EXTRACTIONS} extractions already in progress. Try again shortly.",
        )

    options = ExtractOptions(
        use_product_page=request.use_product_page,
        remove_overlays=request.remove_overlays,
    )

    async with _extraction_semaphore:
        t0 = time.time()
        try:
            profile = await extract_styles(raw_request.app.state.browser, url, options)
        except Exception as e:
            logger.error(f"[styles] Extraction failed for {url}: {e}")
            raise HTTPException(status_code=502, detail=f"Failed to extract styles: {e}")

    logger.info(f"[styles] {url} done in {time.time() - t0:.1f}s")
    return profile
