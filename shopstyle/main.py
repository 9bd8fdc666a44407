import os
import logging
from contextlib import asynccontextmanager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    datefmt="%H:%M:%S",
)
# Quiet noisy HTTP logs unless debugging
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from playwright.async_api import async_playwright

from shopstyle.routes.styles import router as styles_router
from shopstyle.services.renderer import launch_browser

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One Chromium for the whole process; each extraction opens its own context
    async with async_playwright() as p:
        app.state.browser = await launch_browser(p)
        logger.info("Browser launched")
        try:
            yield
        finally:
            await app.state.browser.close()
            logger.info("Browser closed")


app = FastAPI(title="Shop Style Extractor API", lifespan=lifespan)

allowed_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(styles_router)


@app.get("/")
def root():
    return {"message": "Shop Style Extractor API is running"}


@app.get("/health")
def health():
    return {"status": "ok"}
