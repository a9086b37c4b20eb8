"""
Browser Manager
===============

Owns the Playwright driver and a single Chromium instance, and hands out
isolated browser contexts for individual captures.

A semaphore bounds how many captures hold a context at once. The browser is
launched lazily and relaunched if it has disconnected.
"""

from typing import Any, AsyncGenerator, Optional
import asyncio
from contextlib import asynccontextmanager

from playwright.async_api import async_playwright, Browser, BrowserContext, Playwright

from webcapture.config.logging import get_logger
from webcapture.config.settings import Settings
from webcapture.core.errors import CaptureError
from webcapture.models.schemas import CaptureOptions

logger = get_logger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class BrowserManager:
    """Playwright lifecycle and bounded access to isolated browser contexts."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._launch_lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(settings.max_concurrent_captures)
        self.logger: Any = logger.bind(component="browser_manager")

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> None:
        """Launch the browser ahead of the first capture."""
        await self._ensure_browser()

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver."""
        async with self._launch_lock:
            if self._browser is not None:
                try:
                    await self._browser.close()
                except Exception as e:
                    self.logger.warning("Error closing browser", error=str(e))
                self._browser = None

            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

        self.logger.info("Browser manager closed")

    async def _ensure_browser(self) -> Browser:
        async with self._launch_lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser

            if self._browser is not None:
                self.logger.warning("Browser disconnected, relaunching")
                self._browser = None

            try:
                if self._playwright is None:
                    self._playwright = await async_playwright().start()

                self._browser = await self._playwright.chromium.launch(
                    headless=self.settings.playwright_headless,
                    args=LAUNCH_ARGS,
                )
            except Exception as e:
                self.logger.error("Failed to launch browser", error=str(e))
                raise CaptureError(f"Browser launch failed: {e}") from e

            self.logger.info("Browser launched", headless=self.settings.playwright_headless)
            return self._browser

    @asynccontextmanager
    async def new_context(self, options: CaptureOptions) -> AsyncGenerator[BrowserContext, None]:
        """
        Open an isolated browser context sized for ``options``.

        The context is closed when the block exits, whether it succeeds or
        raises.
        """
        async with self._semaphore:
            browser = await self._ensure_browser()
            context = await browser.new_context(
                viewport={"width": options.width, "height": options.height},
                device_scale_factor=options.scale,
            )
            try:
                yield context
            finally:
                try:
                    await context.close()
                except Exception as e:
                    self.logger.warning("Error closing browser context", error=str(e))
