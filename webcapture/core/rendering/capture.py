"""
Screenshot Capture
==================

Navigates to a URL in an isolated browser context, captures the rendered
page and stores it as a lossy WebP image in the output directory.
Playwright only emits PNG and JPEG, so the PNG frame is re-encoded with PIL.
"""

from typing import Any, Optional
import asyncio
import io
from pathlib import Path

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from PIL import Image  # type: ignore

from webcapture.config.logging import get_logger
from webcapture.config.settings import Settings
from webcapture.core.errors import CaptureError
from webcapture.core.filenames import resolve_filename
from webcapture.core.rendering.browser import BrowserManager
from webcapture.models.schemas import CaptureOptions, CaptureResult

logger = get_logger(__name__)


def encode_webp(png_bytes: bytes, destination: Path, quality: int) -> int:
    """
    Re-encode a PNG frame as lossy WebP and write it to ``destination``.

    Args:
        png_bytes: Screenshot returned by the browser
        destination: File to create or overwrite
        quality: WebP quality (0-100)

    Returns:
        Size of the written file in bytes
    """
    with Image.open(io.BytesIO(png_bytes)) as image:
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")
        image.save(destination, format="WEBP", quality=quality)

    return destination.stat().st_size


class ScreenshotCapturer:
    """Runs one capture per call against a shared browser manager."""

    def __init__(self, settings: Settings, browser_manager: Optional[BrowserManager] = None):
        self.settings = settings
        self.browser_manager = browser_manager or BrowserManager(settings)
        self.logger: Any = logger.bind(component="screenshot_capturer")

    async def start(self) -> None:
        await self.browser_manager.start()

    async def close(self) -> None:
        await self.browser_manager.close()

    async def capture(self, options: CaptureOptions) -> CaptureResult:
        """
        Render ``options.url`` and write the screenshot to disk.

        Args:
            options: Validated capture options

        Returns:
            CaptureResult naming the written file

        Raises:
            CaptureError: If launch, navigation, capture, encoding or the
                file write fails
        """
        filename = resolve_filename(options.filename, extension=self.settings.image_extension)
        destination = self.settings.output_dir / filename
        timeout = self.settings.navigation_timeout_ms

        self.logger.info(
            "Capturing screenshot",
            url=options.url,
            width=options.width,
            height=options.height,
            scale=options.scale,
            full_page=options.full_page,
            filename=filename,
        )

        try:
            async with self.browser_manager.new_context(options) as context:
                page = await context.new_page()
                await page.goto(options.url, wait_until="networkidle", timeout=timeout)
                png_bytes = await page.screenshot(type="png", full_page=options.full_page)

            file_size = await asyncio.to_thread(
                encode_webp, png_bytes, destination, options.quality
            )

        except CaptureError:
            raise
        except PlaywrightTimeoutError as e:
            self.logger.error("Navigation timed out", url=options.url, timeout_ms=timeout)
            raise CaptureError(f"Navigation timeout of {timeout} ms exceeded: {e}") from e
        except Exception as e:
            self.logger.error(
                "Screenshot capture error", url=options.url, error=str(e), exc_info=True
            )
            raise CaptureError(f"Screenshot capture failed: {e}") from e

        self.logger.info("Screenshot captured", filename=filename, file_size=file_size)

        return CaptureResult(filename=filename, path=destination.resolve(), file_size=file_size)
