"""
Unit Tests for Screenshot Capture
=================================

Tests the capture orchestration against a mocked Playwright browser and real
image encoding on disk.
"""

import re

import pytest
from PIL import Image  # type: ignore
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webcapture.core.errors import CaptureError
from webcapture.core.rendering.capture import ScreenshotCapturer, encode_webp

from tests.utils.helpers import make_png_bytes


class TestEncodeWebp:
    """Test PNG to WebP re-encoding."""

    def test_writes_webp_file(self, tmp_path):
        destination = tmp_path / "out.webp"

        size = encode_webp(make_png_bytes(120, 80), destination, quality=80)

        assert destination.exists()
        assert size == destination.stat().st_size > 0
        with Image.open(destination) as image:
            assert image.format == "WEBP"
            assert image.size == (120, 80)

    def test_overwrites_existing_file(self, tmp_path):
        destination = tmp_path / "same.webp"
        encode_webp(make_png_bytes(10, 10), destination, quality=80)
        encode_webp(make_png_bytes(30, 20), destination, quality=80)

        with Image.open(destination) as image:
            assert image.size == (30, 20)

    def test_palette_images_are_converted(self, tmp_path):
        import io

        buffer = io.BytesIO()
        Image.new("RGB", (16, 16), (0, 128, 255)).convert("P").save(buffer, format="PNG")
        destination = tmp_path / "palette.webp"

        encode_webp(buffer.getvalue(), destination, quality=50)

        with Image.open(destination) as image:
            assert image.format == "WEBP"


class TestScreenshotCapturer:
    """Test the capture orchestration."""

    @pytest.mark.asyncio
    async def test_capture_writes_file(self, capturer, sample_options, mock_session, test_settings):
        result = await capturer.capture(sample_options)

        assert re.fullmatch(r"screenshot_\d+\.webp", result.filename)
        assert result.path == (test_settings.output_dir / result.filename).resolve()
        assert result.path.exists()
        assert result.file_size == result.path.stat().st_size
        with Image.open(result.path) as image:
            assert image.format == "WEBP"

    @pytest.mark.asyncio
    async def test_capture_configures_viewport_and_navigation(
        self, capturer, sample_options, mock_session
    ):
        await capturer.capture(sample_options)

        mock_session.browser.new_context.assert_awaited_once_with(
            viewport={"width": 1280, "height": 720},
            device_scale_factor=2.0,
        )
        mock_session.page.goto.assert_awaited_once_with(
            "https://example.com", wait_until="networkidle", timeout=5000
        )
        mock_session.page.screenshot.assert_awaited_once_with(type="png", full_page=False)
        mock_session.context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_full_page_capture(self, capturer, sample_options, mock_session):
        options = sample_options.model_copy(update={"full_page": True})

        await capturer.capture(options)

        mock_session.page.screenshot.assert_awaited_once_with(type="png", full_page=True)

    @pytest.mark.asyncio
    async def test_custom_filename(self, capturer, sample_options, test_settings):
        options = sample_options.model_copy(update={"filename": "landing"})

        result = await capturer.capture(options)

        assert result.filename == "landing.webp"
        assert (test_settings.output_dir / "landing.webp").exists()

    @pytest.mark.asyncio
    async def test_identical_filename_overwrites(self, capturer, sample_options, mock_session):
        options = sample_options.model_copy(update={"filename": "same.webp"})

        mock_session.page.screenshot.return_value = make_png_bytes(20, 20)
        first = await capturer.capture(options)
        mock_session.page.screenshot.return_value = make_png_bytes(50, 40)
        second = await capturer.capture(options)

        assert first.path == second.path
        with Image.open(second.path) as image:
            assert image.size == (50, 40)

    @pytest.mark.asyncio
    async def test_navigation_timeout(self, capturer, sample_options, mock_session, test_settings):
        mock_session.page.goto.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded.")

        with pytest.raises(CaptureError, match="Navigation timeout of 5000 ms exceeded"):
            await capturer.capture(sample_options)

        mock_session.context.close.assert_awaited_once()
        mock_session.page.screenshot.assert_not_awaited()
        assert list(test_settings.output_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_navigation_failure(self, capturer, sample_options, mock_session):
        mock_session.page.goto.side_effect = Exception("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(CaptureError, match="ERR_NAME_NOT_RESOLVED") as exc_info:
            await capturer.capture(sample_options)

        assert isinstance(exc_info.value.__cause__, Exception)
        mock_session.context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_screenshot_failure_releases_context(self, capturer, sample_options, mock_session):
        mock_session.page.screenshot.side_effect = Exception("Target closed")

        with pytest.raises(CaptureError, match="Target closed"):
            await capturer.capture(sample_options)

        mock_session.context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_filesystem_failure(self, capturer, sample_options, test_settings):
        # A directory in the way of the output file makes the write fail
        (test_settings.output_dir / "blocked.webp").mkdir()
        options = sample_options.model_copy(update={"filename": "blocked.webp"})

        with pytest.raises(CaptureError, match="Screenshot capture failed"):
            await capturer.capture(options)

    @pytest.mark.asyncio
    async def test_launch_failure_surfaces_as_capture_error(
        self, test_settings, sample_options
    ):
        class FailingManager:
            def new_context(self, options):
                raise CaptureError("Browser launch failed: executable missing")

        capturer = ScreenshotCapturer(test_settings, FailingManager())  # type: ignore[arg-type]

        with pytest.raises(CaptureError, match="Browser launch failed"):
            await capturer.capture(sample_options)

    @pytest.mark.asyncio
    async def test_uses_configured_timeout(self, tmp_path, mock_session, sample_options):
        from webcapture.config.settings import Settings
        from webcapture.core.rendering.browser import BrowserManager

        settings = Settings(
            environment="testing",
            output_dir=tmp_path / "out",
            log_dir=tmp_path / "logs",
            navigation_timeout_ms=1500,
        )
        manager = BrowserManager(settings)
        manager._browser = mock_session.browser

        await ScreenshotCapturer(settings, manager).capture(sample_options)

        assert mock_session.page.goto.await_args.kwargs["timeout"] == 1500
