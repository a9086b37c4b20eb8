"""
Test Helpers
============

Image fixtures and Playwright stand-ins shared by unit and integration tests.
"""

import io
from dataclasses import dataclass
from typing import Tuple
from unittest.mock import AsyncMock, MagicMock

from PIL import Image  # type: ignore


def make_png_bytes(
    width: int = 64, height: int = 48, color: Tuple[int, int, int] = (200, 30, 30)
) -> bytes:
    """Create a real PNG image in memory."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass
class MockBrowserSession:
    """A mocked browser with the context and page it hands out."""

    browser: MagicMock
    context: MagicMock
    page: MagicMock


def build_mock_browser(png_bytes: bytes) -> MockBrowserSession:
    """Build a connected mock browser whose page screenshots return ``png_bytes``."""
    page = MagicMock()
    page.goto = AsyncMock(return_value=None)
    page.screenshot = AsyncMock(return_value=png_bytes)

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock(return_value=None)

    browser = MagicMock()
    browser.is_connected = MagicMock(return_value=True)
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock(return_value=None)

    return MockBrowserSession(browser=browser, context=context, page=page)
