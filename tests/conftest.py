"""
Test Configuration
==================

Pytest configuration with fixtures for unit and integration tests.
Provides isolated settings, real PNG data and mocked Playwright browsers.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from webcapture.api.main import create_app
from webcapture.config.settings import Settings
from webcapture.core.rendering.browser import BrowserManager
from webcapture.core.rendering.capture import ScreenshotCapturer
from webcapture.models.schemas import CaptureDefaults, CaptureOptions

from tests.utils.helpers import MockBrowserSession, build_mock_browser, make_png_bytes


@pytest.fixture
def test_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings writing into a per-test temporary directory."""
    monkeypatch.delenv("PORT", raising=False)
    return Settings(
        environment="testing",
        output_dir=tmp_path / "screenshots",
        log_dir=tmp_path / "logs",
        log_level="DEBUG",
        max_concurrent_captures=2,
    )


@pytest.fixture
def capture_defaults(test_settings: Settings) -> CaptureDefaults:
    return test_settings.capture_defaults()


@pytest.fixture
def sample_png() -> bytes:
    return make_png_bytes()


@pytest.fixture
def mock_session(sample_png: bytes) -> MockBrowserSession:
    return build_mock_browser(sample_png)


@pytest.fixture
def browser_manager(test_settings: Settings, mock_session: MockBrowserSession) -> BrowserManager:
    """Browser manager that already holds a connected mock browser."""
    manager = BrowserManager(test_settings)
    manager._browser = mock_session.browser
    return manager


@pytest.fixture
def capturer(test_settings: Settings, browser_manager: BrowserManager) -> ScreenshotCapturer:
    return ScreenshotCapturer(test_settings, browser_manager)


@pytest.fixture
def sample_options() -> CaptureOptions:
    return CaptureOptions(
        url="https://example.com",
        width=1280,
        height=720,
        scale=2.0,
        quality=75,
        full_page=False,
        filename=None,
    )


@pytest.fixture
def app(test_settings: Settings, capturer: ScreenshotCapturer):
    """FastAPI application wired to the mocked browser."""
    return create_app(test_settings, capturer=capturer)


@pytest.fixture
def client(app) -> TestClient:
    """Test client; the lifespan is not entered so no real browser starts."""
    return TestClient(app)


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file paths."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
