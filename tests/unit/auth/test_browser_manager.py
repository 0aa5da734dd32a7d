"""
Tests for BrowserManager.
"""
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from src.auth.browser_manager import BrowserManager


@pytest.fixture
def playwright_mocks():
    """Patch Playwright startup and the stealth helpers used by open()."""
    with patch("src.auth.browser_manager.sync_playwright") as mock_sync, patch(
        "src.auth.browser_manager.create_stealth_context"
    ) as mock_create_context, patch(
        "src.auth.browser_manager.apply_stealth_patches"
    ) as mock_patches, patch(
        "src.auth.browser_manager.get_browser_args", return_value=["--arg"]
    ):
        playwright = Mock()
        browser = Mock()
        context = Mock()
        page = Mock()
        mock_sync.return_value.start.return_value = playwright
        playwright.chromium.launch.return_value = browser
        mock_create_context.return_value = context
        context.new_page.return_value = page

        yield {
            "playwright": playwright,
            "browser": browser,
            "context": context,
            "page": page,
            "create_context": mock_create_context,
            "patches": mock_patches,
        }


@pytest.mark.unit
class TestOpen:
    """Test open() with saved and manual sessions."""

    def test_saved_session(self, playwright_mocks):
        manager = BrowserManager(cookie_path=Path("test/cookies.json"))
        manager.cookie_manager.load_cookies = Mock()
        manager.session_validator.validate_session = Mock(return_value=(True, "Session valid"))

        page = manager.open(headless=True)

        assert page is playwright_mocks["page"]
        playwright_mocks["playwright"].chromium.launch.assert_called_once_with(
            headless=True, args=["--arg"]
        )
        playwright_mocks["create_context"].assert_called_once_with(
            playwright_mocks["browser"], storage_state_path=Path("test/cookies.json")
        )
        playwright_mocks["patches"].assert_called_once_with(page)
        manager.session_validator.validate_session.assert_called_once_with(page)

    def test_missing_cookies_cleans_up(self):
        manager = BrowserManager(cookie_path=Path("test/nonexistent.json"))
        manager.cookie_manager.load_cookies = Mock(side_effect=FileNotFoundError("missing"))
        manager.cleanup = Mock()

        with pytest.raises(FileNotFoundError):
            manager.open()

        manager.cleanup.assert_called_once()

    def test_invalid_session(self, playwright_mocks):
        manager = BrowserManager(cookie_path=Path("test/cookies.json"))
        manager.cookie_manager.load_cookies = Mock()
        manager.session_validator.validate_session = Mock(
            return_value=(False, "Session expired - redirected to login")
        )

        with pytest.raises(ValueError, match="Session validation failed"):
            manager.open()

        playwright_mocks["browser"].close.assert_called_once()
        assert manager.browser is None

    def test_launch_failure_is_runtime_error(self, playwright_mocks):
        playwright_mocks["playwright"].chromium.launch.side_effect = Exception("no chromium")
        manager = BrowserManager(cookie_path=Path("test/cookies.json"))
        manager.cookie_manager.load_cookies = Mock()

        with pytest.raises(RuntimeError, match="no chromium"):
            manager.open()

    def test_manual_login_saves_session(self, playwright_mocks):
        prompt = Mock(return_value="")
        manager = BrowserManager(cookie_path=Path("test/cookies.json"), prompt=prompt)
        manager.cookie_manager.load_cookies = Mock()
        manager.cookie_manager.save_from_context = Mock()

        manager.open(headless=True, manual_login=True)

        manager.cookie_manager.load_cookies.assert_not_called()
        playwright_mocks["playwright"].chromium.launch.assert_called_once_with(
            headless=False, args=["--arg"]
        )
        prompt.assert_called_once()
        manager.cookie_manager.save_from_context.assert_called_once_with(
            playwright_mocks["context"]
        )


@pytest.mark.unit
class TestCleanup:
    """Test cleanup() and the context manager."""

    def test_cleanup_closes_everything(self):
        manager = BrowserManager(cookie_path=Path("test/cookies.json"))
        page, context, browser, playwright = Mock(), Mock(), Mock(), Mock()
        manager.page, manager.context, manager.browser = page, context, browser
        manager.playwright = playwright

        manager.cleanup()

        page.close.assert_called_once()
        context.close.assert_called_once()
        browser.close.assert_called_once()
        playwright.stop.assert_called_once()
        assert manager.playwright is None

    def test_close_errors_are_ignored(self):
        manager = BrowserManager(cookie_path=Path("test/cookies.json"))
        manager.browser = Mock()
        manager.browser.close.side_effect = RuntimeError("already closed")

        manager.cleanup()

        assert manager.browser is None

    def test_context_manager(self):
        with BrowserManager(cookie_path=Path("test/cookies.json")) as manager:
            manager.cleanup = Mock()

        manager.cleanup.assert_called_once()
