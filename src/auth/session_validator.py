"""
Session validation: confirms the restored session reaches the Activity Log.
"""
from typing import Optional, Tuple

from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from config import settings
from src.utils.logging import get_logger

logger = get_logger(__name__)

LOGIN_URL_MARKERS = ["/login", "login.php"]
CHECKPOINT_URL_MARKERS = ["checkpoint", "two_step_verification", "two-factor"]
LOGIN_FORM_SELECTORS = ["input[name='email']", "input[name='pass']"]


class SessionValidator:
    """Detects login redirects and security checkpoints."""

    def __init__(self, timeout: Optional[int] = None):
        """
        Initialize SessionValidator.

        Args:
            timeout: Navigation timeout in milliseconds (defaults to settings.NAVIGATION_TIMEOUT_MS)
        """
        self.timeout = timeout or settings.NAVIGATION_TIMEOUT_MS

    def validate_session(self, page: Page, url: str = settings.ACTIVITY_LOG_URL) -> Tuple[bool, str]:
        """
        Open the Activity Log and check that the session is signed in.

        Args:
            page: Playwright Page
            url: Page to open for the check

        Returns:
            Tuple of (is_valid, message)
        """
        logger.info("Validating Facebook session...")
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=self.timeout)
        except PlaywrightTimeoutError:
            logger.error(f"Timeout waiting for page load (>{self.timeout}ms)")
            return False, "Timeout waiting for page load"
        except Exception as e:
            logger.error(f"Unexpected error during session validation: {e}")
            return False, f"Session validation error: {e}"

        current_url = page.url.lower()

        if any(marker in current_url for marker in CHECKPOINT_URL_MARKERS):
            logger.warning("Security checkpoint detected")
            return False, "Security checkpoint - manual intervention required"

        if any(marker in current_url for marker in LOGIN_URL_MARKERS) or self._has_login_form(page):
            logger.warning("Session expired - redirected to login")
            return False, "Session expired - redirected to login"

        logger.info("Session validation successful")
        return True, "Session valid"

    def _has_login_form(self, page: Page) -> bool:
        for selector in LOGIN_FORM_SELECTORS:
            try:
                if page.query_selector(selector) is not None:
                    logger.debug(f"Login form element found: {selector}")
                    return True
            except Exception as e:
                logger.debug(f"Error checking for login form: {e}")
        return False
