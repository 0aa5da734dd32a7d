"""
Browser manager: launches Chromium and opens a signed-in Activity Log page.
"""
from pathlib import Path
from typing import Callable, Optional

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from config import settings
from src.auth.cookie_manager import CookieManager
from src.auth.session_validator import SessionValidator
from src.stealth.fingerprint import apply_stealth_patches, create_stealth_context, get_browser_args
from src.utils.logging import get_logger

logger = get_logger(__name__)


class BrowserManager:
    """Owns the Playwright browser, context and page for one cleaning session."""

    def __init__(
        self,
        cookie_path: Optional[Path] = None,
        prompt: Callable[[str], str] = input,
    ):
        """
        Initialize BrowserManager.

        Args:
            cookie_path: Storage-state file (defaults to settings.FACEBOOK_COOKIES_PATH)
            prompt: Function used to wait for the user during manual login
        """
        self.cookie_path = Path(cookie_path or settings.FACEBOOK_COOKIES_PATH)
        self.cookie_manager = CookieManager(self.cookie_path)
        self.session_validator = SessionValidator()
        self.prompt = prompt

        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def open(
        self,
        headless: Optional[bool] = None,
        manual_login: bool = False,
        validate_session: bool = True,
    ) -> Page:
        """
        Launch the browser and return a page signed in to Facebook.

        Args:
            headless: Run headless (defaults to settings.HEADLESS; ignored for manual login)
            manual_login: Let the user sign in by hand, then save the session
            validate_session: Check the restored session reaches the Activity Log

        Returns:
            Playwright Page on the Activity Log

        Raises:
            FileNotFoundError: If no saved session exists and manual_login is off
            ValueError: If the saved session is invalid or expired
            RuntimeError: If the browser cannot be started
        """
        headless = settings.HEADLESS if headless is None else headless

        try:
            storage_state = None
            if manual_login:
                headless = False
            else:
                logger.info("Step 1: Loading saved session...")
                self.cookie_manager.load_cookies()
                storage_state = self.cookie_path

            logger.info("Step 2: Launching browser...")
            self.playwright = sync_playwright().start()
            self.browser = self.playwright.chromium.launch(
                headless=headless, args=get_browser_args()
            )
            logger.info(f"Browser launched (headless={headless})")

            logger.info("Step 3: Creating browser context...")
            self.context = create_stealth_context(self.browser, storage_state_path=storage_state)
            self.context.set_default_timeout(settings.DRIVER_TIMEOUT_MS)
            self.page = self.context.new_page()
            apply_stealth_patches(self.page)

            if manual_login:
                self._manual_login(self.page, self.context)
            elif validate_session:
                logger.info("Step 4: Validating session...")
                is_valid, message = self.session_validator.validate_session(self.page)
                if not is_valid:
                    raise ValueError(
                        f"Session validation failed: {message}\n"
                        "Run with --manual-login to sign in again."
                    )

            logger.info("Browser session ready")
            return self.page

        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Could not open authenticated session: {e}")
            self.cleanup()
            raise
        except Exception as e:
            logger.error(f"Unexpected error creating browser: {e}")
            self.cleanup()
            raise RuntimeError(f"Failed to create authenticated browser: {e}") from e

    def _manual_login(self, page: Page, context: BrowserContext) -> None:
        logger.info("Opening Facebook for manual login...")
        page.goto(
            settings.ACTIVITY_LOG_URL,
            wait_until="domcontentloaded",
            timeout=settings.NAVIGATION_TIMEOUT_MS,
        )
        self.prompt("Sign in to Facebook in the browser window, then press Enter here...")
        self.cookie_manager.save_from_context(context)

    def cleanup(self) -> None:
        """Close page, context and browser, and stop Playwright."""
        for name in ("page", "context", "browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                resource.close()
                logger.debug(f"{name.capitalize()} closed")
            except Exception as e:
                logger.debug(f"Error closing {name}: {e}")
            setattr(self, name, None)

        if self.playwright is not None:
            try:
                self.playwright.stop()
                logger.debug("Playwright stopped")
            except Exception as e:
                logger.debug(f"Error stopping playwright: {e}")
            self.playwright = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
        return False
