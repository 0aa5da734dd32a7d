"""
Playwright implementation of the page driver.
"""
from typing import List, Optional

from playwright.sync_api import ElementHandle, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from config import settings
from src.driver.base_driver import PageDriver
from src.utils.logging import get_logger

logger = get_logger(__name__)

PASSED_OVER_ATTRIBUTE = "data-cleaner-passed"
CANDIDATE_SELECTOR = f'div[aria-label="More options"]:not([{PASSED_OVER_ATTRIBUTE}])'
MENU_ENTRY_SELECTOR = 'div[role="menuitem"]'

IN_VIEWPORT_SCRIPT = """
el => {
    const rect = el.getBoundingClientRect();
    return rect.top >= 0 && rect.left >= 0 &&
        rect.bottom <= window.innerHeight && rect.right <= window.innerWidth;
}
"""

# Closest activity item container, falling back to four levels up
ITEM_CONTAINER_SCRIPT = """
el => el.closest('div[aria-label="Activity Log Item"]') ||
    el.closest('div[role="article"]') ||
    el.closest('div[role="listitem"]') ||
    el.closest('div[data-pagelet*="activity"]') ||
    (el.parentElement && el.parentElement.parentElement &&
     el.parentElement.parentElement.parentElement &&
     el.parentElement.parentElement.parentElement.parentElement) ||
    null
"""


class PlaywrightPageDriver(PageDriver):
    """Drives the activity log through a Playwright Page."""

    def __init__(self, page: Page, timeout: Optional[int] = None):
        """
        Initialize PlaywrightPageDriver.

        Args:
            page: Playwright Page object (from BrowserManager)
            timeout: Click timeout in milliseconds (defaults to settings.DRIVER_TIMEOUT_MS)
        """
        self.page = page
        self.timeout = timeout or settings.DRIVER_TIMEOUT_MS

    def find_candidates(self) -> List[ElementHandle]:
        return self.page.query_selector_all(CANDIDATE_SELECTOR)

    def is_in_viewport(self, element: ElementHandle) -> bool:
        try:
            return bool(element.evaluate(IN_VIEWPORT_SCRIPT))
        except Exception as e:
            logger.debug(f"Viewport check failed: {e}")
            return False

    def scroll_into_view(self, element: ElementHandle) -> None:
        element.evaluate("el => el.scrollIntoView({behavior: 'smooth', block: 'center'})")

    def mark_passed_over(self, element: ElementHandle) -> None:
        element.evaluate(f"el => el.setAttribute('{PASSED_OVER_ATTRIBUTE}', '1')")

    def activate(self, element: ElementHandle) -> None:
        element.click(timeout=self.timeout)

    def read_text(self, element: ElementHandle) -> str:
        return (element.text_content() or "").strip()

    def find_menu_entries(self) -> List[ElementHandle]:
        return self.page.query_selector_all(MENU_ENTRY_SELECTOR)

    def find_modal(self, label: str) -> Optional[ElementHandle]:
        return self.page.query_selector(f'div[aria-label="{label}"]')

    def find_control(self, container: ElementHandle, label: str) -> Optional[ElementHandle]:
        return container.query_selector(f'div[aria-label="{label}"]')

    def press_dismiss(self) -> None:
        self.page.keyboard.press("Escape")

    def click_outside(self) -> None:
        self.page.evaluate("() => document.body.click()")

    def find_item_container(self, element: ElementHandle) -> Optional[ElementHandle]:
        try:
            handle = element.evaluate_handle(ITEM_CONTAINER_SCRIPT)
            return handle.as_element()
        except Exception as e:
            logger.debug(f"Could not resolve item container: {e}")
            return None

    def query_text(self, container: ElementHandle, selector: str) -> Optional[str]:
        match = container.query_selector(selector)
        if match is None:
            return None
        return match.text_content()

    def query_all_text(self, container: ElementHandle, selector: str) -> List[str]:
        return [match.text_content() or "" for match in container.query_selector_all(selector)]

    def query_attribute(
        self, container: ElementHandle, selector: str, attribute: str
    ) -> Optional[str]:
        match = container.query_selector(selector)
        if match is None:
            return None
        return match.get_attribute(attribute)

    def scroll_by(self, distance: int) -> None:
        self.page.evaluate("distance => window.scrollBy(0, distance)", distance)

    def content_height(self) -> int:
        return int(self.page.evaluate("() => document.body.scrollHeight"))

    def page_text(self) -> str:
        return self.page.content()

    def current_address(self) -> str:
        return self.page.url

    def navigate(self, address: str) -> None:
        logger.info(f"Navigating to: {address}")
        try:
            self.page.goto(
                address, wait_until="domcontentloaded", timeout=settings.NAVIGATION_TIMEOUT_MS
            )
        except PlaywrightTimeoutError as e:
            # The fixed page_reload_wait that follows gives the page more time
            logger.warning(f"Timeout navigating to {address}: {e}")

    def reload(self) -> None:
        try:
            self.page.reload(wait_until="domcontentloaded", timeout=settings.NAVIGATION_TIMEOUT_MS)
        except PlaywrightTimeoutError as e:
            logger.warning(f"Timeout reloading page: {e}")

    def wait_for(self, milliseconds: int) -> None:
        self.page.wait_for_timeout(milliseconds)
