"""
Locating "more options" triggers and loading more of the activity log.
"""
from typing import Any, Dict, List, Optional

from config import settings
from src.driver.base_driver import Element, PageDriver
from src.utils.logging import get_logger

logger = get_logger(__name__)


class ElementLocator:
    """Finds the next activity item to act on."""

    def __init__(self, driver: PageDriver):
        """
        Initialize ElementLocator.

        Args:
            driver: Page driver
        """
        self.driver = driver

    def find_candidates(self) -> List[Element]:
        """
        Find all menu triggers still eligible on this page load.

        Returns:
            Candidate elements in page order
        """
        candidates = self.driver.find_candidates()
        logger.debug(f"Found {len(candidates)} activity items with \"More options\" buttons")
        return candidates

    def pick_target(self, candidates: List[Element]) -> Optional[Element]:
        """
        Choose the candidate to act on next.

        Prefers the first candidate fully inside the viewport; otherwise the
        first candidate is scrolled into view.

        Args:
            candidates: Result of find_candidates()

        Returns:
            Target element, or None if there are no candidates
        """
        if not candidates:
            return None

        for candidate in candidates:
            if self.driver.is_in_viewport(candidate):
                logger.debug("Found a visible \"More options\" button in viewport")
                return candidate

        target = candidates[0]
        logger.debug("No button in view, scrolling first button into viewport")
        self.driver.scroll_into_view(target)
        self.driver.wait_for(settings.SCROLL_SETTLE_MS)
        return target

    def probe_for_more(self) -> bool:
        """
        Scroll down to trigger lazy loading of more activity items.

        Returns:
            True if new candidates appeared or the page grew
        """
        logger.info("Trying to scroll for more content...")
        height_before = self.driver.content_height()

        for _ in range(settings.SCROLL_PROBE_STEPS):
            self.driver.scroll_by(settings.SCROLL_PROBE_DISTANCE)
            self.driver.wait_for(settings.SCROLL_PROBE_WAIT_MS)
            if self.driver.find_candidates():
                logger.info("New items appeared after scrolling")
                return True

        grew = self.driver.content_height() > height_before
        if grew:
            logger.info("Page height increased, more content may be loading")
        else:
            logger.info("No new content after scrolling")
        return grew

    def scan(self) -> Dict[str, Any]:
        """
        Count what the page currently exposes, for diagnostics.

        Returns:
            Dictionary with candidate and open-menu-entry counts plus the address
        """
        result = {
            "address": self.driver.current_address(),
            "candidates": len(self.driver.find_candidates()),
            "menu_entries": len(self.driver.find_menu_entries()),
        }
        logger.info(
            f"Page scan: {result['candidates']} candidates, "
            f"{result['menu_entries']} open menu entries at {result['address']}"
        )
        return result
