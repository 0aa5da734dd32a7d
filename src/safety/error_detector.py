"""
Error detector for Facebook messages indicating an action block or throttling.
"""
from typing import List, Optional, Tuple

from src.driver.base_driver import PageDriver
from src.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorDetector:
    """Detects Facebook block and throttling pages."""

    ERROR_INDICATORS = [
        "You're going too fast",
        "This feature is temporarily blocked",
        "Action Blocked",
        "You're Temporarily Blocked",
        "Too many requests",
        "Please slow down",
    ]

    ERROR_URL_PATTERNS = [
        "checkpoint",
        "blocked",
        "restricted",
    ]

    def __init__(self, additional_indicators: Optional[List[str]] = None):
        """
        Initialize ErrorDetector.

        Args:
            additional_indicators: Optional list of additional error indicators
        """
        self.indicators = self.ERROR_INDICATORS.copy()
        if additional_indicators:
            self.indicators.extend(additional_indicators)

    def check_for_errors(self, driver: PageDriver) -> Tuple[bool, Optional[str]]:
        """
        Check the current page for block messages.

        Args:
            driver: Page driver

        Returns:
            Tuple of (error_detected, error_message)
        """
        try:
            address = driver.current_address()
            if self.check_url_for_errors(address):
                logger.warning(f"Error detected in URL: {address}")
                return True, f"Error URL detected: {address}"

            content = driver.page_text().lower()
        except Exception as e:
            # Unreadable page is not treated as a block
            logger.debug(f"Error checking page content: {e}")
            return False, None

        for indicator in self.indicators:
            if indicator.lower() in content:
                logger.warning(f"Error detected in page content: '{indicator}'")
                return True, f"Error message detected: '{indicator}'"

        return False, None

    def check_url_for_errors(self, url: str) -> bool:
        """
        Check URL for error indicators.

        Args:
            url: URL string to check

        Returns:
            True if error indicators found in URL, False otherwise
        """
        url_lower = (url or "").lower()
        return any(pattern in url_lower for pattern in self.ERROR_URL_PATTERNS)
