"""
Bounded retry and recovery decisions for the cleaning loop.
"""
from enum import Enum
from typing import Iterator, Optional

from config import settings
from src.utils.logging import get_logger

logger = get_logger(__name__)


class RecoveryAction(str, Enum):
    """What the controller does after the locator finds nothing."""

    PROBE = "probe"  # Scroll a little and look again
    RELOAD = "reload"  # Full page reload
    TERMINATE = "terminate"  # No more items


class RecoveryPolicy:
    """
    Tracks the no-candidates counters and bounds per-item confirmation retries.

    consecutive_failures counts locator calls in a row that found nothing;
    page_refreshes counts reloads performed during the run.
    """

    def __init__(
        self,
        max_consecutive_failures: Optional[int] = None,
        max_page_refreshes: Optional[int] = None,
        max_action_retries: Optional[int] = None,
        page_refreshes: int = 0,
    ):
        """
        Initialize RecoveryPolicy.

        Args:
            max_consecutive_failures: Empty locator calls before a reload
            max_page_refreshes: Reloads allowed before the run terminates
            max_action_retries: Confirmation retries per item
            page_refreshes: Reloads already performed (restored from stats)
        """
        self.max_consecutive_failures = (
            settings.MAX_CONSECUTIVE_FAILURES
            if max_consecutive_failures is None
            else max_consecutive_failures
        )
        self.max_page_refreshes = (
            settings.MAX_PAGE_REFRESHES if max_page_refreshes is None else max_page_refreshes
        )
        self.max_action_retries = (
            settings.MAX_ACTION_RETRIES if max_action_retries is None else max_action_retries
        )

        self.consecutive_failures = 0
        self.page_refreshes = page_refreshes

    def confirmation_retries(self) -> Iterator[int]:
        """Yield retry numbers 1..max_action_retries."""
        return iter(range(1, self.max_action_retries + 1))

    def record_candidates_found(self) -> None:
        self.consecutive_failures = 0

    def record_no_candidates(self) -> RecoveryAction:
        """
        Register an empty locator call and decide what to do next.

        Returns:
            PROBE while below the failure limit; RELOAD when the limit is hit
            and reloads remain; TERMINATE when reloads are exhausted
        """
        self.consecutive_failures += 1

        if self.consecutive_failures < self.max_consecutive_failures:
            logger.info(
                f"No items found (attempt {self.consecutive_failures}/"
                f"{self.max_consecutive_failures})"
            )
            return RecoveryAction.PROBE

        if self.page_refreshes < self.max_page_refreshes:
            self.page_refreshes += 1
            self.consecutive_failures = 0
            logger.warning(
                f"Reached {self.max_consecutive_failures} consecutive empty attempts, "
                f"refreshing page ({self.page_refreshes}/{self.max_page_refreshes})"
            )
            return RecoveryAction.RELOAD

        logger.info(
            f"No items found after {self.page_refreshes} page refreshes, "
            "assuming all activities are deleted"
        )
        return RecoveryAction.TERMINATE

    def reset(self) -> None:
        """Zero both counters at the start of a run."""
        self.consecutive_failures = 0
        self.page_refreshes = 0
