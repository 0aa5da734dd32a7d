"""
One attempt to remove one activity item: open its menu, pick the action, confirm.
"""
from typing import List, Optional, Tuple

from config import settings
from src.controller.run_settings import Timing
from src.deletion.confirmation import ConfirmationResolver
from src.deletion.errors import ErrorKind, classify_exception
from src.deletion.item_extractor import ItemExtractor
from src.deletion.models import DeletionRecord, ItemMetadata, Outcome
from src.driver.base_driver import Element, PageDriver
from src.safety.recovery_policy import RecoveryPolicy
from src.utils.logging import get_logger

logger = get_logger(__name__)


class ActionExecutor:
    """
    Performs a single delete/unlike/remove attempt against one target.

    Menu and modal errors never escape attempt(): they are classified and
    returned as a Failed outcome.
    """

    def __init__(
        self,
        driver: PageDriver,
        timing: Optional[Timing] = None,
        policy: Optional[RecoveryPolicy] = None,
        extractor: Optional[ItemExtractor] = None,
        resolver: Optional[ConfirmationResolver] = None,
        target_actions: Optional[List[str]] = None,
    ):
        """
        Initialize ActionExecutor.

        Args:
            driver: Page driver
            timing: Per-step waits (defaults to Timing())
            policy: Recovery policy bounding confirmation retries
            extractor: Metadata extractor
            resolver: Confirmation resolver
            target_actions: Menu labels acted upon (defaults to settings.TARGET_ACTIONS)
        """
        self.driver = driver
        self.timing = timing or Timing()
        self.policy = policy or RecoveryPolicy()
        self.extractor = extractor or ItemExtractor(driver)
        self.resolver = resolver or ConfirmationResolver(driver)
        self.target_actions = target_actions or settings.TARGET_ACTIONS

    def attempt(self, target: Element) -> Outcome:
        """
        Try to remove the activity item owning ``target``.

        Args:
            target: "More options" trigger chosen by the locator

        Returns:
            Success with a DeletionRecord, Skipped(NoTargetAction), or Failed
        """
        try:
            return self._attempt(target)
        except Exception as e:
            kind = classify_exception(e)
            logger.error(f"Error processing item ({kind.value}): {e}")
            self._dismiss_after_error()
            return Outcome.failed(kind, str(e))

    def _attempt(self, target: Element) -> Outcome:
        metadata = self.extractor.extract(target)

        self.driver.scroll_into_view(target)
        self.driver.wait_for(settings.SCROLL_SETTLE_MS)
        logger.info("Clicking \"More options\" button...")
        self.driver.activate(target)
        self.driver.wait_for(self.timing.menu_open_wait)

        entries = self.driver.find_menu_entries()
        if not entries:
            logger.error("No menu items found, closing menu...")
            self.driver.click_outside()
            self.driver.wait_for(settings.ERROR_DISMISS_WAIT_MS)
            return Outcome.failed(ErrorKind.NO_MENU_FOUND, "Menu did not open")

        logger.info(f"Found {len(entries)} menu items")
        match = self._match_entry(entries)
        if match is None:
            logger.warning("No delete/unlike/remove action found in menu")
            self.driver.press_dismiss()
            self.driver.wait_for(settings.ERROR_DISMISS_WAIT_MS)
            return Outcome.skipped(ErrorKind.NO_TARGET_ACTION, "No target action in menu")

        entry, label = match
        snapshot = self.resolver.take_snapshot()

        logger.info(f"Clicking \"{label}\" menu item...")
        self.driver.activate(entry)
        self.driver.wait_for(self.timing.modal_appear_wait)

        logger.info("Looking for confirmation modal...")
        if self.resolver.resolve(snapshot):
            self.driver.wait_for(self.timing.action_complete_wait)
            return self._success(metadata, label)

        logger.warning("Could not confirm deletion - no confirmation button found")
        return self._retry_confirmation(target, metadata, label)

    def _match_entry(self, entries: List[Element]) -> Optional[Tuple[Element, str]]:
        """Return the first entry, in menu order, whose text contains a target action."""
        for entry in entries:
            text = self.driver.read_text(entry)
            logger.debug(f"Available menu item: \"{text}\"")
            if any(action in text for action in self.target_actions):
                logger.info(f"Found target action: \"{text}\"")
                return entry, text
        return None

    def _retry_confirmation(self, target: Element, metadata: ItemMetadata, label: str) -> Outcome:
        for retry in self.policy.confirmation_retries():
            logger.warning(
                f"Retry attempt {retry}/{self.policy.max_action_retries} for confirmation..."
            )
            self.driver.press_dismiss()
            self.driver.wait_for(settings.DISMISS_WAIT_MS)

            try:
                if self._reconfirm(target, label):
                    logger.info("Retry succeeded!")
                    self.driver.wait_for(self.timing.action_complete_wait)
                    return self._success(metadata, label, retry_count=retry)
            except Exception as e:
                logger.error(f"Retry attempt {retry} failed: {e}")

            self.driver.press_dismiss()
            self.driver.wait_for(settings.DISMISS_WAIT_MS)

        logger.error("All retry attempts failed")
        return Outcome.failed(
            ErrorKind.CONFIRMATION_FAILED,
            f"Confirmation unresolved after {self.policy.max_action_retries} retries",
        )

    def _reconfirm(self, target: Element, label: str) -> bool:
        logger.info("Re-opening menu for retry...")
        self.driver.activate(target)
        self.driver.wait_for(self.timing.menu_open_wait)

        # The menu is re-rendered, so the entry is looked up again by its label
        entry = next(
            (e for e in self.driver.find_menu_entries() if label in self.driver.read_text(e)),
            None,
        )
        if entry is None:
            logger.warning(f"\"{label}\" not found in re-opened menu")
            return False

        logger.info(f"Re-clicking \"{label}\" menu item (retry)")
        self.driver.activate(entry)
        self.driver.wait_for(self.timing.modal_appear_wait)
        return self.resolver.confirm_open_modal()

    def _success(
        self, metadata: ItemMetadata, label: str, retry_count: Optional[int] = None
    ) -> Outcome:
        record = DeletionRecord.create(
            metadata,
            source_url=self.driver.current_address(),
            action_label=label,
            retry_count=retry_count,
        )
        logger.info(f"Successfully deleted item ({metadata.activity_type})")
        return Outcome.success(record)

    def _dismiss_after_error(self) -> None:
        for _ in range(2):
            try:
                self.driver.press_dismiss()
                self.driver.wait_for(settings.ERROR_DISMISS_WAIT_MS)
            except Exception as e:
                logger.debug(f"Could not dismiss dialogs after error: {e}")
