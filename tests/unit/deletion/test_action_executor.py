"""
Tests for ActionExecutor.
"""
import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from config import settings
from src.controller.run_settings import Timing
from src.deletion.action_executor import ActionExecutor
from src.deletion.errors import ErrorKind
from src.safety.recovery_policy import RecoveryPolicy

TIMING = Timing()


@pytest.fixture
def executor(fake_driver):
    return ActionExecutor(fake_driver, timing=TIMING, policy=RecoveryPolicy(max_action_retries=2))


@pytest.mark.unit
class TestSuccessfulAttempt:
    """Menu entry found and confirmed."""

    def test_hide_and_delete_menu(self, fake_driver, executor, make_item):
        """Delete is picked over Hide and confirmed through the Delete? dialog."""
        item = make_item(menu=("Hide", "Delete"), modal="Delete?")
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_success
        assert outcome.record.action_label == "Delete"
        assert outcome.record.action_kind == "delete"
        assert outcome.record.retry_count is None
        assert outcome.record.source_url == fake_driver.address
        assert item.removed

    def test_step_waits_in_order(self, fake_driver, executor, make_item):
        item = make_item()
        fake_driver.items = [item]

        executor.attempt(item)

        assert fake_driver.waits == [
            settings.SCROLL_SETTLE_MS,
            TIMING.menu_open_wait,
            TIMING.modal_appear_wait,
            TIMING.action_complete_wait,
        ]

    def test_first_matching_entry_in_menu_order(self, fake_driver, executor, make_item):
        item = make_item(menu=("Remove Tag", "Delete"), modal="Remove tags?")
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_success
        assert outcome.record.action_label == "Remove Tag"
        assert outcome.record.action_kind == "remove"

    def test_substring_match(self, fake_driver, executor, make_item):
        item = make_item(menu=("Move to trash",), modal="Move to Trash?")
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_success
        assert outcome.record.action_kind == "other"

    def test_implicit_confirmation(self, fake_driver, executor, make_item):
        item = make_item(menu=("Unlike",), modal=None, removes_without_modal=True)
        fake_driver.items = [item, make_item()]

        outcome = executor.attempt(item)

        assert outcome.is_success
        assert outcome.record.action_label == "Unlike"


@pytest.mark.unit
class TestMenuProblems:
    """Empty menus and menus without a target action."""

    def test_no_menu_entries(self, fake_driver, executor, make_item):
        item = make_item(menu=())
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_failed
        assert outcome.error_kind == ErrorKind.NO_MENU_FOUND
        assert fake_driver.outside_clicks == 1

    def test_no_target_action_is_skipped(self, fake_driver, executor, make_item):
        item = make_item(menu=("Hide",))
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_skipped
        assert outcome.error_kind == ErrorKind.NO_TARGET_ACTION
        assert fake_driver.dismissals == 1
        assert item.entry_activations == 0


@pytest.mark.unit
class TestConfirmationRetry:
    """Per-item confirmation retries."""

    def test_retry_bound(self, fake_driver, executor, make_item):
        """With two retries an unconfirmable item gets exactly three confirmation attempts."""
        item = make_item(modal="Delete?", has_control=False)
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_failed
        assert outcome.error_kind == ErrorKind.CONFIRMATION_FAILED
        assert item.entry_activations == 3
        assert item.trigger_activations == 3

    def test_zero_retries(self, fake_driver, make_item):
        item = make_item(modal="Delete?", has_control=False)
        fake_driver.items = [item]
        executor = ActionExecutor(fake_driver, policy=RecoveryPolicy(max_action_retries=0))

        outcome = executor.attempt(item)

        assert outcome.error_kind == ErrorKind.CONFIRMATION_FAILED
        assert item.entry_activations == 1

    def test_success_on_retry_is_tagged(self, fake_driver, executor, make_item):
        item = make_item(modal="Delete?", modal_from_attempt=2)
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.is_success
        assert outcome.record.retry_count == 1
        assert item.removed

    def test_success_on_last_retry(self, fake_driver, executor, make_item):
        item = make_item(modal="Remove?", modal_from_attempt=3, menu=("Remove Reaction",))
        fake_driver.items = [item]

        outcome = executor.attempt(item)

        assert outcome.record.retry_count == 2


@pytest.mark.unit
class TestErrors:
    """Exceptions are classified and converted to Failed outcomes."""

    def test_unknown_error_dismisses_twice(self, fake_driver, executor, make_item):
        item = make_item()
        fake_driver.items = [item]
        fake_driver.raise_on["activate"] = RuntimeError("element detached")

        outcome = executor.attempt(item)

        assert outcome.is_failed
        assert outcome.error_kind == ErrorKind.UNKNOWN_ERROR
        assert fake_driver.dismissals == 2
        assert fake_driver.waits[-2:] == [settings.ERROR_DISMISS_WAIT_MS] * 2

    def test_timeout(self, fake_driver, executor, make_item):
        item = make_item()
        fake_driver.items = [item]
        fake_driver.raise_on["activate"] = PlaywrightTimeoutError("click timed out")

        assert executor.attempt(item).error_kind == ErrorKind.TIMEOUT

    def test_modal_error(self, fake_driver, executor, make_item):
        item = make_item()
        fake_driver.items = [item]
        fake_driver.raise_on["find_modal"] = RuntimeError("dialog vanished")

        assert executor.attempt(item).error_kind == ErrorKind.MODAL_ERROR

    def test_extraction_failure_is_not_fatal(self, fake_driver, executor, make_item):
        item = make_item()
        fake_driver.items = [item]
        fake_driver.raise_on["find_item_container"] = RuntimeError("gone")

        outcome = executor.attempt(item)

        assert outcome.is_success
        assert outcome.record.extracted_date == "Unknown date"
