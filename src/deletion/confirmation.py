"""
Confirmation modal resolution.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from config import settings
from src.deletion.errors import ModalHandlingError
from src.driver.base_driver import PageDriver
from src.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModalKind:
    """A confirmation dialog and the control that confirms it."""

    modal_label: str
    control_label: str


# Checked in order; the first dialog present wins
MODAL_KINDS: List[ModalKind] = [
    ModalKind("Delete?", "Delete"),
    ModalKind("Remove?", "Remove"),
    ModalKind("Remove tags?", "Remove"),
    ModalKind("Move to Trash?", "Move to Trash"),
]


@dataclass(frozen=True)
class PageSnapshot:
    """Candidate count and address captured before a menu entry is clicked."""

    candidate_count: int
    address: str


class ConfirmationResolver:
    """Confirms an action through its modal, or infers it from the page."""

    def __init__(self, driver: PageDriver, modal_kinds: Optional[List[ModalKind]] = None):
        self.driver = driver
        self.modal_kinds = modal_kinds if modal_kinds is not None else MODAL_KINDS

    def take_snapshot(self) -> PageSnapshot:
        return PageSnapshot(
            candidate_count=len(self.driver.find_candidates()),
            address=self.driver.current_address(),
        )

    def resolve(self, before: PageSnapshot) -> bool:
        """
        Resolve confirmation after a menu entry was activated.

        A modal in the table is confirmed through its control. With no modal
        open, a drop in candidate count or an address change since ``before``
        counts as implicit confirmation.

        Args:
            before: Snapshot taken before the menu entry was activated

        Returns:
            True if the action is confirmed

        Raises:
            ModalHandlingError: If inspecting or clicking the page fails
        """
        try:
            found = self._find_open_modal()
            if found is not None:
                return self._confirm(*found)

            logger.info("No modal found, checking if content was affected...")
            self.driver.wait_for(settings.IMPLICIT_CONFIRM_WAIT_MS)
            after = self.take_snapshot()
            if after.candidate_count < before.candidate_count or after.address != before.address:
                logger.info("Content appears to have been deleted (UI changed)")
                return True
            return False
        except ModalHandlingError:
            raise
        except Exception as e:
            raise ModalHandlingError(f"Error while handling confirmation modal: {e}") from e

    def confirm_open_modal(self) -> bool:
        """
        Confirm whichever known modal is open, without the implicit fallback.

        Returns:
            True if a modal was found and its control activated

        Raises:
            ModalHandlingError: If inspecting or clicking the page fails
        """
        try:
            found = self._find_open_modal()
            if found is None:
                logger.warning("No confirmation modal found on retry")
                return False
            return self._confirm(*found)
        except ModalHandlingError:
            raise
        except Exception as e:
            raise ModalHandlingError(f"Error while handling confirmation modal: {e}") from e

    def _find_open_modal(self) -> Optional[Tuple[ModalKind, object]]:
        for kind in self.modal_kinds:
            modal = self.driver.find_modal(kind.modal_label)
            if modal is not None:
                logger.info(f"{kind.modal_label} modal found")
                return kind, modal
        return None

    def _confirm(self, kind: ModalKind, modal: object) -> bool:
        control = self.driver.find_control(modal, kind.control_label)
        if control is None:
            logger.warning(f"{kind.modal_label} modal has no \"{kind.control_label}\" control")
            return False
        logger.info(f"Clicking {kind.control_label} button...")
        self.driver.activate(control)
        return True
