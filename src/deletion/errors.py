"""
Error kinds and exceptions raised while processing activity items.
"""
from enum import Enum

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class ErrorKind(str, Enum):
    """Failure classifications used for the run summary's error breakdown."""

    NO_CANDIDATES_FOUND = "NoCandidatesFound"
    NO_MENU_FOUND = "NoMenuFound"
    NO_TARGET_ACTION = "NoTargetAction"
    CONFIRMATION_FAILED = "ConfirmationFailed"
    MODAL_ERROR = "ModalError"
    EXTRACTION_ERROR = "ExtractionError"
    TIMEOUT = "Timeout"
    UNKNOWN_ERROR = "UnknownError"


class ModalHandlingError(Exception):
    """Raised when inspecting or clicking a confirmation modal fails."""


class PersistenceError(Exception):
    """Raised when the state file cannot be written."""


def classify_exception(error: BaseException) -> ErrorKind:
    """
    Map an exception raised during an attempt to an ErrorKind.

    Args:
        error: Exception caught at the attempt boundary

    Returns:
        ErrorKind for the error breakdown
    """
    if isinstance(error, ModalHandlingError):
        return ErrorKind.MODAL_ERROR
    if isinstance(error, (PlaywrightTimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    return ErrorKind.UNKNOWN_ERROR
