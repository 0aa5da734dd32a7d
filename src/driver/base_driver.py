"""
Page driver interface: the capability set the cleaning loop needs from a page.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

# Opaque element handle owned by the driver (ElementHandle for Playwright)
Element = Any


class PageDriver(ABC):
    """
    Abstract access to the activity-log page.

    The locator, executor and controller only talk to the page through this
    interface, so the same loop runs against a Playwright page or an
    in-memory fake.
    """

    # Candidates and viewport

    @abstractmethod
    def find_candidates(self) -> List[Element]:
        """Return all "more options" triggers not yet passed over, in page order."""

    @abstractmethod
    def is_in_viewport(self, element: Element) -> bool:
        """Return True if the element's bounding box is fully inside the viewport."""

    @abstractmethod
    def scroll_into_view(self, element: Element) -> None:
        """Scroll the element to the centre of the viewport."""

    @abstractmethod
    def mark_passed_over(self, element: Element) -> None:
        """Exclude the element from future find_candidates() calls on this page load."""

    # Interaction

    @abstractmethod
    def activate(self, element: Element) -> None:
        """Click the element."""

    @abstractmethod
    def read_text(self, element: Element) -> str:
        """Return the element's text content, stripped."""

    @abstractmethod
    def find_menu_entries(self) -> List[Element]:
        """Return the entries of the currently open action menu."""

    @abstractmethod
    def find_modal(self, label: str) -> Optional[Element]:
        """Return the dialog labelled ``label`` if one is open."""

    @abstractmethod
    def find_control(self, container: Element, label: str) -> Optional[Element]:
        """Return the control labelled ``label`` inside ``container``."""

    @abstractmethod
    def press_dismiss(self) -> None:
        """Send the dismissal key (Escape)."""

    @abstractmethod
    def click_outside(self) -> None:
        """Click on an empty part of the page to close an open menu."""

    # Item inspection

    @abstractmethod
    def find_item_container(self, element: Element) -> Optional[Element]:
        """Return the activity item enclosing a menu trigger."""

    @abstractmethod
    def query_text(self, container: Element, selector: str) -> Optional[str]:
        """Return the text of the first match of ``selector`` inside ``container``."""

    @abstractmethod
    def query_all_text(self, container: Element, selector: str) -> List[str]:
        """Return the texts of all matches of ``selector`` inside ``container``."""

    @abstractmethod
    def query_attribute(
        self, container: Element, selector: str, attribute: str
    ) -> Optional[str]:
        """Return ``attribute`` of the first match of ``selector`` inside ``container``."""

    # Page

    @abstractmethod
    def scroll_by(self, distance: int) -> None:
        """Scroll the window down by ``distance`` pixels."""

    @abstractmethod
    def content_height(self) -> int:
        """Return the scrollable height of the page body."""

    @abstractmethod
    def page_text(self) -> str:
        """Return the page markup, used for block detection."""

    @abstractmethod
    def current_address(self) -> str:
        """Return the current page URL."""

    @abstractmethod
    def navigate(self, address: str) -> None:
        """Load ``address``."""

    @abstractmethod
    def reload(self) -> None:
        """Reload the current page."""

    @abstractmethod
    def wait_for(self, milliseconds: int) -> None:
        """Suspend for a fixed duration."""
