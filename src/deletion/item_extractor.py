"""
Item extractor for reading metadata off an activity item before acting on it.
"""
from typing import List, Optional

from src.deletion.models import ItemMetadata
from src.driver.base_driver import Element, PageDriver
from src.traversal.date_parser import DateParser
from src.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_DATE = "Unknown date"
UNKNOWN_ACTIVITY = "Unknown activity"
NO_CONTENT = "No content extracted"

MAX_SNIPPET_LENGTH = 100
MIN_CONTENT_LENGTH = 10

DATE_SELECTOR = "h2 span.html-span > span"
DATE_FALLBACK_SELECTORS = [
    'span[role="text"] a',
    '[data-testid*="timestamp"]',
    "abbr",
    "h2 span",
    'a[href*="story_fbid"]',
    "span.timestampContent",
]

TYPE_SELECTOR = 'div:first-child > span[dir="auto"] > span.html-span > span.html-span > span > div'

CONTENT_SELECTOR = 'div:nth-child(2) > span[dir="auto"] > span.html-span > span.html-span'
CONTENT_FALLBACK_SELECTORS = [
    'div[dir="auto"]',
    'span[dir="auto"]',
    "div.userContent",
    'div[data-ad-preview="message"]',
    "span.userContent",
]

# Texts containing these are timestamps, not content
TIME_PHRASES = ["minutes ago", "hours ago", "seconds ago", "yesterday", "week ago"]

LINK_SELECTOR = 'a[aria-label="View"]'

# Ordered keyword heuristic used when the type element is missing
TYPE_KEYWORDS = [
    (("liked", "reacted", "reaction"), "Like/Reaction"),
    (("comment",), "Comment"),
    (("post", "shared", "status"), "Post"),
    (("tag", "tagged"), "Tag"),
]


def truncate_snippet(text: str) -> str:
    """Cut text to the snippet length, marking truncation with "..."."""
    if len(text) > MAX_SNIPPET_LENGTH:
        return text[:MAX_SNIPPET_LENGTH] + "..."
    return text


class ItemExtractor:
    """
    Reads date, activity type, content and link from an activity item.

    Extraction is best-effort: every field has a placeholder and no failure
    here ever aborts the attempt.
    """

    def __init__(self, driver: PageDriver, date_parser: Optional[DateParser] = None):
        """
        Initialize ItemExtractor.

        Args:
            driver: Page driver
            date_parser: Parser used to normalise the extracted date
        """
        self.driver = driver
        self.date_parser = date_parser or DateParser()

    def extract(self, target: Element) -> ItemMetadata:
        """
        Extract metadata for the item owning a menu trigger.

        Args:
            target: The "more options" trigger about to be activated

        Returns:
            ItemMetadata with placeholders for anything not found
        """
        try:
            container = self.driver.find_item_container(target)
        except Exception as e:
            logger.debug(f"Could not locate activity item: {e}")
            container = None

        if container is None:
            logger.debug("No activity item container found, using placeholders")
            return ItemMetadata(
                extracted_date=UNKNOWN_DATE,
                activity_type=UNKNOWN_ACTIVITY,
                content_snippet=NO_CONTENT,
            )

        extracted_date = self._extract_date(container)
        parsed_date = None
        if extracted_date != UNKNOWN_DATE:
            parsed_date = self.date_parser.normalize(extracted_date)

        metadata = ItemMetadata(
            extracted_date=extracted_date,
            activity_type=self._extract_activity_type(container),
            content_snippet=self._extract_content(container),
            originating_link=self._extract_link(container),
            parsed_date=parsed_date,
        )

        logger.info("---------- PROCESSING ACTIVITY ----------")
        logger.info(f"Date: {metadata.extracted_date}")
        logger.info(f"Type: {metadata.activity_type}")
        if metadata.content_snippet != NO_CONTENT:
            logger.info(f"Content: {metadata.content_snippet}")
        if metadata.originating_link:
            logger.debug(f"Link: {metadata.originating_link}")

        return metadata

    def _extract_date(self, container: Element) -> str:
        for selector in [DATE_SELECTOR] + DATE_FALLBACK_SELECTORS:
            text = self._first_text(container, selector)
            if text:
                return text
        return UNKNOWN_DATE

    def _extract_activity_type(self, container: Element) -> str:
        text = self._first_text(container, TYPE_SELECTOR)
        if text:
            return text

        try:
            item_text = self.driver.read_text(container).lower()
        except Exception as e:
            logger.debug(f"Could not read activity item text: {e}")
            return UNKNOWN_ACTIVITY

        for keywords, activity_type in TYPE_KEYWORDS:
            if any(keyword in item_text for keyword in keywords):
                return activity_type
        return "Other activity"

    def _extract_content(self, container: Element) -> str:
        text = self._first_text(container, CONTENT_SELECTOR)
        if text:
            return truncate_snippet(text)

        for selector in CONTENT_FALLBACK_SELECTORS:
            for candidate in self._all_texts(container, selector):
                if len(candidate) > MIN_CONTENT_LENGTH and not any(
                    phrase in candidate for phrase in TIME_PHRASES
                ):
                    return truncate_snippet(candidate)

        return NO_CONTENT

    def _extract_link(self, container: Element) -> Optional[str]:
        try:
            return self.driver.query_attribute(container, LINK_SELECTOR, "href")
        except Exception as e:
            logger.debug(f"Could not extract activity link: {e}")
            return None

    def _first_text(self, container: Element, selector: str) -> Optional[str]:
        try:
            text = self.driver.query_text(container, selector)
        except Exception as e:
            logger.debug(f"Selector '{selector}' failed: {e}")
            return None
        if text and text.strip():
            return text.strip()
        return None

    def _all_texts(self, container: Element, selector: str) -> List[str]:
        try:
            return [text.strip() for text in self.driver.query_all_text(container, selector)]
        except Exception as e:
            logger.debug(f"Selector '{selector}' failed: {e}")
            return []
