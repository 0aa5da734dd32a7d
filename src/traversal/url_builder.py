"""
URL builder for Facebook Activity Log navigation.
"""

from config import settings
from src.utils.logging import get_logger

logger = get_logger(__name__)

# Every activity log view lives under this path segment
ACTIVITY_LOG_MARKER = "allactivity"


class URLBuilder:
    """Builds Activity Log URLs for an activity-type filter."""

    def __init__(self, base_url: str = settings.ACTIVITY_LOG_URL):
        """
        Initialize URLBuilder.

        Args:
            base_url: Activity Log root (defaults to the signed-in user's log)
        """
        if not base_url or not base_url.strip():
            raise ValueError("Base URL cannot be empty")

        self.base_url = base_url.strip().rstrip("/")

    def build_activity_log_url(self, activity_type: str = "all") -> str:
        """
        Build the Activity Log URL for a filter.

        Args:
            activity_type: One of settings.ACTIVITY_TYPES

        Returns:
            Complete URL string

        Raises:
            ValueError: If activity_type is unknown
        """
        url = f"{self.base_url}{self._subpath(activity_type)}"
        logger.debug(f"Built URL: {url}")
        return url

    def matches(self, address: str, activity_type: str = "all") -> bool:
        """
        Check whether the browser is on the Activity Log view for a filter.

        Args:
            address: Current page URL
            activity_type: Expected filter

        Returns:
            True if the address is an Activity Log page showing that filter
        """
        if not address or ACTIVITY_LOG_MARKER not in address:
            return False

        subpath = self._subpath(activity_type)
        return not subpath or subpath in address

    def _subpath(self, activity_type: str) -> str:
        if activity_type not in settings.ACTIVITY_TYPES:
            raise ValueError(
                f"Unknown activity type: {activity_type!r}. "
                f"Expected one of {sorted(settings.ACTIVITY_TYPES)}"
            )
        return settings.ACTIVITY_TYPES[activity_type]
