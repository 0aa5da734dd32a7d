"""
Date normalisation for the date labels shown on activity-log items.
"""

import re
from datetime import datetime, timedelta
from typing import Optional, cast

import dateparser  # type: ignore[import-untyped]

from src.utils.logging import get_logger

logger = get_logger(__name__)

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

RELATIVE_PATTERNS = [
    (r"(\d+)\s+years?\s+ago", lambda n: timedelta(days=n * 365)),
    (r"(\d+)\s+months?\s+ago", lambda n: timedelta(days=n * 30)),
    (r"(\d+)\s+weeks?\s+ago", lambda n: timedelta(weeks=n)),
    (r"(\d+)\s+days?\s+ago", lambda n: timedelta(days=n)),
    (r"(\d+)\s+hours?\s+ago", lambda n: timedelta(hours=n)),
    (r"(\d+)\s+minutes?\s+ago", lambda n: timedelta(minutes=n)),
]

# Activity-log headers are usually "March 4, 2019" or "March 4"
MONTH_DAY_YEAR = re.compile(r"([a-z]+)\s+(\d{1,2}),?\s*(\d{4})?")


class DateParser:
    """Turns Facebook's fuzzy date labels into datetimes."""

    def __init__(self, default_timezone: Optional[str] = None):
        """
        Initialize DateParser.

        Args:
            default_timezone: Timezone name passed to dateparser (local if None)
        """
        self.default_timezone = default_timezone

    def parse_facebook_date(
        self, date_string: Optional[str], reference_date: Optional[datetime] = None
    ) -> Optional[datetime]:
        """
        Parse a date label such as "2 years ago", "Yesterday" or "March 4, 2019".

        Args:
            date_string: Date label read from the activity item
            reference_date: Reference for relative labels (defaults to now)

        Returns:
            Parsed datetime, or None if the label cannot be parsed
        """
        if not date_string or not date_string.strip():
            return None

        date_string = date_string.strip()
        reference_date = reference_date or datetime.now()

        parsed = self._parse_relative(date_string.lower(), reference_date)
        if parsed is None:
            parsed = self._parse_month_day(date_string.lower(), reference_date)
        if parsed is None:
            parsed = self._parse_with_dateparser(date_string, reference_date)

        if parsed is None:
            logger.debug(f"Could not parse date string: '{date_string}'")
        return parsed

    def normalize(
        self, date_string: Optional[str], reference_date: Optional[datetime] = None
    ) -> Optional[str]:
        """
        Parse a date label into an ISO-8601 date string.

        Returns:
            "YYYY-MM-DD", or None if the label cannot be parsed
        """
        parsed = self.parse_facebook_date(date_string, reference_date)
        return parsed.date().isoformat() if parsed else None

    def _parse_relative(self, text: str, reference_date: datetime) -> Optional[datetime]:
        midnight = reference_date.replace(hour=0, minute=0, second=0, microsecond=0)
        if text == "today":
            return midnight
        if text == "yesterday":
            return midnight - timedelta(days=1)

        for pattern, to_delta in RELATIVE_PATTERNS:
            match = re.search(pattern, text)
            if match:
                return reference_date - to_delta(int(match.group(1)))

        return None

    def _parse_month_day(self, text: str, reference_date: datetime) -> Optional[datetime]:
        match = MONTH_DAY_YEAR.match(text)
        if not match or match.group(1) not in MONTHS:
            return None

        month = MONTHS[match.group(1)]
        day = int(match.group(2))
        year = int(match.group(3)) if match.group(3) else reference_date.year

        try:
            parsed = datetime(year, month, day)
        except ValueError:
            return None

        # Without a year, a date later than today belongs to last year
        if not match.group(3) and parsed > reference_date:
            parsed = parsed.replace(year=year - 1)
        return parsed

    def _parse_with_dateparser(
        self, date_string: str, reference_date: datetime
    ) -> Optional[datetime]:
        parser_settings = {"RELATIVE_BASE": reference_date, "PREFER_DATES_FROM": "past"}
        if self.default_timezone:
            parser_settings["TIMEZONE"] = self.default_timezone

        try:
            parsed = dateparser.parse(date_string, settings=parser_settings)
        except Exception as e:
            logger.debug(f"dateparser failed for '{date_string}': {e}")
            return None

        return cast(Optional[datetime], parsed)
