"""
Tests for DateParser.
"""
from datetime import datetime

import pytest

from src.traversal.date_parser import DateParser

REFERENCE = datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def parser():
    return DateParser()


@pytest.mark.unit
class TestRelativeDates:
    """Test relative labels."""

    def test_today(self, parser):
        assert parser.parse_facebook_date("Today", REFERENCE) == datetime(2024, 6, 15)

    def test_yesterday(self, parser):
        assert parser.parse_facebook_date("yesterday", REFERENCE) == datetime(2024, 6, 14)

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("3 days ago", datetime(2024, 6, 12, 12)),
            ("1 week ago", datetime(2024, 6, 8, 12)),
            ("2 hours ago", datetime(2024, 6, 15, 10)),
            ("2 years ago", datetime(2022, 6, 16, 12)),
        ],
    )
    def test_units_ago(self, parser, label, expected):
        assert parser.parse_facebook_date(label, REFERENCE) == expected


@pytest.mark.unit
class TestAbsoluteDates:
    """Test "Month D, YYYY" style labels."""

    def test_full_date(self, parser):
        assert parser.parse_facebook_date("March 4, 2019", REFERENCE) == datetime(2019, 3, 4)

    def test_abbreviated_month(self, parser):
        assert parser.parse_facebook_date("Sep 9 2020", REFERENCE) == datetime(2020, 9, 9)

    def test_month_day_uses_reference_year(self, parser):
        assert parser.parse_facebook_date("January 2", REFERENCE) == datetime(2024, 1, 2)

    def test_future_month_day_is_last_year(self, parser):
        """Without a year, a date after the reference belongs to the previous year."""
        assert parser.parse_facebook_date("December 25", REFERENCE) == datetime(2023, 12, 25)

    def test_impossible_day_falls_through(self, parser):
        # Not a real date; dateparser may or may not salvage it, but it must not raise
        parser.parse_facebook_date("February 31, 2020", REFERENCE)


@pytest.mark.unit
class TestNormalize:
    """Test normalize() and unparseable input."""

    def test_normalize_iso(self, parser):
        assert parser.normalize("March 4, 2019", REFERENCE) == "2019-03-04"

    @pytest.mark.parametrize("label", [None, "", "   "])
    def test_empty_input(self, parser, label):
        assert parser.normalize(label, REFERENCE) is None

    def test_dateparser_fallback(self, parser):
        assert parser.normalize("2019-03-04", REFERENCE) == "2019-03-04"
