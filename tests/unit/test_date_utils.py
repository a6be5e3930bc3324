"""
Unit tests for date utilities.
"""

from datetime import date

import pytest
from freezegun import freeze_time

from expense_tracker_mcp.utils.date_utils import get_month_range, parse_date, parse_period


class TestParsePeriod:
    """Tests for parse_period function."""

    @freeze_time("2026-01-15")
    def test_parse_this_month(self):
        """Test parsing 'this_month' period."""
        start, end = parse_period("this_month")
        assert start == date(2026, 1, 1)
        assert end == date(2026, 1, 31)

    @freeze_time("2026-01-15")
    def test_parse_last_month(self):
        """Test parsing 'last_month' period across a year boundary."""
        start, end = parse_period("last_month")
        assert start == date(2025, 12, 1)
        assert end == date(2025, 12, 31)

    @freeze_time("2026-01-15")
    def test_parse_this_year(self):
        start, end = parse_period("this_year")
        assert (start, end) == (date(2026, 1, 1), date(2026, 12, 31))

    @freeze_time("2026-01-15")
    def test_parse_last_year(self):
        start, end = parse_period("last_year")
        assert (start, end) == (date(2025, 1, 1), date(2025, 12, 31))

    @freeze_time("2026-01-15")
    def test_parse_last_7_days(self):
        """Test parsing 'last_7_days' period."""
        start, end = parse_period("last_7_days")
        # Should be 7 days ago to today
        assert start == date(2026, 1, 8)
        assert end == date(2026, 1, 15)

    @freeze_time("2026-01-15")
    def test_parse_last_30_days(self):
        start, end = parse_period("last_30_days")
        assert (start, end) == (date(2025, 12, 16), date(2026, 1, 15))

    @freeze_time("2026-01-15")
    def test_parse_last_90_days(self):
        start, end = parse_period("last_90_days")
        assert (start, end) == (date(2025, 10, 17), date(2026, 1, 15))

    @freeze_time("2026-01-15")
    def test_parse_ytd(self):
        """Test parsing 'ytd' (year to date) period."""
        start, end = parse_period("ytd")
        assert (start, end) == (date(2026, 1, 1), date(2026, 1, 15))

    def test_parse_invalid_period(self):
        """Test that invalid period raises ValueError."""
        with pytest.raises(ValueError, match="Unknown period"):
            parse_period("invalid_period")

    @freeze_time("2026-03-15")
    def test_parse_last_month_march(self):
        """Test last_month when current month is March."""
        start, end = parse_period("last_month")
        # February 2026 (not a leap year)
        assert (start, end) == (date(2026, 2, 1), date(2026, 2, 28))


class TestGetMonthRange:
    """Tests for get_month_range function."""

    def test_get_month_range_february_leap_year(self):
        assert get_month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_get_month_range_april(self):
        assert get_month_range(2026, 4) == (date(2026, 4, 1), date(2026, 4, 30))

    def test_get_month_range_invalid_month(self):
        """Test that invalid month raises ValueError."""
        with pytest.raises(ValueError):
            get_month_range(2026, 13)

        with pytest.raises(ValueError):
            get_month_range(2026, 0)


class TestParseDate:
    """Tests for parse_date function."""

    def test_parse_valid_date(self):
        assert parse_date("2024-01-31") == date(2024, 1, 31)

    @pytest.mark.parametrize("value", ["01/15/2024", "2024-02-30", "", None])
    def test_parse_invalid_date(self, value):
        with pytest.raises(ValueError, match="expected YYYY-MM-DD"):
            parse_date(value)
