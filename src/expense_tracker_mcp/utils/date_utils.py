"""
Date utilities for parsing periods and date ranges.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Tuple


def parse_period(period: str) -> Tuple[date, date]:
    """
    Parse a period string into (start_date, end_date).

    Supported periods:
    - "this_month", "last_month"
    - "this_year", "last_year"
    - "last_7_days", "last_30_days", "last_90_days"
    - "ytd" (year to date)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period is not recognized
    """
    today = datetime.now().date()

    if period == "this_month":
        return get_month_range(today.year, today.month)

    elif period == "last_month":
        # Calculate previous month
        last_day_last_month = today.replace(day=1) - timedelta(days=1)
        return get_month_range(last_day_last_month.year, last_day_last_month.month)

    elif period == "this_year":
        return date(today.year, 1, 1), date(today.year, 12, 31)

    elif period == "last_year":
        year = today.year - 1
        return date(year, 1, 1), date(year, 12, 31)

    elif period == "last_7_days":
        return today - timedelta(days=7), today

    elif period == "last_30_days":
        return today - timedelta(days=30), today

    elif period == "last_90_days":
        return today - timedelta(days=90), today

    elif period == "ytd":
        # Year to date: from Jan 1 to today
        return date(today.year, 1, 1), today

    else:
        raise ValueError(f"Unknown period: {period}")


def get_month_range(year: int, month: int) -> Tuple[date, date]:
    """
    Get the date range for a specific month.

    Args:
        year: Year (e.g., 2026)
        month: Month (1-12)

    Returns:
        Tuple of (first_day, last_day)

    Raises:
        ValueError: If month is not in valid range (1-12)
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    # Get the last day of the month
    _, last_day = calendar.monthrange(year, month)

    return date(year, month, 1), date(year, month, last_day)


def parse_date(value: str) -> date:
    """
    Parse a "YYYY-MM-DD" string.

    Raises:
        ValueError: If value is not a valid date in that format
    """
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None
