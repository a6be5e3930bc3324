"""
Utility functions for the expense tracker MCP server.
"""

from expense_tracker_mcp.utils.date_utils import get_month_range, parse_date, parse_period
from expense_tracker_mcp.utils.money import format_with_abbreviation

__all__ = [
    "parse_period",
    "parse_date",
    "get_month_range",
    "format_with_abbreviation",
]
