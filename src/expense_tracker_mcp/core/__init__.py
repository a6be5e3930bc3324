"""
Core functionality for the expense tracker MCP server.
"""

from expense_tracker_mcp.core.colors import color_for, ensure_unique_colors
from expense_tracker_mcp.core.decoder import LedgerData, decode_ledger, encode_ledger
from expense_tracker_mcp.core.exceptions import (
    AccessDeniedError,
    DecodeError,
    ExpenseTrackerError,
    LedgerNotFoundError,
    UserNotFoundError,
    WorkflowError,
)
from expense_tracker_mcp.core.ledger import Ledger
from expense_tracker_mcp.core.workflow import RelationshipBook

__all__ = [
    "Ledger",
    "LedgerData",
    "RelationshipBook",
    "decode_ledger",
    "encode_ledger",
    "color_for",
    "ensure_unique_colors",
    "ExpenseTrackerError",
    "AccessDeniedError",
    "DecodeError",
    "LedgerNotFoundError",
    "UserNotFoundError",
    "WorkflowError",
]
