"""
Pydantic models for expense tracker data structures.
"""

from expense_tracker_mcp.models.category import Category
from expense_tracker_mcp.models.request import (
    AccountantRequest,
    AccountantUserRelationship,
    InitiatorType,
    RequestStatus,
)
from expense_tracker_mcp.models.statistics import CategoryStatistic, OverallStatistic
from expense_tracker_mcp.models.transaction import FinancialItem, ItemKind
from expense_tracker_mcp.models.user import Role, User

__all__ = [
    "FinancialItem",
    "ItemKind",
    "Category",
    "CategoryStatistic",
    "OverallStatistic",
    "User",
    "Role",
    "AccountantRequest",
    "AccountantUserRelationship",
    "InitiatorType",
    "RequestStatus",
]
