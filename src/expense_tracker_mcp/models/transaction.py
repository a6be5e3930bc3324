"""
Financial item model: a unified view over income and expense records.
"""

from datetime import date as Date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from expense_tracker_mcp.models.category import Category


class ItemKind(str, Enum):
    """Whether a financial item adds money or spends it."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class FinancialItem(BaseModel):
    """
    Represents a single income or expense entry.

    Incomes never carry a category; expenses may.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    # Required fields
    item_id: int
    kind: ItemKind
    amount: Decimal = Field(ge=0, decimal_places=2, max_digits=19)
    date: Date

    # Descriptive fields
    name: Optional[str] = None
    category: Optional[Category] = None

    # Ownership
    user_id: Optional[int] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        """Get the best display name for this item."""
        return self.name or "Unknown"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def category_name(self) -> Optional[str]:
        """Name of the assigned category, if any."""
        return self.category.name if self.category else None

    @property
    def is_income(self) -> bool:
        return self.kind == ItemKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind == ItemKind.EXPENSE
