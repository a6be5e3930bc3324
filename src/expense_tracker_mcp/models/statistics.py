"""
Aggregate statistic models produced by the statistics engine.

These are transient values: created per aggregation call and never persisted.
"""

from decimal import Decimal

from pydantic import BaseModel, computed_field


class CategoryStatistic(BaseModel):
    """Accumulated spending for one category within a period."""

    model_config = {"frozen": True}

    name: str
    color: str
    amount: Decimal = Decimal("0.00")
    percentage: int = 0


class OverallStatistic(BaseModel):
    """Income and expense totals across one or more users."""

    model_config = {"frozen": True}

    total_income: Decimal = Decimal("0.00")
    total_expense: Decimal = Decimal("0.00")
    item_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance(self) -> Decimal:
        """Income minus expense."""
        return self.total_income - self.total_expense
