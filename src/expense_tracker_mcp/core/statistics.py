"""
Financial statistics: period totals, balances and per-category breakdowns.

All functions are pure. They accept any iterable of financial items (objects
exposing ``kind``, ``amount``, ``date`` and ``category``), re-filter by date
themselves and never mutate their input. Amounts are summed as Decimal and
returned with two fractional digits.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from expense_tracker_mcp.models.statistics import CategoryStatistic, OverallStatistic
from expense_tracker_mcp.models.transaction import FinancialItem, ItemKind

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal(100)

UNCATEGORIZED_LABEL = "Uncategorized"
UNCATEGORIZED_COLOR = "#95a5a6"
OTHER_LABEL = "Other"
OTHER_COLOR = "#bdc3c7"


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _check_items(items: Optional[Iterable[FinancialItem]]) -> List[FinancialItem]:
    if items is None:
        raise ValueError("items must not be None")
    return list(items)


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date is None or end_date is None:
        raise ValueError("start_date and end_date are required")


def _in_range(item: FinancialItem, start_date: date, end_date: date) -> bool:
    return start_date <= item.date <= end_date


def _sum(items: Iterable[FinancialItem], kind: ItemKind) -> Decimal:
    return sum((item.amount for item in items if item.kind == kind), ZERO)


def percentage_of(amount: Decimal, total: Decimal) -> int:
    """
    Express amount as an integer percentage of total.

    The ratio is rounded half-up to two decimal places before scaling, so
    2/3 becomes 67. A non-positive total is replaced by 1, which keeps the
    call safe but yields amount * 100 for such totals.
    """
    divisor = total if total > 0 else Decimal(1)
    ratio = (amount / divisor).quantize(CENT, rounding=ROUND_HALF_UP)
    return int(ratio * HUNDRED)


def total_income(
    items: Iterable[FinancialItem], start_date: date, end_date: date
) -> Decimal:
    """
    Sum income amounts dated within [start_date, end_date].

    Args:
        items: Financial items of one user
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)

    Returns:
        Total income, zero when nothing matches
    """
    items = _check_items(items)
    _check_range(start_date, end_date)
    in_range = (item for item in items if _in_range(item, start_date, end_date))
    return _money(_sum(in_range, ItemKind.INCOME))


def total_expense(
    items: Iterable[FinancialItem], start_date: date, end_date: date
) -> Decimal:
    """
    Sum expense amounts dated within [start_date, end_date].

    Args:
        items: Financial items of one user
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)

    Returns:
        Total expense, zero when nothing matches
    """
    items = _check_items(items)
    _check_range(start_date, end_date)
    in_range = (item for item in items if _in_range(item, start_date, end_date))
    return _money(_sum(in_range, ItemKind.EXPENSE))


def balance(items: Iterable[FinancialItem]) -> Decimal:
    """Lifetime income minus lifetime expense, ignoring dates."""
    items = _check_items(items)
    return _money(_sum(items, ItemKind.INCOME) - _sum(items, ItemKind.EXPENSE))


def period_balance(
    items: Iterable[FinancialItem], start_date: date, end_date: date
) -> Decimal:
    """Income minus expense within [start_date, end_date]."""
    items = _check_items(items)
    return total_income(items, start_date, end_date) - total_expense(
        items, start_date, end_date
    )


def category_breakdown(
    items: Iterable[FinancialItem],
    start_date: date,
    end_date: date,
    uncategorized_label: str = UNCATEGORIZED_LABEL,
    uncategorized_color: str = UNCATEGORIZED_COLOR,
) -> List[CategoryStatistic]:
    """
    Group in-range expenses by category name.

    Expenses without a category are pooled into a synthetic bucket which is
    only reported when its sum is positive. Percentages are relative to the
    period's total expense.

    Args:
        items: Financial items of one user
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)
        uncategorized_label: Name of the bucket for items without a category
        uncategorized_color: Colour of that bucket

    Returns:
        Category statistics sorted by amount, largest first; equal amounts
        keep the order in which their categories were first seen
    """
    items = _check_items(items)
    _check_range(start_date, end_date)

    amounts: Dict[str, Decimal] = {}
    colors: Dict[str, str] = {}
    uncategorized = ZERO

    for item in items:
        if item.kind != ItemKind.EXPENSE or not _in_range(item, start_date, end_date):
            continue
        if item.category is None:
            uncategorized += item.amount
            continue
        name = item.category.name
        amounts[name] = amounts.get(name, ZERO) + item.amount
        colors.setdefault(name, item.category.color)

    if uncategorized > 0:
        amounts[uncategorized_label] = amounts.get(uncategorized_label, ZERO) + uncategorized
        colors.setdefault(uncategorized_label, uncategorized_color)

    total = sum(amounts.values(), ZERO)
    return _build_statistics(amounts, colors, total)


def _build_statistics(
    amounts: Dict[str, Decimal], colors: Dict[str, str], total: Decimal
) -> List[CategoryStatistic]:
    stats = [
        CategoryStatistic(
            name=name,
            color=colors[name],
            amount=_money(amount),
            percentage=percentage_of(amount, total),
        )
        for name, amount in amounts.items()
    ]
    return sorted(stats, key=lambda stat: stat.amount, reverse=True)


def top_categories(
    stats: Sequence[CategoryStatistic],
    limit: int = 4,
    other_label: str = OTHER_LABEL,
    other_color: str = OTHER_COLOR,
) -> List[CategoryStatistic]:
    """
    Keep the largest categories and fold the rest into one bucket.

    Args:
        stats: Category statistics, already sorted largest first
        limit: Number of categories to keep as-is
        other_label: Name of the folded bucket
        other_color: Colour of the folded bucket

    Returns:
        At most limit + 1 statistics
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")

    head = list(stats[:limit])
    other_amount = sum((stat.amount for stat in stats[limit:]), ZERO)
    if other_amount > 0:
        total = sum((stat.amount for stat in stats), ZERO)
        head.append(
            CategoryStatistic(
                name=other_label,
                color=other_color,
                amount=_money(other_amount),
                percentage=percentage_of(other_amount, total),
            )
        )
    return head


def merge_breakdowns(
    breakdowns: Iterable[Sequence[CategoryStatistic]],
) -> List[CategoryStatistic]:
    """
    Combine breakdowns of several users into one.

    Buckets with the same name are summed and keep the first colour seen;
    percentages are recomputed against the combined total.
    """
    amounts: Dict[str, Decimal] = {}
    colors: Dict[str, str] = {}
    for breakdown in breakdowns:
        for stat in breakdown:
            amounts[stat.name] = amounts.get(stat.name, ZERO) + stat.amount
            colors.setdefault(stat.name, stat.color)

    total = sum(amounts.values(), ZERO)
    return _build_statistics(amounts, colors, total)


def overall_statistics(
    item_groups: Iterable[Iterable[FinancialItem]],
    start_date: date,
    end_date: date,
) -> OverallStatistic:
    """
    Total income and expense across several users.

    Args:
        item_groups: One collection of financial items per user
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)

    Returns:
        Period-scoped totals; item_count counts every item regardless of date
    """
    if item_groups is None:
        raise ValueError("item_groups must not be None")

    income = ZERO
    expense = ZERO
    count = 0
    for group in item_groups:
        items = _check_items(group)
        income += total_income(items, start_date, end_date)
        expense += total_expense(items, start_date, end_date)
        count += len(items)

    return OverallStatistic(total_income=income, total_expense=expense, item_count=count)
