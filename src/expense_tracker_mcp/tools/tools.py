"""
MCP tool definitions for expense tracker data.

Exposes ledger, statistics and relationship workflow functionality through the
Model Context Protocol.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from expense_tracker_mcp.config import Settings, get_settings
from expense_tracker_mcp.core import statistics
from expense_tracker_mcp.core.authorization import (
    require_access,
    require_self_or_admin,
    visible_user_ids,
)
from expense_tracker_mcp.core.colors import ensure_unique_colors
from expense_tracker_mcp.core.ledger import Ledger
from expense_tracker_mcp.models.request import AccountantRequest
from expense_tracker_mcp.models.statistics import CategoryStatistic
from expense_tracker_mcp.models.transaction import ItemKind
from expense_tracker_mcp.models.user import User
from expense_tracker_mcp.utils.date_utils import parse_date, parse_period
from expense_tracker_mcp.utils.money import format_with_abbreviation


def with_unique_colors(stats: Sequence[CategoryStatistic]) -> List[CategoryStatistic]:
    """Re-colour statistics so no two of them share a colour."""
    colors = ensure_unique_colors(
        [stat.name for stat in stats], [stat.color for stat in stats]
    )
    return [stat.model_copy(update={"color": colors[stat.name]}) for stat in stats]


class ExpenseTrackerTools:
    """Collection of MCP tools for querying expense tracker data."""

    def __init__(self, ledger: Ledger, settings: Optional[Settings] = None):
        """
        Initialize tools with a ledger.

        Args:
            ledger: Ledger instance
            settings: Optional settings; defaults to get_settings()
        """
        self.ledger = ledger
        self.settings = settings or get_settings()

    def _resolve_range(
        self,
        period: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> Tuple[date, date]:
        # An explicit period wins, then explicit dates, then the current month
        if period:
            return parse_period(period)
        if start_date is None and end_date is None:
            return parse_period("this_month")
        start = parse_date(start_date) if start_date else date.min
        end = parse_date(end_date) if end_date else date.max
        return start, end

    def _authorize(self, user_id: int, viewer_id: Optional[int]) -> User:
        owner = self.ledger.get_user(user_id)
        viewer = owner if viewer_id is None else self.ledger.get_user(viewer_id)
        require_access(viewer, owner.user_id, self.ledger.workflow.relationships)
        return owner

    def _money(self, amount: Decimal) -> Dict[str, str]:
        return {
            "amount": str(amount),
            "formatted": format_with_abbreviation(amount, self.settings.currency_symbol),
        }

    def _breakdown(self, user_id: int, start: date, end: date) -> List[CategoryStatistic]:
        return statistics.category_breakdown(
            self.ledger.get_items(user_id=user_id),
            start,
            end,
            uncategorized_label=self.settings.uncategorized_label,
            uncategorized_color=self.settings.uncategorized_color,
        )

    @staticmethod
    def _period(start: date, end: date) -> Dict[str, str]:
        return {"start_date": start.isoformat(), "end_date": end.isoformat()}

    @staticmethod
    def _request_dict(request: AccountantRequest) -> Dict[str, Any]:
        return request.model_dump(mode="json")

    def get_items(
        self,
        user_id: int,
        viewer_id: Optional[int] = None,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        kind: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 100,
    ) -> Dict[str, Any]:
        """
        Get a user's incomes and expenses with optional filters.

        Args:
            user_id: Owner of the items
            viewer_id: User asking (defaults to the owner)
            period: Period shorthand (this_month, last_30_days, ytd, etc.)
            start_date: Filter by date >= this (YYYY-MM-DD)
            end_date: Filter by date <= this (YYYY-MM-DD)
            kind: INCOME or EXPENSE
            category: Filter by category name (case-insensitive substring match)
            limit: Maximum number of items to return (default: 100)

        Returns:
            Dict with item count and list of items
        """
        self._authorize(user_id, viewer_id)

        start = end = None
        if period or start_date or end_date:
            start, end = self._resolve_range(period, start_date, end_date)

        items = self.ledger.get_items(
            user_id=user_id,
            start_date=start,
            end_date=end,
            kind=ItemKind(kind.upper()) if kind else None,
            category=category,
            limit=limit,
        )

        return {
            "count": len(items),
            "items": [item.model_dump(mode="json") for item in items],
        }

    def search_items(
        self,
        user_id: int,
        query: str,
        viewer_id: Optional[int] = None,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """
        Free-text search of a user's items by name.

        Args:
            user_id: Owner of the items
            query: Search query (case-insensitive)
            viewer_id: User asking (defaults to the owner)
            limit: Maximum results (default: 50)

        Returns:
            Dict with item count and list of matching items
        """
        self._authorize(user_id, viewer_id)
        items = self.ledger.search_items(query=query, user_id=user_id, limit=limit)

        return {
            "count": len(items),
            "items": [item.model_dump(mode="json") for item in items],
        }

    def get_financial_summary(
        self,
        user_id: int,
        viewer_id: Optional[int] = None,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get period income and expense together with the lifetime balance.

        The balance covers all time while income and expense are
        limited to the period; period_balance is reported separately.

        Returns:
            Dict with income, expense, balance and period_balance
        """
        self._authorize(user_id, viewer_id)
        start, end = self._resolve_range(period, start_date, end_date)
        items = self.ledger.get_items(user_id=user_id)

        return {
            "user_id": user_id,
            "period": self._period(start, end),
            "income": self._money(statistics.total_income(items, start, end)),
            "expense": self._money(statistics.total_expense(items, start, end)),
            "balance": self._money(statistics.balance(items)),
            "period_balance": self._money(statistics.period_balance(items, start, end)),
        }

    def get_category_breakdown(
        self,
        user_id: int,
        viewer_id: Optional[int] = None,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get spending by category with percentages and distinct chart colours.

        Returns:
            Dict with total expense and the category statistics, largest first
        """
        self._authorize(user_id, viewer_id)
        start, end = self._resolve_range(period, start_date, end_date)

        stats = with_unique_colors(self._breakdown(user_id, start, end))
        total = statistics.total_expense(self.ledger.get_items(user_id=user_id), start, end)

        return {
            "user_id": user_id,
            "period": self._period(start, end),
            "total_expense": str(total),
            "category_count": len(stats),
            "categories": [stat.model_dump(mode="json") for stat in stats],
        }

    def get_dashboard(self, user_id: int, viewer_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Get the current-month dashboard of a user.

        Returns:
            Dict with the monthly summary, the top categories (the rest folded
            into one bucket) and the most recent expenses
        """
        self._authorize(user_id, viewer_id)
        start, end = parse_period("this_month")

        summary = self.get_financial_summary(user_id, viewer_id, period="this_month")
        chart = statistics.top_categories(
            self._breakdown(user_id, start, end),
            limit=self.settings.top_categories,
            other_label=self.settings.other_label,
            other_color=self.settings.other_color,
        )
        recent = self.ledger.get_items(
            user_id=user_id,
            kind=ItemKind.EXPENSE,
            limit=self.settings.recent_items_limit,
        )

        return {
            "user_id": user_id,
            "period": summary["period"],
            "income": summary["income"],
            "expense": summary["expense"],
            "balance": summary["balance"],
            "chart": [stat.model_dump(mode="json") for stat in with_unique_colors(chart)],
            "recent_expenses": [item.model_dump(mode="json") for item in recent],
        }

    def get_overall_statistics(
        self,
        viewer_id: int,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Get combined statistics over every user the viewer may see.

        Accountants see their clients, admins every USER account, and users
        only themselves.

        Args:
            viewer_id: User asking
            period: Period shorthand
            start_date: Start date (YYYY-MM-DD)
            end_date: End date (YYYY-MM-DD)
            user_id: Optionally restrict to one visible user

        Returns:
            Dict with totals, item count, lifetime balance and merged breakdown
        """
        viewer = self.ledger.get_user(viewer_id)
        start, end = self._resolve_range(period, start_date, end_date)
        relationships = self.ledger.workflow.relationships

        if user_id is not None:
            require_access(viewer, user_id, relationships)
            user_ids = [self.ledger.get_user(user_id).user_id]
        else:
            user_ids = visible_user_ids(viewer, self.ledger.get_users(), relationships)

        groups = [self.ledger.get_items(user_id=uid) for uid in user_ids]
        overall = statistics.overall_statistics(groups, start, end)
        lifetime_balance = sum(
            (statistics.balance(items) for items in groups), statistics.ZERO
        )
        breakdown = with_unique_colors(
            statistics.merge_breakdowns(
                self._breakdown(uid, start, end) for uid in user_ids
            )
        )

        return {
            "viewer_id": viewer_id,
            "user_ids": user_ids,
            "period": self._period(start, end),
            "total_income": self._money(overall.total_income),
            "total_expense": self._money(overall.total_expense),
            "period_balance": self._money(overall.balance),
            "balance": self._money(lifetime_balance),
            "item_count": overall.item_count,
            "categories": [stat.model_dump(mode="json") for stat in breakdown],
        }

    def get_category_colors(
        self, names: List[str], existing_colors: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Assign distinct chart colours to category names.

        Args:
            names: Category names shown together
            existing_colors: Optional current colours matching names by position

        Returns:
            Dict mapping each name to its colour
        """
        return {"colors": ensure_unique_colors(names, existing_colors)}

    def list_relationship_requests(
        self, user_id: int, viewer_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        List a user's incoming and outgoing relationship requests.

        Only the user themself or an admin may list them.

        Returns:
            Dict with incoming and outgoing requests (newest first) and the
            current accountant or clients
        """
        party = self.ledger.get_user(user_id)
        viewer = party if viewer_id is None else self.ledger.get_user(viewer_id)
        require_self_or_admin(viewer, party.user_id)
        workflow = self.ledger.workflow

        return {
            "user_id": user_id,
            "incoming": [self._request_dict(req) for req in workflow.incoming(party)],
            "outgoing": [self._request_dict(req) for req in workflow.outgoing(party)],
            "accountant_id": workflow.accountant_of(user_id),
            "client_ids": workflow.clients_of(user_id),
        }

    def send_relationship_request(self, sender_id: int, recipient_id: int) -> Dict[str, Any]:
        """Ask to link a user with an accountant."""
        sender = self.ledger.get_user(sender_id)
        recipient = self.ledger.get_user(recipient_id)
        with self.ledger.updating_workflow() as workflow:
            request = workflow.send_request(sender, recipient)
        return {"request": self._request_dict(request)}

    def approve_relationship_request(self, request_id: int, actor_id: int) -> Dict[str, Any]:
        """Approve a pending request addressed to the actor."""
        actor = self.ledger.get_user(actor_id)
        with self.ledger.updating_workflow() as workflow:
            relationship = workflow.approve(request_id, actor)
        return {"relationship": relationship.model_dump(mode="json")}

    def reject_relationship_request(self, request_id: int, actor_id: int) -> Dict[str, Any]:
        """Reject (or withdraw) a pending request."""
        actor = self.ledger.get_user(actor_id)
        with self.ledger.updating_workflow() as workflow:
            request = workflow.reject(request_id, actor)
        return {"request": self._request_dict(request)}

    def remove_relationship(
        self, accountant_id: int, user_id: int, actor_id: int
    ) -> Dict[str, Any]:
        """Unlink a user from their accountant. Either party or an admin may do so."""
        actor = self.ledger.get_user(actor_id)
        with self.ledger.updating_workflow() as workflow:
            workflow.remove_relationship(accountant_id, user_id, actor)
        return {"removed": {"accountant_id": accountant_id, "user_id": user_id}}


_PERIOD_DESCRIPTION = (
    "Period shorthand: this_month, last_month, "
    "last_7_days, last_30_days, last_90_days, ytd, "
    "this_year, last_year"
)

_DATE_RANGE_PROPERTIES: Dict[str, Any] = {
    "period": {
        "type": "string",
        "description": _PERIOD_DESCRIPTION,
    },
    "start_date": {
        "type": "string",
        "description": "Start date (YYYY-MM-DD)",
        "pattern": r"^\d{4}-\d{2}-\d{2}$",
    },
    "end_date": {
        "type": "string",
        "description": "End date (YYYY-MM-DD)",
        "pattern": r"^\d{4}-\d{2}-\d{2}$",
    },
}

_USER_PROPERTIES: Dict[str, Any] = {
    "user_id": {
        "type": "integer",
        "description": "Owner of the data",
    },
    "viewer_id": {
        "type": "integer",
        "description": "User making the request (defaults to user_id)",
    },
}


def create_tool_schemas() -> List[Dict[str, Any]]:
    """
    Create MCP tool schemas for all tools.

    Returns:
        List of tool schema definitions
    """
    return [
        {
            "name": "get_items",
            "description": (
                "Get a user's incomes and expenses with optional filters. Supports "
                "date ranges, kind (INCOME/EXPENSE) and category filters. Use "
                "'period' for common date ranges (this_month, last_30_days, ytd, etc.)."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    **_USER_PROPERTIES,
                    **_DATE_RANGE_PROPERTIES,
                    "kind": {
                        "type": "string",
                        "enum": ["INCOME", "EXPENSE"],
                        "description": "Only incomes or only expenses",
                    },
                    "category": {
                        "type": "string",
                        "description": "Filter by category name (case-insensitive substring)",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results (default: 100)",
                        "default": 100,
                    },
                },
                "required": ["user_id"],
            },
        },
        {
            "name": "search_items",
            "description": "Free-text, case-insensitive search of a user's items by name.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    **_USER_PROPERTIES,
                    "query": {
                        "type": "string",
                        "description": "Search query",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results (default: 50)",
                        "default": 50,
                    },
                },
                "required": ["user_id", "query"],
            },
        },
        {
            "name": "get_financial_summary",
            "description": (
                "Get total income and expense for a period together with the "
                "lifetime balance (all time) and the period balance. Defaults "
                "to the current month."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {**_USER_PROPERTIES, **_DATE_RANGE_PROPERTIES},
                "required": ["user_id"],
            },
        },
        {
            "name": "get_category_breakdown",
            "description": (
                "Get spending aggregated by category for a date range, with the "
                "percentage of total spending and a distinct chart colour per "
                "category. Sorted by amount. Defaults to the current month."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {**_USER_PROPERTIES, **_DATE_RANGE_PROPERTIES},
                "required": ["user_id"],
            },
        },
        {
            "name": "get_dashboard",
            "description": (
                "Get the current-month dashboard: income, expense, lifetime "
                "balance, top categories with the rest folded into 'Other', and "
                "recent expenses."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {**_USER_PROPERTIES},
                "required": ["user_id"],
            },
        },
        {
            "name": "get_overall_statistics",
            "description": (
                "Get combined income, expense and category statistics over all "
                "users visible to the viewer (an accountant's clients, or every "
                "user for an admin)."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "viewer_id": {
                        "type": "integer",
                        "description": "User making the request",
                    },
                    "user_id": {
                        "type": "integer",
                        "description": "Optionally restrict to one visible user",
                    },
                    **_DATE_RANGE_PROPERTIES,
                },
                "required": ["viewer_id"],
            },
        },
        {
            "name": "get_category_colors",
            "description": (
                "Assign distinct, deterministic chart colours to a list of "
                "category names."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "names": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Category names shown together",
                    },
                    "existing_colors": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Current colours, one per name",
                    },
                },
                "required": ["names"],
            },
        },
        {
            "name": "list_relationship_requests",
            "description": "List incoming and outgoing accountant relationship requests of a user.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "user_id": {
                        "type": "integer",
                        "description": "User or accountant id",
                    },
                    "viewer_id": {
                        "type": "integer",
                        "description": "User making the request (defaults to user_id)",
                    },
                },
                "required": ["user_id"],
            },
        },
        {
            "name": "send_relationship_request",
            "description": (
                "Ask to link a user with an accountant. Either side may send "
                "the request; the other side approves or rejects it."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "sender_id": {"type": "integer", "description": "Sender id"},
                    "recipient_id": {"type": "integer", "description": "Recipient id"},
                },
                "required": ["sender_id", "recipient_id"],
            },
        },
        {
            "name": "approve_relationship_request",
            "description": "Approve a pending relationship request addressed to the actor.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "request_id": {"type": "integer", "description": "Request id"},
                    "actor_id": {"type": "integer", "description": "Approving user id"},
                },
                "required": ["request_id", "actor_id"],
            },
        },
        {
            "name": "reject_relationship_request",
            "description": "Reject or withdraw a pending relationship request.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "request_id": {"type": "integer", "description": "Request id"},
                    "actor_id": {"type": "integer", "description": "Rejecting user id"},
                },
                "required": ["request_id", "actor_id"],
            },
        },
        {
            "name": "remove_relationship",
            "description": (
                "Unlink a user from their accountant. The actor must be one of "
                "the two parties or an admin."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "accountant_id": {"type": "integer", "description": "Accountant id"},
                    "user_id": {"type": "integer", "description": "User id"},
                    "actor_id": {"type": "integer", "description": "Removing user id"},
                },
                "required": ["accountant_id", "user_id", "actor_id"],
            },
        },
    ]
