"""
Ledger abstraction layer for expense tracker data.

Provides filtered access to users, categories and financial items, and owns
the relationship workflow state, with proper error handling.
"""

import json
import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator, List, Optional

from expense_tracker_mcp.core.decoder import LedgerData, decode_ledger, encode_ledger
from expense_tracker_mcp.core.exceptions import UserNotFoundError
from expense_tracker_mcp.core.workflow import RelationshipBook
from expense_tracker_mcp.models.category import Category
from expense_tracker_mcp.models.transaction import FinancialItem, ItemKind
from expense_tracker_mcp.models.user import Role, User

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_PATH = Path.home() / ".expense-tracker" / "ledger.json"


class Ledger:
    """
    Abstraction layer for querying expense tracker data.

    Wraps the decoder and provides filtering capabilities. The file is read
    lazily on first access.
    """

    def __init__(self, ledger_path: Optional[Path] = None):
        """
        Initialize the ledger.

        Args:
            ledger_path: Path to the JSON ledger file.
                         If None, uses ~/.expense-tracker/ledger.json.
        """
        self.ledger_path = ledger_path or DEFAULT_LEDGER_PATH
        self._data: Optional[LedgerData] = None
        self._workflow: Optional[RelationshipBook] = None

    def is_available(self) -> bool:
        """Check if the ledger file exists."""
        return self.ledger_path.is_file()

    def _load(self) -> LedgerData:
        if self._data is None:
            self._data = decode_ledger(self.ledger_path)
            logger.info("Loaded ledger from %s", self.ledger_path)
        return self._data

    @property
    def workflow(self) -> RelationshipBook:
        """Relationship requests and active relationships."""
        if self._workflow is None:
            data = self._load()
            self._workflow = RelationshipBook(data.requests, data.relationships)
        return self._workflow

    def get_users(self, role: Optional[Role] = None) -> List[User]:
        """
        Get all users.

        Args:
            role: Optional filter by role

        Returns:
            List of users
        """
        users = self._load().users[:]
        if role is not None:
            users = [user for user in users if user.role == role]
        return users

    def get_user(self, user_id: int) -> User:
        """
        Get a user by id.

        Raises:
            UserNotFoundError: If user_id is not in the ledger
        """
        user = next((u for u in self._load().users if u.user_id == user_id), None)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    def get_categories(self, user_id: Optional[int] = None) -> List[Category]:
        """
        Get categories, optionally only those owned by one user.
        """
        categories = self._load().categories[:]
        if user_id is not None:
            categories = [cat for cat in categories if cat.user_id == user_id]
        return categories

    def get_items(
        self,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[ItemKind] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[FinancialItem]:
        """
        Get financial items with optional filters.

        Args:
            user_id: Filter by owning user
            start_date: Filter by date >= this
            end_date: Filter by date <= this
            kind: Filter by INCOME or EXPENSE
            category: Filter by category name (case-insensitive substring match)
            limit: Maximum number of items to return

        Returns:
            List of filtered items, sorted by date descending
        """
        result = self._load().items[:]

        # Apply owner filter
        if user_id is not None:
            result = [item for item in result if item.user_id == user_id]

        # Apply date range filter
        if start_date:
            result = [item for item in result if item.date >= start_date]
        if end_date:
            result = [item for item in result if item.date <= end_date]

        if kind is not None:
            result = [item for item in result if item.kind == kind]

        # Apply category filter (case-insensitive)
        if category:
            category_lower = category.lower()
            result = [
                item
                for item in result
                if item.category_name and category_lower in item.category_name.lower()
            ]

        result.sort(key=lambda item: item.date, reverse=True)

        if limit is not None:
            result = result[:limit]
        return result

    def search_items(
        self, query: str, user_id: Optional[int] = None, limit: int = 50
    ) -> List[FinancialItem]:
        """
        Free-text search of items by name.

        Args:
            query: Search query (case-insensitive)
            user_id: Optional owner filter
            limit: Maximum results

        Returns:
            List of matching items
        """
        query_lower = query.lower()
        result = [
            item
            for item in self.get_items(user_id=user_id)
            if query_lower in item.display_name.lower()
        ]
        return result[:limit]

    def save(self) -> None:
        """Write the ledger, including workflow changes, back to disk."""
        data = self._load()
        if self._workflow is not None:
            data = data.model_copy(
                update={
                    "requests": list(self._workflow.requests),
                    "relationships": list(self._workflow.relationships),
                }
            )
            self._data = data

        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.ledger_path.with_suffix(".tmp")
        try:
            tmp_path.write_text(
                json.dumps(encode_ledger(data), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            tmp_path.replace(self.ledger_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.info("Saved ledger to %s", self.ledger_path)

    @contextmanager
    def updating_workflow(self) -> Iterator[RelationshipBook]:
        """
        Change the workflow and save it, or leave it untouched.

        If the block or the save raises, requests and relationships are
        restored to what they were on entry and the error propagates.
        """
        workflow = self.workflow
        state = workflow.snapshot()
        data = self._data
        try:
            yield workflow
            self.save()
        except Exception as e:
            workflow.restore(state)
            self._data = data
            logger.debug("Workflow change discarded: %s", e)
            raise
