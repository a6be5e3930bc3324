"""
Pytest configuration and fixtures for expense-tracker-mcp tests.
"""

import shutil
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional

import pytest

from expense_tracker_mcp.config import Settings
from expense_tracker_mcp.models.category import Category
from expense_tracker_mcp.models.transaction import FinancialItem, ItemKind


@pytest.fixture(scope="session")
def demo_ledger_path() -> Path:
    """Path to demo ledger for testing."""
    path = Path(__file__).parent / "fixtures" / "demo_ledger.json"
    if not path.exists():
        pytest.skip(f"Demo ledger not found at {path}.")
    return path


@pytest.fixture
def writable_ledger_path(demo_ledger_path: Path, tmp_path: Path) -> Path:
    """Copy of the demo ledger that tests may modify."""
    path = tmp_path / "ledger.json"
    shutil.copy2(demo_ledger_path, path)
    return path


@pytest.fixture
def settings() -> Settings:
    """Default settings, unaffected by the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def make_item() -> Callable[..., FinancialItem]:
    """Factory for financial items with sequential ids."""
    counter = {"next": 1}

    def factory(
        kind: ItemKind,
        amount: str,
        on: date,
        category: Optional[str] = None,
        color: str = "#667eea",
    ) -> FinancialItem:
        item_id = counter["next"]
        counter["next"] += 1
        return FinancialItem(
            item_id=item_id,
            kind=kind,
            amount=Decimal(amount),
            date=on,
            name=f"item {item_id}",
            category=Category(category_id=item_id, name=category, color=color)
            if category
            else None,
        )

    return factory
