"""
JSON ledger decoder for expense tracker data.

A ledger is one JSON document holding users, categories, financial records,
relationship requests and relationships. Financial records come in two
interchangeable shapes: split ``incomes``/``expenses`` lists, and a unified
``transactions`` list whose records carry a ``type`` of INCOME or EXPENSE.
Both decode to FinancialItem.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from expense_tracker_mcp.core.exceptions import DecodeError, LedgerNotFoundError
from expense_tracker_mcp.models.category import Category
from expense_tracker_mcp.models.request import AccountantRequest, AccountantUserRelationship
from expense_tracker_mcp.models.transaction import FinancialItem, ItemKind
from expense_tracker_mcp.models.user import User

logger = logging.getLogger(__name__)


class LedgerData(BaseModel):
    """Everything decoded from one ledger document."""

    users: List[User] = []
    categories: List[Category] = []
    items: List[FinancialItem] = []
    requests: List[AccountantRequest] = []
    relationships: List[AccountantUserRelationship] = []


def _resolve_category(
    record: Dict[str, Any], categories: Dict[int, Category]
) -> Optional[Category]:
    category_id = record.get("category_id")
    if category_id is None:
        return None
    try:
        return categories[category_id]
    except KeyError:
        raise DecodeError(f"Unknown category_id {category_id} in record {record!r}") from None


def decode_item(
    record: Dict[str, Any], kind: ItemKind, id_field: str, categories: Dict[int, Category]
) -> FinancialItem:
    """
    Decode one income, expense or transaction record.

    Args:
        record: Raw JSON object
        kind: Kind of the item
        id_field: Name of the record's id key (income_id, expense_id, ...)
        categories: Known categories by id

    Returns:
        Decoded FinancialItem

    Raises:
        DecodeError: If the record is malformed or references an unknown category
    """
    if id_field not in record:
        raise DecodeError(f"Record without {id_field}: {record!r}")

    category = _resolve_category(record, categories) if kind == ItemKind.EXPENSE else None

    try:
        return FinancialItem(
            item_id=record[id_field],
            kind=kind,
            amount=record.get("amount"),
            date=record.get("date"),
            name=record.get("name") or record.get("description"),
            category=category,
            user_id=record.get("user_id"),
        )
    except ValidationError as e:
        raise DecodeError(f"Invalid {kind.value.lower()} record {record!r}: {e}") from e


def decode_transaction(
    record: Dict[str, Any], categories: Dict[int, Category]
) -> FinancialItem:
    """Decode a unified transaction record using its ``type`` field."""
    try:
        kind = ItemKind(str(record.get("type", "")).upper())
    except ValueError:
        raise DecodeError(f"Transaction with unknown type: {record!r}") from None
    return decode_item(record, kind, "transaction_id", categories)


def decode_document(document: Dict[str, Any]) -> LedgerData:
    """
    Decode a parsed ledger document.

    Raises:
        DecodeError: If any part of the document is invalid
    """
    if not isinstance(document, dict):
        raise DecodeError("Ledger document must be a JSON object")

    try:
        users = [User.model_validate(raw) for raw in document.get("users", [])]
        category_list = [Category.model_validate(raw) for raw in document.get("categories", [])]
        requests = [
            AccountantRequest.model_validate(raw)
            for raw in document.get("accountant_requests", [])
        ]
        relationships = [
            AccountantUserRelationship.model_validate(raw)
            for raw in document.get("relationships", [])
        ]
    except ValidationError as e:
        raise DecodeError(f"Invalid ledger document: {e}") from e

    categories = {cat.category_id: cat for cat in category_list}

    items: List[FinancialItem] = []
    for record in document.get("incomes", []):
        items.append(decode_item(record, ItemKind.INCOME, "income_id", categories))
    for record in document.get("expenses", []):
        items.append(decode_item(record, ItemKind.EXPENSE, "expense_id", categories))
    for record in document.get("transactions", []):
        items.append(decode_transaction(record, categories))

    logger.debug(
        "Decoded ledger: %d users, %d categories, %d items, %d requests",
        len(users),
        len(category_list),
        len(items),
        len(requests),
    )

    return LedgerData(
        users=users,
        categories=category_list,
        items=items,
        requests=requests,
        relationships=relationships,
    )


def decode_ledger(ledger_path: Path) -> LedgerData:
    """
    Read and decode a ledger file.

    Args:
        ledger_path: Path to the JSON ledger

    Returns:
        Decoded ledger contents

    Raises:
        LedgerNotFoundError: If the file does not exist
        DecodeError: If the file is not a valid ledger
    """
    if not ledger_path.is_file():
        raise LedgerNotFoundError(f"Ledger not found: {ledger_path}")

    try:
        document = json.loads(ledger_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DecodeError(f"Ledger is not valid JSON: {e}") from e

    return decode_document(document)


def encode_item(item: FinancialItem) -> Dict[str, Any]:
    """Encode an item in the split incomes/expenses shape."""
    id_field = "income_id" if item.is_income else "expense_id"
    record: Dict[str, Any] = {
        id_field: item.item_id,
        "user_id": item.user_id,
        "name": item.name,
        "amount": str(item.amount),
        "date": item.date.isoformat(),
    }
    if item.category is not None:
        record["category_id"] = item.category.category_id
    return record


def encode_ledger(data: LedgerData) -> Dict[str, Any]:
    """Encode ledger contents as a JSON-ready document."""
    return {
        "users": [user.model_dump(mode="json", exclude={"display_name"}) for user in data.users],
        "categories": [cat.model_dump(mode="json") for cat in data.categories],
        "incomes": [encode_item(item) for item in data.items if item.is_income],
        "expenses": [encode_item(item) for item in data.items if item.is_expense],
        "accountant_requests": [req.model_dump(mode="json") for req in data.requests],
        "relationships": [rel.model_dump(mode="json") for rel in data.relationships],
    }
