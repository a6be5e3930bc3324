"""
Unit tests for JSON ledger decoding and encoding.
"""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from expense_tracker_mcp.core.decoder import (
    decode_document,
    decode_item,
    decode_ledger,
    decode_transaction,
    encode_ledger,
)
from expense_tracker_mcp.core.exceptions import DecodeError, LedgerNotFoundError
from expense_tracker_mcp.models.category import Category
from expense_tracker_mcp.models.transaction import ItemKind

FOOD = Category(category_id=1, name="Food", color="#43e97b")
CATEGORIES = {1: FOOD}


class TestDecodeItem:
    """Tests for single record decoding."""

    def test_decode_expense(self) -> None:
        record = {
            "expense_id": 7,
            "user_id": 1,
            "name": "Groceries",
            "amount": "12.30",
            "date": "2024-01-05",
            "category_id": 1,
        }
        item = decode_item(record, ItemKind.EXPENSE, "expense_id", CATEGORIES)

        assert item.item_id == 7
        assert item.amount == Decimal("12.30")
        assert item.date == date(2024, 1, 5)
        assert item.category == FOOD
        assert item.user_id == 1

    def test_income_ignores_category(self) -> None:
        record = {"income_id": 1, "amount": "10", "date": "2024-01-01", "category_id": 1}
        item = decode_item(record, ItemKind.INCOME, "income_id", CATEGORIES)
        assert item.category is None

    def test_description_used_as_name(self) -> None:
        record = {"expense_id": 1, "description": "Taxi", "amount": "5", "date": "2024-01-01"}
        item = decode_item(record, ItemKind.EXPENSE, "expense_id", CATEGORIES)
        assert item.display_name == "Taxi"

    def test_missing_id(self) -> None:
        with pytest.raises(DecodeError, match="expense_id"):
            decode_item({"amount": "5", "date": "2024-01-01"}, ItemKind.EXPENSE, "expense_id", {})

    def test_unknown_category(self) -> None:
        record = {"expense_id": 1, "amount": "5", "date": "2024-01-01", "category_id": 99}
        with pytest.raises(DecodeError, match="Unknown category_id 99"):
            decode_item(record, ItemKind.EXPENSE, "expense_id", CATEGORIES)

    @pytest.mark.parametrize(
        "amount, on",
        [("-5.00", "2024-01-01"), ("abc", "2024-01-01"), ("5.00", "not-a-date"), (None, "2024-01-01")],
    )
    def test_invalid_fields(self, amount, on) -> None:
        record = {"expense_id": 1, "amount": amount, "date": on}
        with pytest.raises(DecodeError, match="Invalid expense record"):
            decode_item(record, ItemKind.EXPENSE, "expense_id", {})


class TestDecodeTransaction:
    """Tests for unified transaction records."""

    @pytest.mark.parametrize("raw_type, kind", [("INCOME", ItemKind.INCOME), ("expense", ItemKind.EXPENSE)])
    def test_type_selects_kind(self, raw_type: str, kind: ItemKind) -> None:
        record = {"transaction_id": 5, "type": raw_type, "amount": "1.00", "date": "2024-01-01"}
        assert decode_transaction(record, {}).kind == kind

    @pytest.mark.parametrize("raw_type", ["TRANSFER", None])
    def test_unknown_type(self, raw_type) -> None:
        record = {"transaction_id": 5, "type": raw_type, "amount": "1.00", "date": "2024-01-01"}
        with pytest.raises(DecodeError, match="unknown type"):
            decode_transaction(record, {})


class TestDecodeDocument:
    """Tests for whole-document decoding."""

    def test_empty_document(self) -> None:
        data = decode_document({})
        assert data.users == []
        assert data.items == []

    def test_mixed_shapes(self) -> None:
        document = {
            "categories": [{"category_id": 1, "name": "Food", "color": "#43e97b"}],
            "incomes": [{"income_id": 1, "amount": "100", "date": "2024-01-01"}],
            "expenses": [{"expense_id": 1, "amount": "20", "date": "2024-01-02", "category_id": 1}],
            "transactions": [
                {"transaction_id": 9, "type": "EXPENSE", "amount": "3", "date": "2024-01-03"}
            ],
        }
        data = decode_document(document)

        assert [item.kind for item in data.items] == [
            ItemKind.INCOME,
            ItemKind.EXPENSE,
            ItemKind.EXPENSE,
        ]
        assert data.items[1].category_name == "Food"

    def test_not_an_object(self) -> None:
        with pytest.raises(DecodeError, match="JSON object"):
            decode_document([])

    def test_invalid_user(self) -> None:
        with pytest.raises(DecodeError, match="Invalid ledger document"):
            decode_document({"users": [{"user_id": 1, "username": "x", "role": "ROOT"}]})

    def test_invalid_request_status(self) -> None:
        document = {
            "accountant_requests": [
                {
                    "request_id": 1,
                    "accountant_id": 3,
                    "user_id": 1,
                    "status": "MAYBE",
                    "initiator": "USER",
                    "created_at": "2024-01-01T00:00:00",
                }
            ]
        }
        with pytest.raises(DecodeError):
            decode_document(document)


class TestDecodeLedger:
    """Tests for reading ledger files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LedgerNotFoundError):
            decode_ledger(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DecodeError, match="not valid JSON"):
            decode_ledger(path)

    def test_demo_ledger(self, demo_ledger_path: Path) -> None:
        data = decode_ledger(demo_ledger_path)
        assert len(data.users) == 6
        assert len(data.categories) == 8
        assert len(data.items) == 16
        assert len(data.requests) == 2
        assert len(data.relationships) == 1


class TestEncodeLedger:
    """Tests for writing ledger contents back to JSON."""

    def test_encode_uses_split_shape(self, demo_ledger_path: Path) -> None:
        data = decode_ledger(demo_ledger_path)

        document = encode_ledger(data)

        assert "transactions" not in document
        assert len(document["incomes"]) == 4
        assert len(document["expenses"]) == 12
        assert "display_name" not in document["users"][0]
        taxi = next(rec for rec in document["expenses"] if rec["name"] == "Taxi")
        assert taxi == {
            "expense_id": 100,
            "user_id": 1,
            "name": "Taxi",
            "amount": "10.00",
            "date": "2024-01-30",
            "category_id": 2,
        }

    def test_encoded_document_decodes_again(self, demo_ledger_path: Path) -> None:
        data = decode_ledger(demo_ledger_path)
        document = json.loads(json.dumps(encode_ledger(data)))

        again = decode_document(document)

        assert sorted(i.item_id for i in again.items) == sorted(i.item_id for i in data.items)
        assert again.requests == data.requests
