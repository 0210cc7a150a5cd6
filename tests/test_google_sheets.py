"""
Tests for the Google Sheets backend.

A fake worksheet stands in for gspread; no network access.
"""

import asyncio
import json
import re
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import gspread
import pytest

from finance_advisor.models import AuditEventBuilder, NewTransaction, TransactionType
from finance_advisor.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsBudgetStorage,
    GoogleSheetsClient,
    GoogleSheetsProfileStorage,
    GoogleSheetsTransactionStorage,
    PermissionDeniedError,
    StorageError,
)
from finance_advisor.services.storage.google_sheets import (
    AUDIT_COLUMNS,
    BUDGET_COLUMNS,
    PROFILE_COLUMNS,
    TRANSACTION_COLUMNS,
    translate_error,
)


class FakeAPIError(gspread.exceptions.APIError):
    """APIError carrying only an HTTP status."""

    def __init__(self, status_code: int):
        Exception.__init__(self, status_code)
        self.response = SimpleNamespace(status_code=status_code)
        self.code = status_code
        self.error = {"code": status_code, "message": "fake"}

    def __str__(self) -> str:
        return f"APIError: [{self.code}]: fake"


def api_error(status_code: int) -> gspread.exceptions.APIError:
    return FakeAPIError(status_code)


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the storage classes."""

    def __init__(self, columns: list[str]):
        self.rows = [list(columns)]

    def get_all_values(self) -> list[list[str]]:
        return [list(row) for row in self.rows]

    def append_row(self, values, value_input_option=None):
        self.rows.append([str(v) for v in values])

    def delete_rows(self, index: int):
        del self.rows[index - 1]

    def update(self, range_name: str, values):
        row_number = int(re.match(r"A(\d+):", range_name).group(1))
        self.rows[row_number - 1] = [str(v) for v in values[0]]


class FakeClient:
    """GoogleSheetsClient without credentials."""

    find_rows = GoogleSheetsClient.find_rows

    def __init__(self, app_id: str = "test-app"):
        self._app_id = app_id
        self.transactions = FakeWorksheet(TRANSACTION_COLUMNS)
        self.budgets = FakeWorksheet(BUDGET_COLUMNS)
        self.profiles = FakeWorksheet(PROFILE_COLUMNS)
        self.audit = FakeWorksheet(AUDIT_COLUMNS)

    @property
    def app_id(self) -> str:
        return self._app_id

    def get_transactions_sheet(self):
        return self.transactions

    def get_budgets_sheet(self):
        return self.budgets

    def get_profiles_sheet(self):
        return self.profiles

    def get_audit_sheet(self):
        return self.audit


class DeniedClient(FakeClient):
    def get_transactions_sheet(self):
        raise api_error(403)

    def get_budgets_sheet(self):
        raise api_error(500)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


def new_record(category: str = "Groceries") -> NewTransaction:
    return NewTransaction(
        type=TransactionType.EXPENSE,
        category=category,
        amount=Decimal("12.50"),
        date=date(2024, 12, 3),
        description="weekly",
    )


class TestTranslateError:

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_permission_codes(self, status_code):
        result = translate_error(api_error(status_code), "add transaction")
        assert isinstance(result, PermissionDeniedError)

    def test_other_api_error(self):
        result = translate_error(api_error(500), "add transaction")
        assert type(result) is StorageError
        assert "add transaction" in str(result)

    def test_storage_errors_pass_through(self):
        original = PermissionDeniedError("no")
        assert translate_error(original, "x") is original

    def test_unexpected_exception(self):
        assert type(translate_error(ValueError("bad"), "x")) is StorageError


class TestGoogleSheetsTransactionStorage:

    def test_create_and_list(self, client):
        storage = GoogleSheetsTransactionStorage(client)

        async def scenario():
            transaction_id = await storage.create_transaction("u1", new_record())
            return transaction_id, await storage.list_transactions("u1")

        transaction_id, listed = asyncio.run(scenario())
        [stored] = listed
        assert stored.id == transaction_id
        assert stored.amount == Decimal("12.50")
        assert stored.date == date(2024, 12, 3)
        assert stored.description == "weekly"
        assert client.transactions.rows[1][:3] == ["test-app", "u1", transaction_id]

    def test_rows_scoped_by_app_and_identity(self, client):
        client.transactions.rows.append(
            ["other-app", "u1", "x", "expense", "Rent", "1", "2024-12-01", "", ""]
        )
        storage = GoogleSheetsTransactionStorage(client)

        async def scenario():
            await storage.create_transaction("u2", new_record())
            return await storage.list_transactions("u1")

        assert asyncio.run(scenario()) == []

    def test_malformed_rows_are_skipped(self, client):
        client.transactions.rows.append(
            ["test-app", "u1", "x", "transfer", "Rent", "1", "2024-12-01", "", ""]
        )
        storage = GoogleSheetsTransactionStorage(client)
        assert asyncio.run(storage.list_transactions("u1")) == []

    def test_delete_refreshes_live_value(self, client):
        storage = GoogleSheetsTransactionStorage(client)

        async def scenario():
            live = await storage.watch_transactions("u1")
            transaction_id = await storage.create_transaction("u1", new_record())
            after_create = live.value
            deleted = await storage.delete_transaction("u1", transaction_id)
            missing = await storage.delete_transaction("u1", transaction_id)
            return after_create, live.value, deleted, missing

        after_create, after_delete, deleted, missing = asyncio.run(scenario())
        assert len(after_create) == 1
        assert after_delete == ()
        assert deleted is True
        assert missing is False

    def test_permission_denied(self):
        storage = GoogleSheetsTransactionStorage(DeniedClient())
        with pytest.raises(PermissionDeniedError):
            asyncio.run(storage.create_transaction("u1", new_record()))


class TestGoogleSheetsBudgetStorage:

    def test_absent_document(self, client):
        storage = GoogleSheetsBudgetStorage(client)
        assert asyncio.run(storage.get_budget_document("u1")) is None

    def test_upsert_merges_into_one_row(self, client):
        storage = GoogleSheetsBudgetStorage(client)

        async def scenario():
            await storage.upsert_budget_document("u1", custom_categories=["Pets"])
            await storage.upsert_budget_document("u1", budgets={"Pets": Decimal("20.00")})
            return await storage.get_budget_document("u1")

        document = asyncio.run(scenario())
        assert document.custom_categories == ["Pets"]
        assert document.budgets == {"Pets": Decimal("20.00")}
        assert len(client.budgets.rows) == 2
        assert json.loads(client.budgets.rows[1][2]) == {"Pets": "20.00"}

    def test_storage_error(self):
        storage = GoogleSheetsBudgetStorage(DeniedClient())
        with pytest.raises(StorageError):
            asyncio.run(storage.upsert_budget_document("u1", budgets={}))


class TestGoogleSheetsProfileStorage:

    def test_upsert_updates_in_place(self, client):
        storage = GoogleSheetsProfileStorage(client)

        async def scenario():
            await storage.upsert_profile("u1", "Ana")
            await storage.upsert_profile("u1", "Ana Maria")
            return await storage.get_profile("u1")

        assert asyncio.run(scenario()).name == "Ana Maria"
        assert len(client.profiles.rows) == 2


class TestGoogleSheetsAuditStorage:

    def test_append_and_read_back(self, client):
        storage = GoogleSheetsAuditStorage(client)
        event = AuditEventBuilder.custom_category_added("u1", "Pets")

        async def scenario():
            await storage.append_event(event)
            return await storage.get_recent_events()

        [read_back] = asyncio.run(scenario())
        assert read_back.event_id == event.event_id
        assert read_back.details == {"category": "Pets"}
        assert read_back.is_user_action is True

    def test_append_failure_returns_false(self):
        client = FakeClient()
        client.get_audit_sheet = MagicMock(side_effect=api_error(500))
        storage = GoogleSheetsAuditStorage(client)
        event = AuditEventBuilder.identity_established("u1")
        assert asyncio.run(storage.append_event(event)) is False
