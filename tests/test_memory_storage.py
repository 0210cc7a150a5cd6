"""
Tests for the in-memory document store.

Async calls are driven with asyncio.run so no plugin is needed.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from finance_advisor.models import BudgetDocument, NewTransaction, Profile, TransactionType
from finance_advisor.services.storage import (
    InMemoryAuditStorage,
    InMemoryBudgetStorage,
    InMemoryProfileStorage,
    InMemoryTransactionStorage,
    PermissionDeniedError,
    StorageError,
)
from finance_advisor.models import AuditEventBuilder


def new_record(category: str = "Groceries", amount: str = "10") -> NewTransaction:
    return NewTransaction(
        type=TransactionType.EXPENSE,
        category=category,
        amount=Decimal(amount),
        date=date(2024, 12, 1),
    )


class TestInMemoryTransactionStorage:
    """Tests for the transaction collection."""

    def test_create_and_list(self):
        async def scenario():
            storage = InMemoryTransactionStorage()
            first = await storage.create_transaction("u1", new_record("Rent"))
            second = await storage.create_transaction("u1", new_record("Travel"))
            return first, second, await storage.list_transactions("u1")

        first, second, listed = asyncio.run(scenario())
        assert first != second
        assert [t.id for t in listed] == [first, second]
        assert listed[0].category == "Rent"

    def test_identities_are_isolated(self):
        async def scenario():
            storage = InMemoryTransactionStorage()
            await storage.create_transaction("u1", new_record())
            return await storage.list_transactions("u2")

        assert asyncio.run(scenario()) == []

    def test_delete(self):
        async def scenario():
            storage = InMemoryTransactionStorage(id_factory=iter(["a", "b"]).__next__)
            await storage.create_transaction("u1", new_record())
            await storage.create_transaction("u1", new_record())
            deleted = await storage.delete_transaction("u1", "a")
            missing = await storage.delete_transaction("u1", "zzz")
            return deleted, missing, await storage.list_transactions("u1")

        deleted, missing, listed = asyncio.run(scenario())
        assert deleted is True
        assert missing is False
        assert [t.id for t in listed] == ["b"]

    def test_watch_updates_after_writes(self):
        async def scenario():
            storage = InMemoryTransactionStorage(id_factory=iter(["a"]).__next__)
            live = await storage.watch_transactions("u1")
            seen = []
            live.subscribe(seen.append)
            await storage.create_transaction("u1", new_record())
            await storage.delete_transaction("u1", "a")
            return seen

        seen = asyncio.run(scenario())
        assert [len(snapshot) for snapshot in seen] == [1, 0]

    def test_watch_returns_same_live_value(self):
        async def scenario():
            storage = InMemoryTransactionStorage()
            return await storage.watch_transactions("u1"), await storage.watch_transactions("u1")

        first, second = asyncio.run(scenario())
        assert first is second

    def test_forget_drops_unwatched_value(self):
        async def scenario():
            storage = InMemoryTransactionStorage()
            live = await storage.watch_transactions("u1")
            subscription = live.subscribe(lambda v: None)
            storage.forget_transactions("u1")
            kept = await storage.watch_transactions("u1")
            subscription.cancel()
            storage.forget_transactions("u1")
            fresh = await storage.watch_transactions("u1")
            return live, kept, fresh

        live, kept, fresh = asyncio.run(scenario())
        assert kept is live
        assert fresh is not live

    def test_denied_identity(self):
        storage = InMemoryTransactionStorage()
        storage.deny_access("u1")
        with pytest.raises(PermissionDeniedError):
            asyncio.run(storage.create_transaction("u1", new_record()))
        with pytest.raises(PermissionDeniedError):
            asyncio.run(storage.watch_transactions("u1"))

        storage.allow_access("u1")
        assert asyncio.run(storage.list_transactions("u1")) == []

    def test_fail_with(self):
        storage = InMemoryTransactionStorage()
        storage.fail_with("backend down")
        with pytest.raises(StorageError, match="backend down"):
            asyncio.run(storage.list_transactions("u1"))
        storage.fail_with(None)
        assert asyncio.run(storage.list_transactions("u1")) == []


class TestInMemoryBudgetStorage:
    """Tests for the budgets document."""

    def test_absent_document(self):
        storage = InMemoryBudgetStorage()
        assert asyncio.run(storage.get_budget_document("u1")) is None
        live = asyncio.run(storage.watch_budget_document("u1"))
        assert live.value == BudgetDocument()

    def test_merge_keeps_other_field(self):
        async def scenario():
            storage = InMemoryBudgetStorage()
            await storage.upsert_budget_document("u1", custom_categories=["Pets"])
            await storage.upsert_budget_document("u1", budgets={"Pets": Decimal("20")})
            return await storage.get_budget_document("u1")

        document = asyncio.run(scenario())
        assert document.custom_categories == ["Pets"]
        assert document.budgets == {"Pets": Decimal("20")}

    def test_budgets_field_is_replaced(self):
        async def scenario():
            storage = InMemoryBudgetStorage()
            await storage.upsert_budget_document("u1", budgets={"Rent": Decimal("800")})
            await storage.upsert_budget_document("u1", budgets={"Travel": Decimal("100")})
            return await storage.get_budget_document("u1")

        assert asyncio.run(scenario()).budgets == {"Travel": Decimal("100")}

    def test_replace_without_merge(self):
        async def scenario():
            storage = InMemoryBudgetStorage()
            await storage.upsert_budget_document("u1", custom_categories=["Pets"])
            await storage.upsert_budget_document(
                "u1", budgets={"Rent": Decimal("1")}, merge=False
            )
            return await storage.get_budget_document("u1")

        document = asyncio.run(scenario())
        assert document.custom_categories == []

    def test_returned_document_is_a_copy(self):
        async def scenario():
            storage = InMemoryBudgetStorage()
            await storage.upsert_budget_document("u1", custom_categories=["Pets"])
            document = await storage.get_budget_document("u1")
            document.custom_categories.append("Gym")
            return await storage.get_budget_document("u1")

        assert asyncio.run(scenario()).custom_categories == ["Pets"]


class TestInMemoryProfileStorage:

    def test_upsert_and_watch(self):
        async def scenario():
            storage = InMemoryProfileStorage()
            live = await storage.watch_profile("u1")
            initial = live.value
            await storage.upsert_profile("u1", "Ana")
            return initial, live.value

        initial, updated = asyncio.run(scenario())
        assert initial == Profile()
        assert updated.name == "Ana"

    def test_denied(self):
        storage = InMemoryProfileStorage()
        storage.deny_access("u1")
        with pytest.raises(PermissionDeniedError, match="profile"):
            asyncio.run(storage.upsert_profile("u1", "Ana"))


class TestInMemoryAuditStorage:

    def test_recent_events_newest_first(self):
        async def scenario():
            storage = InMemoryAuditStorage()
            await storage.append_event(AuditEventBuilder.identity_established("u1"))
            await storage.append_event(AuditEventBuilder.profile_updated("u1"))
            return await storage.get_recent_events(limit=1)

        events = asyncio.run(scenario())
        assert len(events) == 1
        assert events[0].event_type.value == "profile_updated"
