"""
In-Memory Storage Implementation

Keeps every document in process memory. Used for local runs without
credentials and throughout the test suite.

Access can be revoked per identity (deny_access) and the whole store can
be made to fail (fail_with), so callers can exercise the permission-denied
and generic-failure paths without a real backend.
"""

from typing import Callable, Optional
from uuid import uuid4

from finance_advisor.models.audit import AuditEvent
from finance_advisor.models.finance import (
    BudgetDocument,
    BudgetMap,
    NewTransaction,
    Profile,
    Transaction,
)
from finance_advisor.services.storage.interface import (
    AuditStorageInterface,
    BudgetStorageInterface,
    PermissionDeniedError,
    ProfileStorageInterface,
    StorageError,
    TransactionStorageInterface,
)


class _AccessControl:
    """Failure switches shared by the in-memory stores."""

    resource = "documents"

    def _init_access(self) -> None:
        self._denied: set[str] = set()
        self._failure: Optional[str] = None

    def deny_access(self, identity: str) -> None:
        self._denied.add(identity)

    def allow_access(self, identity: str) -> None:
        self._denied.discard(identity)

    def fail_with(self, message: Optional[str]) -> None:
        """Make every call raise StorageError(message); None restores normal operation."""
        self._failure = message

    def _check(self, identity: str) -> None:
        if self._failure is not None:
            raise StorageError(self._failure)
        if identity in self._denied:
            raise PermissionDeniedError(
                f"Identity {identity} may not access {self.resource}"
            )


class InMemoryTransactionStorage(_AccessControl, TransactionStorageInterface):
    """Transactions kept in insertion order per identity."""

    resource = "transactions"

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        super().__init__()
        self._init_access()
        self._id_factory = id_factory or (lambda: uuid4().hex)
        self._records: dict[str, dict[str, Transaction]] = {}

    async def create_transaction(self, identity: str, record: NewTransaction) -> str:
        self._check(identity)
        transaction_id = self._id_factory()
        self._records.setdefault(identity, {})[transaction_id] = Transaction.from_new(
            record, transaction_id
        )
        await self.refresh_transactions(identity)
        return transaction_id

    async def delete_transaction(self, identity: str, transaction_id: str) -> bool:
        self._check(identity)
        removed = self._records.get(identity, {}).pop(transaction_id, None)
        if removed is None:
            return False
        await self.refresh_transactions(identity)
        return True

    async def list_transactions(self, identity: str) -> list[Transaction]:
        self._check(identity)
        return list(self._records.get(identity, {}).values())


class InMemoryBudgetStorage(_AccessControl, BudgetStorageInterface):
    """One budgets document per identity."""

    resource = "budgets"

    def __init__(self):
        super().__init__()
        self._init_access()
        self._documents: dict[str, BudgetDocument] = {}

    async def get_budget_document(self, identity: str) -> Optional[BudgetDocument]:
        self._check(identity)
        document = self._documents.get(identity)
        return document.model_copy(deep=True) if document else None

    async def upsert_budget_document(
        self,
        identity: str,
        budgets: Optional[BudgetMap] = None,
        custom_categories: Optional[list[str]] = None,
        merge: bool = True,
    ) -> None:
        self._check(identity)
        existing = self._documents.get(identity) if merge else None
        existing = existing or BudgetDocument()
        self._documents[identity] = BudgetDocument(
            budgets=dict(budgets) if budgets is not None else existing.budgets,
            custom_categories=(
                list(custom_categories)
                if custom_categories is not None
                else existing.custom_categories
            ),
        )
        await self.refresh_budget_document(identity)


class InMemoryProfileStorage(_AccessControl, ProfileStorageInterface):
    """One profile per identity."""

    resource = "profile"

    def __init__(self):
        super().__init__()
        self._init_access()
        self._profiles: dict[str, Profile] = {}

    async def get_profile(self, identity: str) -> Optional[Profile]:
        self._check(identity)
        profile = self._profiles.get(identity)
        return profile.model_copy() if profile else None

    async def upsert_profile(self, identity: str, name: str, merge: bool = True) -> None:
        self._check(identity)
        self._profiles[identity] = Profile(name=name)
        await self.refresh_profile(identity)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
