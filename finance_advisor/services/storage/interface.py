"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the document store.
This allows us to:
1. Swap Google Sheets for any other document store later
2. Use in-memory storage for tests and local runs
3. Keep summaries, advice and routing decoupled from storage

Every call takes the identity explicitly; all data is scoped to it.
The store owns the data. The core only issues create/delete/upsert
intents and reads snapshots through live values.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_advisor.models.audit import AuditEvent
from finance_advisor.models.finance import (
    BudgetDocument,
    BudgetMap,
    NewTransaction,
    Profile,
    Transaction,
)
from finance_advisor.state.live import LiveValue


class TransactionStorageInterface(ABC):
    """
    Per-identity transaction collection.

    Implementations must call super().__init__() and
    `await self.refresh_transactions(identity)` after every write.
    """

    def __init__(self):
        self._live_transactions: dict[str, LiveValue[tuple[Transaction, ...]]] = {}

    @abstractmethod
    async def create_transaction(self, identity: str, record: NewTransaction) -> str:
        """
        Store a new transaction.

        Returns:
            The id assigned to it

        Raises:
            PermissionDeniedError: identity may not write transactions
            StorageError: anything else went wrong
        """
        pass

    @abstractmethod
    async def delete_transaction(self, identity: str, transaction_id: str) -> bool:
        """
        Delete a transaction by id.

        Returns:
            True if it existed, False if there was nothing to delete

        Raises:
            PermissionDeniedError, StorageError
        """
        pass

    @abstractmethod
    async def list_transactions(self, identity: str) -> list[Transaction]:
        """All transactions for the identity, in no particular order."""
        pass

    async def watch_transactions(self, identity: str) -> LiveValue[tuple[Transaction, ...]]:
        """
        Live snapshot of the identity's transactions.

        The first call loads the collection; later calls return the same
        live value, which is updated after every write through this store.
        """
        if identity not in self._live_transactions:
            current = tuple(await self.list_transactions(identity))
            self._live_transactions[identity] = LiveValue(current)
        return self._live_transactions[identity]

    async def refresh_transactions(self, identity: str) -> None:
        """Reload the snapshot if anyone is watching it."""
        live = self._live_transactions.get(identity)
        if live is not None:
            live.set(tuple(await self.list_transactions(identity)))

    def forget_transactions(self, identity: str) -> None:
        """Drop the cached live value once nobody listens to it."""
        live = self._live_transactions.get(identity)
        if live is not None and live.listener_count == 0:
            del self._live_transactions[identity]


class BudgetStorageInterface(ABC):
    """
    Per-identity budgets document: {budgets, custom_categories}.
    """

    def __init__(self):
        self._live_budgets: dict[str, LiveValue[BudgetDocument]] = {}

    @abstractmethod
    async def get_budget_document(self, identity: str) -> Optional[BudgetDocument]:
        """The document, or None if it was never written."""
        pass

    @abstractmethod
    async def upsert_budget_document(
        self,
        identity: str,
        budgets: Optional[BudgetMap] = None,
        custom_categories: Optional[list[str]] = None,
        merge: bool = True,
    ) -> None:
        """
        Create or update the document.

        With merge=True, fields passed as None keep their stored value.
        With merge=False the document is replaced and omitted fields reset.

        Raises:
            PermissionDeniedError, StorageError
        """
        pass

    async def watch_budget_document(self, identity: str) -> LiveValue[BudgetDocument]:
        """Live budgets document; an absent document reads as empty."""
        if identity not in self._live_budgets:
            current = await self.get_budget_document(identity)
            self._live_budgets[identity] = LiveValue(current or BudgetDocument())
        return self._live_budgets[identity]

    async def refresh_budget_document(self, identity: str) -> None:
        live = self._live_budgets.get(identity)
        if live is not None:
            live.set(await self.get_budget_document(identity) or BudgetDocument())

    def forget_budget_document(self, identity: str) -> None:
        live = self._live_budgets.get(identity)
        if live is not None and live.listener_count == 0:
            del self._live_budgets[identity]


class ProfileStorageInterface(ABC):
    """
    Per-identity profile document: {name}.
    """

    def __init__(self):
        self._live_profiles: dict[str, LiveValue[Profile]] = {}

    @abstractmethod
    async def get_profile(self, identity: str) -> Optional[Profile]:
        """The profile, or None if it was never written."""
        pass

    @abstractmethod
    async def upsert_profile(self, identity: str, name: str, merge: bool = True) -> None:
        """
        Create or update the profile.

        Raises:
            PermissionDeniedError, StorageError
        """
        pass

    async def watch_profile(self, identity: str) -> LiveValue[Profile]:
        """Live profile; an absent profile reads as an empty name."""
        if identity not in self._live_profiles:
            current = await self.get_profile(identity)
            self._live_profiles[identity] = LiveValue(current or Profile())
        return self._live_profiles[identity]

    async def refresh_profile(self, identity: str) -> None:
        live = self._live_profiles.get(identity)
        if live is not None:
            live.set(await self.get_profile(identity) or Profile())

    def forget_profile(self, identity: str) -> None:
        live = self._live_profiles.get(identity)
        if live is not None and live.listener_count == 0:
            del self._live_profiles[identity]


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PermissionDeniedError(StorageError):
    """The store refused the call for this identity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
