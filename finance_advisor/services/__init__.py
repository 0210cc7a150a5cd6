"""Services package."""

from finance_advisor.services.identity import (
    AnonymousIdentityProvider,
    IdentityError,
    IdentityProviderInterface,
)
from finance_advisor.services.storage import (
    AuditStorageInterface,
    BudgetStorageInterface,
    ConnectionError,
    GoogleSheetsAuditStorage,
    GoogleSheetsBudgetStorage,
    GoogleSheetsClient,
    GoogleSheetsProfileStorage,
    GoogleSheetsTransactionStorage,
    InMemoryAuditStorage,
    InMemoryBudgetStorage,
    InMemoryProfileStorage,
    InMemoryTransactionStorage,
    PermissionDeniedError,
    ProfileStorageInterface,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    # Identity
    "AnonymousIdentityProvider",
    "IdentityError",
    "IdentityProviderInterface",
    # Storage
    "AuditStorageInterface",
    "BudgetStorageInterface",
    "ConnectionError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsBudgetStorage",
    "GoogleSheetsClient",
    "GoogleSheetsProfileStorage",
    "GoogleSheetsTransactionStorage",
    "InMemoryAuditStorage",
    "InMemoryBudgetStorage",
    "InMemoryProfileStorage",
    "InMemoryTransactionStorage",
    "PermissionDeniedError",
    "ProfileStorageInterface",
    "StorageError",
    "TransactionStorageInterface",
]
