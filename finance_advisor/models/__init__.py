"""
Data Models Package

This package contains the Pydantic models and category data used across
Personal Finance Advisor. Everything read from or written to the store
conforms to these schemas.
"""

from finance_advisor.models.finance import (
    BudgetDocument,
    BudgetMap,
    NewTransaction,
    Profile,
    Summary,
    Transaction,
    TransactionType,
    to_cents,
)
from finance_advisor.models.category import (
    INCOME_CATEGORIES,
    PREDEFINED_EXPENSE_CATEGORIES,
    CategoryRegistry,
    all_expense_categories,
    categories_for,
    try_add_custom_category,
)
from finance_advisor.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "BudgetDocument",
    "BudgetMap",
    "NewTransaction",
    "Profile",
    "Summary",
    "Transaction",
    "TransactionType",
    "to_cents",
    # Categories
    "INCOME_CATEGORIES",
    "PREDEFINED_EXPENSE_CATEGORIES",
    "CategoryRegistry",
    "all_expense_categories",
    "categories_for",
    "try_add_custom_category",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
