"""
Core Data Models for Personal Finance Advisor

These models define the schemas for everything the core reads from
or hands to the document store. They are designed to:
1. Enforce type safety at runtime
2. Keep money in Decimal, fixed to the cent
3. Be immutable snapshots (transactions are never edited in place)
4. Be serializable for storage and logging

DESIGN DECISION: Transactions are frozen. The only mutations are
create and delete, both expressed as intents to the store.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


CENT = Decimal("0.01")

MAX_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
MAX_NAME_LENGTH = 200

Money = Annotated[Decimal, Field(ge=0, decimal_places=2)]


def to_cents(value: Decimal) -> Decimal:
    """Round a Decimal to the cent."""
    return value.quantize(CENT)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class NewTransaction(BaseModel):
    """
    A transaction that has passed validation but not been stored yet.

    This is what the core hands to TransactionStorageInterface.create_transaction.
    The store assigns the id.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=MAX_CATEGORY_LENGTH,
        description="Category name"
    )
    amount: Money = Field(
        ...,
        description="Non-negative amount, two decimal places"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    description: str = Field(
        default="",
        max_length=MAX_DESCRIPTION_LENGTH,
        description="Optional free text"
    )
    created_at: dt.datetime = Field(
        default_factory=_utcnow,
        description="When the record was created (informational only)"
    )

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()


class Transaction(NewTransaction):
    """
    A stored transaction, as delivered in a snapshot.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque id assigned by the store"
    )

    @classmethod
    def from_new(cls, record: NewTransaction, transaction_id: str) -> "Transaction":
        return cls(id=transaction_id, **record.model_dump())


# =============================================================================
# BUDGETS AND PROFILE
# =============================================================================

BudgetMap = dict[str, Decimal]


class BudgetDocument(BaseModel):
    """
    The per-identity budgets document.

    An absent document is read as BudgetDocument() - no budgets,
    no custom categories.
    """

    budgets: dict[str, Money] = Field(
        default_factory=dict,
        description="Category -> positive monthly limit"
    )
    custom_categories: list[str] = Field(
        default_factory=list,
        description="User-added expense categories, in insertion order"
    )

    @field_validator('budgets')
    @classmethod
    def drop_non_positive(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        """Non-positive limits are never persisted."""
        return {category: limit for category, limit in v.items() if limit > 0}


class Profile(BaseModel):
    """The per-identity profile document."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        default="",
        max_length=MAX_NAME_LENGTH,
        description="Display name"
    )


# =============================================================================
# DERIVED VALUES
# =============================================================================

class Summary(BaseModel):
    """
    Totals computed from one snapshot of transactions.

    All amounts are rounded to the cent.
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0.00")
    total_expense: Decimal = Decimal("0.00")
    net_savings: Decimal = Decimal("0.00")
    monthly_spending_by_category: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def has_income(self) -> bool:
        return self.total_income > 0
