"""Shared fixtures and builders for the test suite."""

from datetime import date
from decimal import Decimal
from itertools import count

from finance_advisor.models import Transaction, TransactionType


TODAY = date(2024, 12, 15)

_ids = count(1)


def make_transaction(
    kind: str,
    category: str,
    amount: str,
    on: date = TODAY,
    description: str = "",
) -> Transaction:
    """Build a stored transaction with a fresh id."""
    return Transaction(
        id=f"t{next(_ids)}",
        type=TransactionType(kind),
        category=category,
        amount=Decimal(amount),
        date=on,
        description=description,
    )
