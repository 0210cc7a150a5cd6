"""
Aggregation Engine

DESIGN DECISION: Summaries are computed from a snapshot, never stored.
Every time the store pushes a new transaction list, the summary is
recomputed from scratch. The functions here are pure: same snapshot and
same "today" give the same result.

Money is accumulated in Decimal and rounded to the cent, so the advice
thresholds compare stable values rather than float noise.
"""

import datetime as dt
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from finance_advisor.models.finance import (
    Summary,
    Transaction,
    TransactionType,
    to_cents,
)


def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


def current_year_month(today: Optional[dt.date] = None) -> str:
    """First seven characters of today's ISO date, e.g. '2024-12'."""
    return (today or utc_today()).isoformat()[:7]


def total_for(transactions: Iterable[Transaction], kind: TransactionType) -> Decimal:
    return to_cents(sum((t.amount for t in transactions if t.type == kind), Decimal("0")))


def monthly_spending_by_category(
    transactions: Iterable[Transaction],
    year_month: str,
) -> dict[str, Decimal]:
    """
    Expense totals per category for one YYYY-MM month.

    Categories with nothing spent are left out. Keys are returned
    in lexical order.
    """
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for t in transactions:
        if t.type == TransactionType.EXPENSE and t.iso_date.startswith(year_month):
            totals[t.category] += t.amount

    return {
        category: to_cents(totals[category])
        for category in sorted(totals)
        if totals[category] > 0
    }


def summarize(
    transactions: Iterable[Transaction],
    today: Optional[dt.date] = None,
) -> Summary:
    """
    Compute the dashboard summary for a snapshot.

    Args:
        transactions: The current snapshot, in any order
        today: Date used to pick the current month (defaults to today, UTC)

    Returns:
        Summary; all zeros and an empty map for an empty snapshot
    """
    snapshot = tuple(transactions)

    total_income = total_for(snapshot, TransactionType.INCOME)
    total_expense = total_for(snapshot, TransactionType.EXPENSE)

    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        net_savings=total_income - total_expense,
        monthly_spending_by_category=monthly_spending_by_category(
            snapshot, current_year_month(today)
        ),
    )


def sort_for_display(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Newest date first. Transactions on the same date keep their order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)
