"""Summary and advice computation package."""

from finance_advisor.analysis.summary import (
    current_year_month,
    monthly_spending_by_category,
    sort_for_display,
    summarize,
    utc_today,
)
from finance_advisor.analysis.advice import (
    HIGH_EXPENSE_MESSAGE,
    LOW_SAVINGS_MESSAGE,
    ON_TRACK_MESSAGE,
    OVER_BUDGET_TEMPLATE,
    generate_advice,
    over_budget_categories,
)

__all__ = [
    "HIGH_EXPENSE_MESSAGE",
    "LOW_SAVINGS_MESSAGE",
    "ON_TRACK_MESSAGE",
    "OVER_BUDGET_TEMPLATE",
    "current_year_month",
    "generate_advice",
    "monthly_spending_by_category",
    "over_budget_categories",
    "sort_for_display",
    "summarize",
    "utc_today",
]
