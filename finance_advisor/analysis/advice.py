"""
Advice Engine

Rule-based advice computed from a Summary and the current budgets.

Rules are evaluated in a fixed order and every rule that matches
contributes a message:
1. Expenses above 80% of income
2. Savings rate below 10% of income
3. One message per category over its monthly budget (lexical order)
4. If nothing above matched, a single encouraging message

Rules 1 and 2 only apply when there is income; with no income they
are skipped rather than treated as triggered.
"""

from decimal import Decimal
from typing import Mapping

from finance_advisor.models.finance import Summary


HIGH_EXPENSE_RATIO = Decimal("0.8")
MIN_SAVINGS_RATE = Decimal("0.1")

HIGH_EXPENSE_MESSAGE = (
    "Your expenses are quite high relative to your income. "
    "Consider reviewing your spending habits."
)
LOW_SAVINGS_MESSAGE = (
    "Your savings rate is low. "
    "Try to save at least 10-20% of your income each month."
)
OVER_BUDGET_TEMPLATE = (
    'You\'ve exceeded your budget for "{category}" this month. '
    "Consider cutting back in this area."
)
ON_TRACK_MESSAGE = "You're doing great with your finances! Keep up the good work."


def is_expense_ratio_high(summary: Summary) -> bool:
    if not summary.has_income:
        return False
    return summary.total_expense / summary.total_income > HIGH_EXPENSE_RATIO


def is_savings_rate_low(summary: Summary) -> bool:
    if not summary.has_income:
        return False
    savings = summary.total_income - summary.total_expense
    return savings / summary.total_income < MIN_SAVINGS_RATE


def over_budget_categories(
    summary: Summary,
    budgets: Mapping[str, Decimal],
) -> list[str]:
    """Categories whose current-month spend exceeds a positive budget."""
    exceeded = []
    for category in sorted(summary.monthly_spending_by_category):
        limit = budgets.get(category)
        if limit is None or limit <= 0:
            continue
        if summary.monthly_spending_by_category[category] > limit:
            exceeded.append(category)
    return exceeded


def generate_advice(summary: Summary, budgets: Mapping[str, Decimal]) -> list[str]:
    """
    Build the ordered advice list.

    Never empty: when no warning applies the list holds exactly
    ON_TRACK_MESSAGE.
    """
    advice = []

    if is_expense_ratio_high(summary):
        advice.append(HIGH_EXPENSE_MESSAGE)

    if is_savings_rate_low(summary):
        advice.append(LOW_SAVINGS_MESSAGE)

    for category in over_budget_categories(summary, budgets):
        advice.append(OVER_BUDGET_TEMPLATE.format(category=category))

    if not advice:
        advice.append(ON_TRACK_MESSAGE)

    return advice
