"""
Category Registry

The fixed expense and income categories, plus the user's custom
expense categories.

DESIGN DECISION: Custom categories are append-only. There is no
rename or delete, so a transaction or budget can never point at a
category that disappeared.
"""

from typing import Iterable, Sequence

from finance_advisor.exceptions import DuplicateCategoryError
from finance_advisor.models.finance import (
    MAX_CATEGORY_LENGTH,
    BudgetDocument,
    TransactionType,
)


PREDEFINED_EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Groceries",
    "Utilities",
    "Rent",
    "Transport",
    "Entertainment",
    "Dining Out",
    "Healthcare",
    "Education",
    "Shopping",
    "Travel",
    "Other",
)

INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Investments",
    "Gift",
    "Other",
)

DUPLICATE_CATEGORY_MESSAGE = "Invalid or duplicate category name."


def all_expense_categories(custom: Iterable[str] = ()) -> tuple[str, ...]:
    """Predefined expense categories followed by the custom ones."""
    return PREDEFINED_EXPENSE_CATEGORIES + tuple(custom)


def categories_for(
    transaction_type: TransactionType,
    custom: Iterable[str] = (),
) -> tuple[str, ...]:
    """Categories a new transaction of this type may use."""
    if transaction_type == TransactionType.INCOME:
        return INCOME_CATEGORIES
    return all_expense_categories(custom)


def try_add_custom_category(name: str, current_custom: Sequence[str]) -> list[str]:
    """
    Append a custom expense category.

    The name is trimmed first. Matching is exact and case-sensitive.

    Returns:
        A new list; current_custom is not modified.

    Raises:
        DuplicateCategoryError: name is blank, too long, predefined, or already custom
    """
    cleaned = (name or "").strip()
    if (
        not cleaned
        or len(cleaned) > MAX_CATEGORY_LENGTH
        or cleaned in PREDEFINED_EXPENSE_CATEGORIES
        or cleaned in current_custom
    ):
        raise DuplicateCategoryError(DUPLICATE_CATEGORY_MESSAGE, field="category")
    return [*current_custom, cleaned]


class CategoryRegistry:
    """
    The category sets in effect for one identity.

    Built from the latest budgets document snapshot.
    """

    def __init__(self, custom: Sequence[str] = ()):
        self._custom = tuple(custom)

    @classmethod
    def from_document(cls, document: BudgetDocument) -> "CategoryRegistry":
        return cls(document.custom_categories)

    @property
    def custom(self) -> tuple[str, ...]:
        return self._custom

    @property
    def expense(self) -> tuple[str, ...]:
        return all_expense_categories(self._custom)

    @property
    def income(self) -> tuple[str, ...]:
        return INCOME_CATEGORIES

    def for_type(self, transaction_type: TransactionType) -> tuple[str, ...]:
        return categories_for(transaction_type, self._custom)

    def is_valid(self, transaction_type: TransactionType, category: str) -> bool:
        return category in self.for_type(transaction_type)

    def with_custom(self, name: str) -> "CategoryRegistry":
        """Registry with one more custom category (see try_add_custom_category)."""
        return CategoryRegistry(try_add_custom_category(name, self._custom))
