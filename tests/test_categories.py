"""Tests for the category registry."""

import pytest

from finance_advisor.models import (
    INCOME_CATEGORIES,
    PREDEFINED_EXPENSE_CATEGORIES,
    BudgetDocument,
    CategoryRegistry,
    TransactionType,
    all_expense_categories,
    categories_for,
    try_add_custom_category,
)
from finance_advisor.validation import DuplicateCategoryError, ValidationError


class TestCategoryConstants:

    def test_predefined_expense_categories(self):
        assert PREDEFINED_EXPENSE_CATEGORIES == (
            "Groceries", "Utilities", "Rent", "Transport", "Entertainment",
            "Dining Out", "Healthcare", "Education", "Shopping", "Travel", "Other",
        )

    def test_income_categories(self):
        assert INCOME_CATEGORIES == ("Salary", "Freelance", "Investments", "Gift", "Other")


class TestAllExpenseCategories:

    def test_predefined_then_custom(self):
        """Custom categories come after the predefined ones, in insertion order."""
        result = all_expense_categories(["Pets", "Gym"])
        assert result[:11] == PREDEFINED_EXPENSE_CATEGORIES
        assert result[11:] == ("Pets", "Gym")

    def test_no_custom(self):
        assert all_expense_categories() == PREDEFINED_EXPENSE_CATEGORIES

    def test_categories_for_income_ignores_custom(self):
        assert categories_for(TransactionType.INCOME, ["Pets"]) == INCOME_CATEGORIES

    def test_categories_for_expense_includes_custom(self):
        assert "Pets" in categories_for(TransactionType.EXPENSE, ["Pets"])


class TestTryAddCustomCategory:
    """Tests for adding custom expense categories."""

    def test_add_new_category(self):
        assert try_add_custom_category("Pets", []) == ["Pets"]

    def test_name_is_trimmed(self):
        assert try_add_custom_category("  Pets  ", ["Gym"]) == ["Gym", "Pets"]

    def test_does_not_modify_input(self):
        current = ["Gym"]
        try_add_custom_category("Pets", current)
        assert current == ["Gym"]

    @pytest.mark.parametrize("name", ["", "   ", "Groceries", "Other"])
    def test_rejects_blank_or_predefined(self, name):
        with pytest.raises(DuplicateCategoryError, match="Invalid or duplicate category name."):
            try_add_custom_category(name, [])

    def test_rejects_existing_custom(self):
        """Adding the same custom category twice fails the second time."""
        current = try_add_custom_category("Pets", [])
        with pytest.raises(DuplicateCategoryError):
            try_add_custom_category("Pets", current)

    def test_rejects_name_too_long(self):
        assert try_add_custom_category("C" * 100, []) == ["C" * 100]
        with pytest.raises(DuplicateCategoryError):
            try_add_custom_category("C" * 101, [])

    def test_matching_is_case_sensitive(self):
        assert try_add_custom_category("groceries", []) == ["groceries"]

    def test_error_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            try_add_custom_category("Rent", [])
        assert exc_info.value.field == "category"


class TestCategoryRegistry:

    def test_from_document(self):
        registry = CategoryRegistry.from_document(
            BudgetDocument(custom_categories=["Pets"])
        )
        assert registry.custom == ("Pets",)
        assert registry.expense[-1] == "Pets"
        assert registry.income == INCOME_CATEGORIES

    def test_is_valid_by_type(self):
        registry = CategoryRegistry(["Pets"])
        assert registry.is_valid(TransactionType.EXPENSE, "Pets")
        assert registry.is_valid(TransactionType.INCOME, "Salary")
        assert not registry.is_valid(TransactionType.INCOME, "Pets")
        assert not registry.is_valid(TransactionType.EXPENSE, "Salary")

    def test_other_is_valid_for_both(self):
        registry = CategoryRegistry()
        assert registry.is_valid(TransactionType.EXPENSE, "Other")
        assert registry.is_valid(TransactionType.INCOME, "Other")

    def test_with_custom_returns_new_registry(self):
        registry = CategoryRegistry()
        extended = registry.with_custom("Pets")
        assert registry.custom == ()
        assert extended.custom == ("Pets",)
