"""Input validation package."""

from finance_advisor.exceptions import (
    DuplicateCategoryError,
    InvalidAmountError,
    InvalidCategoryError,
    InvalidDateError,
    MissingFieldError,
    TextTooLongError,
    ValidationError,
)
from finance_advisor.validation.validator import (
    MISSING_FIELDS_MESSAGE,
    TransactionValidator,
    check_length,
    filter_budgets,
    parse_amount,
    parse_date,
    parse_decimal,
    parse_user_name,
)

__all__ = [
    "DuplicateCategoryError",
    "InvalidAmountError",
    "InvalidCategoryError",
    "InvalidDateError",
    "MISSING_FIELDS_MESSAGE",
    "MissingFieldError",
    "TextTooLongError",
    "TransactionValidator",
    "ValidationError",
    "check_length",
    "filter_budgets",
    "parse_amount",
    "parse_date",
    "parse_decimal",
    "parse_user_name",
]
