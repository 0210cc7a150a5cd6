"""
Core exceptions for Personal Finance Advisor.

These cover everything that is decided locally, before any call
reaches the storage layer. Storage failures live with the storage
interface (see finance_advisor.services.storage.interface).
"""


class FinanceAdvisorError(Exception):
    """Base exception for errors raised by the core."""
    pass


class ValidationError(FinanceAdvisorError):
    """
    User input was rejected.

    The message is safe to show to the user as-is.
    Nothing was sent to storage.
    """

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(message)


class MissingFieldError(ValidationError):
    """A required field was left empty."""
    pass


class InvalidAmountError(ValidationError):
    """Amount is not a non-negative number."""
    pass


class InvalidDateError(ValidationError):
    """Date is not a valid YYYY-MM-DD calendar date."""
    pass


class InvalidCategoryError(ValidationError):
    """Category is not allowed for the transaction type."""
    pass


class TextTooLongError(ValidationError):
    """A free-text field is longer than the store accepts."""
    pass


class DuplicateCategoryError(ValidationError):
    """Custom category name is empty, too long or already exists."""
    pass


class NotAuthenticatedError(FinanceAdvisorError):
    """A mutation was attempted before an identity was established."""
    pass
