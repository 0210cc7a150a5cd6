"""
Input Validation

DESIGN DECISION: Raw form input is validated in two stages before
anything is handed to the store.

STAGE 1 - REQUIRED FIELDS:
- Type, category, amount and date must all be present
- One message covers all of them, as the form shows it

STAGE 2 - VALUES:
- Type is income or expense
- Amount is a non-negative number (rounded to the cent)
- Date is a real YYYY-MM-DD calendar date
- Category belongs to the set for the transaction type
- Category and description fit the store's length limits

IMPORTANT: Validation never silently fixes input. A rejected intent
raises a ValidationError and the store is never called.
"""

import datetime as dt
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from finance_advisor.exceptions import (
    InvalidAmountError,
    InvalidCategoryError,
    InvalidDateError,
    MissingFieldError,
    TextTooLongError,
)
from finance_advisor.models.category import CategoryRegistry
from finance_advisor.models.finance import (
    CENT,
    MAX_CATEGORY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    BudgetMap,
    NewTransaction,
    TransactionType,
)


MISSING_FIELDS_MESSAGE = "Please fill in all required fields (Type, Category, Amount, Date)."
INVALID_AMOUNT_MESSAGE = "Amount must be a non-negative number."
INVALID_DATE_MESSAGE = "Date must be a valid date in YYYY-MM-DD format."
TOO_LONG_TEMPLATE = "{label} must be at most {limit} characters."


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a number from form input.

    Returns None for anything that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        value = repr(value)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def to_cent_or_none(number: Decimal) -> Optional[Decimal]:
    """Round half-up to the cent; None when the result has too many digits."""
    try:
        return number.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def parse_amount(value: Any) -> Decimal:
    """
    Parse a transaction amount, rounded half-up to the cent.

    Raises:
        InvalidAmountError: not a number, negative, or too large to hold in cents
    """
    number = parse_decimal(value)
    if number is None or number < 0:
        raise InvalidAmountError(INVALID_AMOUNT_MESSAGE, field="amount")
    rounded = to_cent_or_none(number)
    if rounded is None:
        raise InvalidAmountError(INVALID_AMOUNT_MESSAGE, field="amount")
    return rounded


def parse_date(value: Any) -> dt.date:
    """
    Parse a calendar date from a date object or an ISO YYYY-MM-DD string.

    Raises:
        InvalidDateError: anything else
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        text = str(value).strip()
        if len(text) != 10:
            raise ValueError(text)
        return dt.date.fromisoformat(text)
    except ValueError:
        raise InvalidDateError(INVALID_DATE_MESSAGE, field="date")


def check_length(value: str, limit: int, label: str, field: str) -> str:
    """
    Reject text longer than limit.

    Raises:
        TextTooLongError: value has more than limit characters
    """
    if len(value) > limit:
        raise TextTooLongError(TOO_LONG_TEMPLATE.format(label=label, limit=limit), field=field)
    return value


def parse_user_name(value: Any) -> str:
    """Trimmed display name. Blank is allowed."""
    return check_length(str(value or "").strip(), MAX_NAME_LENGTH, "Name", "name")


def parse_transaction_type(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        raise MissingFieldError(MISSING_FIELDS_MESSAGE, field="type")


class TransactionValidator:
    """
    Turns raw add-transaction form input into a NewTransaction.

    The category check uses the registry in effect when the intent
    is issued, so a custom category added a moment ago is accepted.
    """

    def __init__(self, registry: Optional[CategoryRegistry] = None):
        self._registry = registry or CategoryRegistry()

    def _check_required(self, **fields: Any) -> None:
        """Stage 1: every required field is present."""
        for name, value in fields.items():
            if _is_blank(value):
                raise MissingFieldError(MISSING_FIELDS_MESSAGE, field=name)

    def validate(
        self,
        transaction_type: Any,
        category: Any,
        amount: Any,
        date: Any,
        description: Optional[str] = None,
    ) -> NewTransaction:
        """
        Run both stages and build the record.

        Raises:
            ValidationError: first problem found
        """
        self._check_required(
            type=transaction_type,
            category=category,
            amount=amount,
            date=date,
        )

        # Stage 2
        kind = parse_transaction_type(transaction_type)
        parsed_amount = parse_amount(amount)
        parsed_date = parse_date(date)

        category_name = check_length(
            str(category).strip(), MAX_CATEGORY_LENGTH, "Category", "category"
        )
        if not self._registry.is_valid(kind, category_name):
            raise InvalidCategoryError(
                f'Category "{category_name}" is not valid for {kind.value} transactions.',
                field="category",
            )

        text = check_length(
            (description or "").strip(), MAX_DESCRIPTION_LENGTH, "Description", "description"
        )

        return NewTransaction(
            type=kind,
            category=category_name,
            amount=parsed_amount,
            date=parsed_date,
            description=text,
        )


def filter_budgets(
    raw_budgets: Mapping[str, Any],
    allowed_categories: Optional[Iterable[str]] = None,
) -> BudgetMap:
    """
    Keep only the budget entries worth saving.

    Entries that are blank, non-numeric, zero, negative or too large
    are dropped, as are categories outside allowed_categories (when given).
    Limits are rounded half-up to the cent.

    Example:
        {"Groceries": "50", "Rent": "-10", "Travel": "0"} -> {"Groceries": Decimal("50.00")}
    """
    allowed = set(allowed_categories) if allowed_categories is not None else None
    cleaned: BudgetMap = {}
    for category, value in raw_budgets.items():
        if allowed is not None and category not in allowed:
            continue
        number = parse_decimal(value)
        if number is None:
            continue
        number = to_cent_or_none(number)
        if number is not None and number > 0:
            cleaned[category] = number
    return cleaned
