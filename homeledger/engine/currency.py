"""Conversion of amounts into the household's reference currency."""

from decimal import Decimal
from typing import Optional, Union

from homeledger.models.expense import ExpenseFields
from homeledger.models.recurring import RecurringExpense
from homeledger.utils.validation import validate_exchange_rate

REFERENCE_CURRENCY = "ARS"


def normalize(
    amount: Decimal,
    currency: str,
    exchange_rate: Optional[Decimal],
    reference_currency: str = REFERENCE_CURRENCY
) -> Decimal:
    """
    Return ``amount`` expressed in the reference currency.

    No rounding and no validation; callers that need a checked rate use
    ``normalize_expense``.
    """
    if currency == reference_currency:
        return amount
    return amount * exchange_rate


def normalize_expense(
    expense: Union[ExpenseFields, RecurringExpense],
    reference_currency: str = REFERENCE_CURRENCY
) -> Decimal:
    """Normalize an expense-like record, rejecting a missing or non-positive rate."""
    if expense.currency == reference_currency:
        return expense.amount
    rate = validate_exchange_rate(expense.exchange_rate, expense.currency)
    return normalize(expense.amount, expense.currency, rate, reference_currency)
