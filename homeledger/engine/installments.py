"""
Installment generation.

A purchase paid in N installments becomes N expense drafts that share a
group id. Each installment is the total divided by N rounded to cents; the last
one absorbs the rounding remainder so the batch always adds up to the total.

Credit-card installments land on the 1st of the following months (the card
statement bills them there). Other payment methods keep the purchase's day of
month, one month apart.
"""

import uuid
from datetime import date
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from homeledger.engine.currency import REFERENCE_CURRENCY
from homeledger.engine.dates import add_months, first_of_month
from homeledger.engine.debts import check_debt
from homeledger.models.expense import (
    DebtAssociation,
    DebtorList,
    ExpenseDebtor,
    ExpenseDraft,
    InstallmentInfo,
    PaymentMethod,
)
from homeledger.utils.validation import (
    LedgerValidationError,
    validate_exchange_rate,
    validate_installment_count,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round2(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def split_amount(total: Decimal, count: int) -> List[Decimal]:
    """Split ``total`` into ``count`` cent-rounded parts that sum to ``total``."""
    part = round2(total / count)
    parts = [part] * (count - 1)
    parts.append(total - sum(parts, ZERO))
    if part <= 0 or parts[-1] <= 0:
        raise LedgerValidationError(
            f"{total} is too small to split into {count} installments"
        )
    return parts


def installment_date(expense: ExpenseDraft, index: int) -> date:
    """Date of installment ``index`` (0-based)."""
    if expense.payment_method == PaymentMethod.CREDIT_CARD:
        return first_of_month(expense.date, index + 1)
    return add_months(expense.date, index)


def allocate(total: Decimal, weights: Sequence[Decimal]) -> List[Decimal]:
    """
    Divide ``total`` in proportion to ``weights``, in whole cents.

    Running totals are rounded down, so no part reaches a cent above its exact
    proportional value and the last part takes the remainder. The parts always
    add up to ``total``.
    """
    whole = sum(weights, ZERO)
    if whole == 0:
        return [ZERO] * (len(weights) - 1) + [total]

    parts = []
    running = ZERO
    allocated = ZERO
    for index, weight in enumerate(weights):
        running += weight
        if index == len(weights) - 1:
            target = total
        else:
            target = (total * running / whole).quantize(CENT, rounding=ROUND_DOWN)
        parts.append(target - allocated)
        allocated = target
    return parts


def _split_debt(debt: Optional[DebtAssociation], amounts: List[Decimal]) -> List[Optional[DebtAssociation]]:
    """
    Spread explicit debtor amounts across installments.

    Each installment first gets its proportional slice of the explicit total,
    which never exceeds the installment's own amount; that slice is then shared
    among the debtors by what each still has left. Every debtor's parts add up
    to its explicit amount. Debtors without an explicit amount keep None
    (equal split of each installment's own amount).
    """
    if not isinstance(debt, DebtorList):
        return [debt] * len(amounts)

    explicit = [debtor.amount for debtor in debt.debtors if debtor.amount is not None]
    if not explicit:
        return [debt] * len(amounts)

    rows = []
    remaining = explicit
    for budget in allocate(sum(explicit, ZERO), amounts):
        parts = allocate(budget, remaining)
        remaining = [left - part for left, part in zip(remaining, parts)]
        rows.append(parts)

    if any(part <= 0 for parts in rows for part in parts):
        raise LedgerValidationError(
            f"Debtor amounts are too small to split into {len(amounts)} installments"
        )

    split_debts = []
    for parts in rows:
        explicit_parts = iter(parts)
        split_debts.append(debt.model_copy(update={
            "debtors": [
                ExpenseDebtor(
                    contact_id=debtor.contact_id,
                    amount=next(explicit_parts) if debtor.amount is not None else None,
                    is_paid=debtor.is_paid
                )
                for debtor in debt.debtors
            ]
        }))
    return split_debts


def generate_installments(
    expense: ExpenseDraft,
    count: int,
    reference_currency: str = REFERENCE_CURRENCY
) -> List[ExpenseDraft]:
    """
    Expand one expense into ``count`` dated installment drafts.

    With ``count == 1`` the draft is returned untouched. Every draft that
    comes back passes ``check_debt``.
    """
    validate_installment_count(count)
    if expense.currency != reference_currency:
        validate_exchange_rate(expense.exchange_rate, expense.currency)
    check_debt(expense)

    if count == 1:
        return [expense]

    group_id = str(uuid.uuid4())
    amounts = split_amount(expense.amount, count)
    debts = _split_debt(expense.debt, amounts)

    drafts = [
        expense.model_copy(update={
            "amount": amounts[index],
            "date": installment_date(expense, index),
            "description": f"{expense.description} (Installment {index + 1}/{count})",
            "installment": InstallmentInfo(number=index + 1, total=count, group_id=group_id),
            "debt": debts[index],
        })
        for index in range(count)
    ]
    for draft in drafts:
        check_debt(draft)
    return drafts
