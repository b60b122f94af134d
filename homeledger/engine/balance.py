"""
Net balance between the two primary users.

Works in the reference currency only: every expense is normalized before it
is split. Per-currency tracking is the debt engine's job (see engine.debts).
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, NamedTuple, Optional, Sequence

from homeledger.engine.currency import REFERENCE_CURRENCY, normalize_expense
from homeledger.engine.split import resolve_for_category, split
from homeledger.models.balance import HouseholdBalance
from homeledger.models.expense import Expense
from homeledger.models.settlement import Settlement
from homeledger.models.user import User
from homeledger.utils.validation import ConfigurationError, LedgerValidationError

ZERO = Decimal("0")


class PrimaryPair(NamedTuple):
    """The two household members. user_a is the one split percentages refer to."""
    user_a: User
    user_b: User


def primary_pair(
    users: Sequence[User],
    user_a_id: Optional[str],
    user_b_id: Optional[str]
) -> Optional[PrimaryPair]:
    """
    Pick the configured pair out of ``users``.

    Returns None when fewer than two users exist. Two or more users without a
    usable configuration is a ConfigurationError, never a guess by order.
    """
    if len(users) < 2:
        return None
    if not user_a_id or not user_b_id or user_a_id == user_b_id:
        raise ConfigurationError("PRIMARY_USER_A_ID and PRIMARY_USER_B_ID must name two different users")

    by_id = {user.id: user for user in users}
    missing = [user_id for user_id in (user_a_id, user_b_id) if user_id not in by_id]
    if missing:
        raise ConfigurationError(f"Configured primary users not found: {', '.join(missing)}")
    return PrimaryPair(user_a=by_id[user_a_id], user_b=by_id[user_b_id])


def owed_amounts(
    expenses: Iterable[Expense],
    pair: PrimaryPair,
    category_defaults: Mapping[str, Decimal],
    today: date,
    reference_currency: str = REFERENCE_CURRENCY
):
    """(what A owes B, what B owes A) from expenses dated up to ``today``."""
    a_owes = ZERO
    b_owes = ZERO
    for expense in expenses:
        if expense.date > today:
            continue
        if expense.paid_by not in (pair.user_a.id, pair.user_b.id):
            continue

        amount = normalize_expense(expense, reference_currency)
        percentage = resolve_for_category(
            expense.split_percentage, expense.category_id, category_defaults
        )
        shares = split(amount, percentage)

        if expense.paid_by == pair.user_a.id:
            b_owes += shares.user_b
        else:
            a_owes += shares.user_a
    return a_owes, b_owes


def compute_balance(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    pair: Optional[PrimaryPair],
    category_defaults: Optional[Mapping[str, Decimal]] = None,
    *,
    today: Optional[date] = None,
    reference_currency: str = REFERENCE_CURRENCY
) -> HouseholdBalance:
    """
    Who owes whom, and how much, in the reference currency.

    net = (A owes) - (B owes); a settlement A -> B lowers it, B -> A raises it.
    Positive means A is the debtor, negative means B is.
    """
    if pair is None:
        return HouseholdBalance(currency=reference_currency)

    today = today or date.today()
    a_owes, b_owes = owed_amounts(
        expenses, pair, category_defaults or {}, today, reference_currency
    )
    net = a_owes - b_owes

    for settlement in settlements:
        if settlement.paid_by == pair.user_a.id and settlement.paid_to == pair.user_b.id:
            net -= settlement.amount
        elif settlement.paid_by == pair.user_b.id and settlement.paid_to == pair.user_a.id:
            net += settlement.amount

    if net > 0:
        return HouseholdBalance(amount=net, debtor=pair.user_a, creditor=pair.user_b,
                                is_settled=False, currency=reference_currency)
    if net < 0:
        return HouseholdBalance(amount=-net, debtor=pair.user_b, creditor=pair.user_a,
                                is_settled=False, currency=reference_currency)
    return HouseholdBalance(currency=reference_currency)


def settle_up(balance: HouseholdBalance, on: date, notes: Optional[str] = None) -> Settlement:
    """Settlement that brings ``balance`` back to zero."""
    if balance.is_settled:
        raise LedgerValidationError("Balance is already settled")
    return Settlement(
        paid_by=balance.debtor.id,
        paid_to=balance.creditor.id,
        amount=balance.amount,
        date=on,
        notes=notes
    )
