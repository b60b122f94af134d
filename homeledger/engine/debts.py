"""
Debt apportionment between the household and its contacts.

Rules per expense that carries a debt association:

- share per debtor: the explicit amount, else amount / (debtors + 1)
  (the household counts as one participant)
- settlement of a contact debt: owed_by_me -= share
- paid by a contact (CONTACT_DEBT): the household owes the paying contact
  its own share; the other debtors owe the paying contact, not us
- otherwise the household paid: owed_to_me += share

Balances are kept per currency. In ORIGINAL mode each share is booked in the
expense's currency; in REFERENCE mode it is normalized first and booked in the
reference currency. Either way two currencies never meet in one figure.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from homeledger.engine.currency import REFERENCE_CURRENCY, normalize
from homeledger.models.balance import ContactDebtSummary, DebtBalance
from homeledger.models.contact import Contact
from homeledger.models.expense import (
    DebtorList,
    Expense,
    ExpenseDebtor,
    ExpenseFields,
    LegacyContact,
    PaymentMethod,
)
from homeledger.utils.validation import LedgerValidationError, validate_exchange_rate

ZERO = Decimal("0")


class DebtCurrencyMode(str, Enum):
    ORIGINAL = "original"
    REFERENCE = "reference"


class _Ledger:
    """Running owed_by / owed_to totals per (contact, currency)."""

    def __init__(self):
        self._totals: Dict[str, Dict[str, List[Decimal]]] = defaultdict(
            lambda: defaultdict(lambda: [ZERO, ZERO])
        )

    def owed_by_me(self, contact_id: str, currency: str, amount: Decimal) -> None:
        self._totals[contact_id][currency][0] += amount

    def owed_to_me(self, contact_id: str, currency: str, amount: Decimal) -> None:
        self._totals[contact_id][currency][1] += amount

    def balances(self, contact_id: str) -> Dict[str, DebtBalance]:
        return {
            currency: DebtBalance(
                currency=currency,
                owed_by_me=owed_by,
                owed_to_me=owed_to,
                net_balance=owed_to - owed_by
            )
            for currency, (owed_by, owed_to) in self._totals.get(contact_id, {}).items()
        }


def debtor_share(amount: Decimal, debtor: ExpenseDebtor, debtor_count: int,
                 factor: Decimal = Decimal("1")) -> Decimal:
    """
    Explicit per-debtor amount, else an equal split among debtors plus the payer.

    ``amount`` is already converted; ``factor`` converts the explicit amount.
    """
    if debtor.amount is not None:
        return debtor.amount * factor
    return amount / (debtor_count + 1)


def check_debt(expense: ExpenseFields) -> None:
    """
    Reject a debtor list that apportionment could not book.

    A contact-paid list must name which of its debtors paid, and the debtor
    shares together may not exceed the expense amount (the household's own
    share would turn negative).
    """
    debt = expense.debt
    if not isinstance(debt, DebtorList):
        return
    if expense.payment_method == PaymentMethod.CONTACT_DEBT:
        if debt.paid_by_contact_id not in debt.contact_ids():
            raise LedgerValidationError(
                "paid_by_contact_id must name one of the debtors when a contact paid"
            )

    count = len(debt.debtors)
    shares = sum((debtor_share(expense.amount, debtor, count) for debtor in debt.debtors), ZERO)
    if shares > expense.amount:
        raise LedgerValidationError(
            f"Debtor amounts ({shares}) exceed the expense amount ({expense.amount})"
        )


def _booking(
    expense: Expense,
    reference_currency: str,
    currency_mode: DebtCurrencyMode
) -> Tuple[str, Decimal]:
    """Currency to book in and the factor applied to the expense's amounts."""
    if currency_mode == DebtCurrencyMode.REFERENCE and expense.currency != reference_currency:
        rate = validate_exchange_rate(expense.exchange_rate, expense.currency)
        return reference_currency, normalize(Decimal("1"), expense.currency, rate, reference_currency)
    if currency_mode == DebtCurrencyMode.REFERENCE:
        return reference_currency, Decimal("1")
    return expense.currency, Decimal("1")


def _apply_legacy(ledger: _Ledger, expense: Expense, debt: LegacyContact,
                  currency: str, factor: Decimal) -> None:
    amount = expense.amount * factor
    if expense.is_debt_settlement:
        ledger.owed_by_me(debt.contact_id, currency, -amount)
    elif expense.payment_method == PaymentMethod.CONTACT_DEBT:
        ledger.owed_by_me(debt.contact_id, currency, amount)
    else:
        ledger.owed_to_me(debt.contact_id, currency, amount)


def _apply_debtors(ledger: _Ledger, expense: Expense, debt: DebtorList,
                   currency: str, factor: Decimal) -> None:
    amount = expense.amount * factor
    count = len(debt.debtors)
    shares = [
        (debtor.contact_id, debtor_share(amount, debtor, count, factor))
        for debtor in debt.debtors
    ]

    if expense.is_debt_settlement:
        for contact_id, share in shares:
            ledger.owed_by_me(contact_id, currency, -share)
        return

    if expense.payment_method == PaymentMethod.CONTACT_DEBT:
        payer = debt.paid_by_contact_id
        if payer is None or payer not in debt.contact_ids():
            raise LedgerValidationError(
                f"Expense {expense.id} was paid by a contact but does not name "
                "which of its debtors paid"
            )
        household_share = amount - sum((share for _, share in shares), ZERO)
        if household_share < 0:
            raise LedgerValidationError(
                f"Debtor amounts on expense {expense.id} exceed the expense amount"
            )
        ledger.owed_by_me(payer, currency, household_share)
        return

    for contact_id, share in shares:
        ledger.owed_to_me(contact_id, currency, share)


def compute_debts(
    expenses: Iterable[Expense],
    contacts: Iterable[Contact],
    *,
    today: Optional[date] = None,
    reference_currency: str = REFERENCE_CURRENCY,
    currency_mode: DebtCurrencyMode = DebtCurrencyMode.ORIGINAL
) -> Dict[str, ContactDebtSummary]:
    """
    Debt summary per contact, keyed by contact id.

    Future-dated expenses are skipped. Contacts without any non-zero figure
    are left out, as are debts against contacts missing from ``contacts``.
    """
    today = today or date.today()
    ledger = _Ledger()

    for expense in expenses:
        if expense.debt is None or expense.date > today:
            continue
        currency, factor = _booking(expense, reference_currency, currency_mode)
        if isinstance(expense.debt, LegacyContact):
            _apply_legacy(ledger, expense, expense.debt, currency, factor)
        else:
            _apply_debtors(ledger, expense, expense.debt, currency, factor)

    summaries = {}
    for contact in contacts:
        balances = ledger.balances(contact.id)
        if any(b.owed_by_me != 0 or b.owed_to_me != 0 for b in balances.values()):
            summaries[contact.id] = ContactDebtSummary(contact=contact, balances=balances)
    return summaries
