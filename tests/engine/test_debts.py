"""
Tests for debt apportionment between the household and contacts.
"""

from datetime import date
from decimal import Decimal

import pytest

from homeledger.engine.debts import DebtCurrencyMode, check_debt, compute_debts
from homeledger.models.expense import DebtorList, ExpenseDebtor, LegacyContact, PaymentMethod
from homeledger.utils.validation import LedgerValidationError

TODAY = date(2024, 6, 15)


def debtors(*contact_ids, **kwargs):
    return DebtorList(debtors=[ExpenseDebtor(contact_id=cid) for cid in contact_ids], **kwargs)


def test_household_paid_equal_split_reference_mode(make_expense, contacts):
    # 300 USD at 1000 -> 300000 ARS, split among household + 2 contacts
    sofia, store = contacts
    expense = make_expense(
        amount=Decimal("300"),
        currency="USD",
        exchange_rate=Decimal("1000"),
        debt=debtors(sofia.id, store.id)
    )

    result = compute_debts([expense], contacts, today=TODAY,
                           currency_mode=DebtCurrencyMode.REFERENCE)

    for contact in contacts:
        balance = result[contact.id].balances["ARS"]
        assert balance.owed_to_me == Decimal("100000")
        assert balance.owed_by_me == 0
        assert balance.net_balance == Decimal("100000")
        assert "USD" not in result[contact.id].balances


def test_original_mode_books_in_expense_currency(make_expense, contacts):
    sofia, store = contacts
    expense = make_expense(
        amount=Decimal("300"),
        currency="USD",
        exchange_rate=Decimal("1000"),
        debt=debtors(sofia.id, store.id)
    )

    result = compute_debts([expense], contacts, today=TODAY)

    assert result[sofia.id].balances["USD"].owed_to_me == Decimal("100")
    assert "ARS" not in result[sofia.id].balances


def test_currencies_are_never_mixed(make_expense, contacts):
    sofia = contacts[0]
    expenses = [
        make_expense(amount=Decimal("2000"), debt=LegacyContact(contact_id=sofia.id)),
        make_expense(amount=Decimal("50"), currency="USD", exchange_rate=Decimal("900"),
                     debt=LegacyContact(contact_id=sofia.id)),
        make_expense(amount=Decimal("500"), debt=LegacyContact(contact_id=sofia.id),
                     payment_method=PaymentMethod.CONTACT_DEBT),
    ]

    balances = compute_debts(expenses, contacts, today=TODAY)[sofia.id].balances

    assert set(balances) == {"ARS", "USD"}
    assert balances["ARS"].owed_to_me == Decimal("2000")
    assert balances["ARS"].owed_by_me == Decimal("500")
    assert balances["ARS"].net_balance == Decimal("1500")
    assert balances["USD"].owed_to_me == Decimal("50")
    assert balances["USD"].net_balance == Decimal("50")


def test_explicit_debtor_amount_wins(make_expense, contacts):
    sofia, store = contacts
    debt = DebtorList(debtors=[
        ExpenseDebtor(contact_id=sofia.id, amount=Decimal("700")),
        ExpenseDebtor(contact_id=store.id),
    ])
    result = compute_debts([make_expense(amount=Decimal("1500"), debt=debt)], contacts, today=TODAY)

    assert result[sofia.id].balances["ARS"].owed_to_me == Decimal("700")
    assert result[store.id].balances["ARS"].owed_to_me == Decimal("500")


def test_settlement_reduces_what_household_owes(make_expense, contacts):
    sofia = contacts[0]
    expenses = [
        make_expense(amount=Decimal("900"), payment_method=PaymentMethod.CONTACT_DEBT,
                     debt=LegacyContact(contact_id=sofia.id)),
        make_expense(amount=Decimal("400"), is_debt_settlement=True,
                     debt=DebtorList(debtors=[ExpenseDebtor(contact_id=sofia.id, amount=Decimal("400"))])),
    ]

    balance = compute_debts(expenses, contacts, today=TODAY)[sofia.id].balances["ARS"]

    assert balance.owed_by_me == Decimal("500")
    assert balance.net_balance == Decimal("-500")


def test_legacy_settlement_uses_full_amount(make_expense, contacts):
    sofia = contacts[0]
    expense = make_expense(amount=Decimal("300"), is_debt_settlement=True,
                           debt=LegacyContact(contact_id=sofia.id))
    balance = compute_debts([expense], contacts, today=TODAY)[sofia.id].balances["ARS"]
    assert balance.owed_by_me == Decimal("-300")


def test_contact_paid_household_owes_payer_its_share(make_expense, contacts):
    sofia, store = contacts
    expense = make_expense(
        amount=Decimal("3000"),
        payment_method=PaymentMethod.CONTACT_DEBT,
        debt=debtors(sofia.id, store.id, paid_by_contact_id=sofia.id)
    )

    result = compute_debts([expense], contacts, today=TODAY)

    assert result[sofia.id].balances["ARS"].owed_by_me == Decimal("1000")
    assert result[sofia.id].balances["ARS"].owed_to_me == 0
    # the other debtor owes the payer, not the household
    assert store.id not in result


def test_contact_paid_without_payer_is_rejected(make_expense, contacts):
    sofia, store = contacts
    expense = make_expense(payment_method=PaymentMethod.CONTACT_DEBT, debt=debtors(sofia.id, store.id))
    with pytest.raises(LedgerValidationError):
        compute_debts([expense], contacts, today=TODAY)


def test_contact_paid_with_payer_outside_debtors_is_rejected(make_expense, contacts):
    sofia, store = contacts
    expense = make_expense(payment_method=PaymentMethod.CONTACT_DEBT,
                           debt=debtors(sofia.id, paid_by_contact_id=store.id))
    with pytest.raises(LedgerValidationError):
        compute_debts([expense], contacts, today=TODAY)


def test_future_expenses_are_ignored(make_expense, contacts):
    sofia = contacts[0]
    expense = make_expense(date=date(2024, 7, 1), debt=LegacyContact(contact_id=sofia.id))
    assert compute_debts([expense], contacts, today=TODAY) == {}


def test_contacts_without_activity_are_omitted(make_expense, contacts):
    sofia, store = contacts
    expenses = [
        make_expense(amount=Decimal("100"), debt=LegacyContact(contact_id=sofia.id)),
        make_expense(amount=Decimal("100"), debt=LegacyContact(contact_id="deleted-contact")),
        make_expense(amount=Decimal("100")),
    ]

    result = compute_debts(expenses, contacts, today=TODAY)

    assert list(result) == [sofia.id]
    assert result[sofia.id].contact == sofia


def test_no_expenses_no_debts(contacts):
    assert compute_debts([], contacts, today=TODAY) == {}


def test_contact_paid_debtors_above_amount_are_rejected(make_expense, contacts):
    sofia, store = contacts
    expense = make_expense(
        amount=Decimal("100"),
        payment_method=PaymentMethod.CONTACT_DEBT,
        debt=DebtorList(
            debtors=[
                ExpenseDebtor(contact_id=sofia.id, amount=Decimal("80")),
                ExpenseDebtor(contact_id=store.id, amount=Decimal("50")),
            ],
            paid_by_contact_id=sofia.id
        )
    )

    with pytest.raises(LedgerValidationError):
        check_debt(expense)
    # the household's own share would be -30
    with pytest.raises(LedgerValidationError):
        compute_debts([expense], contacts, today=TODAY)


def test_check_debt_counts_equal_shares(make_expense, contacts):
    sofia, store = contacts
    # 90 explicit + 100 / 3 for the other debtor is more than 100
    expense = make_expense(amount=Decimal("100"), debt=DebtorList(debtors=[
        ExpenseDebtor(contact_id=sofia.id, amount=Decimal("90")),
        ExpenseDebtor(contact_id=store.id),
    ]))

    with pytest.raises(LedgerValidationError):
        check_debt(expense)


def test_check_debt_accepts_exact_fit(make_expense, contacts):
    sofia, store = contacts
    expense = make_expense(
        amount=Decimal("100"),
        payment_method=PaymentMethod.CONTACT_DEBT,
        debt=DebtorList(
            debtors=[
                ExpenseDebtor(contact_id=sofia.id, amount=Decimal("50")),
                ExpenseDebtor(contact_id=store.id, amount=Decimal("50")),
            ],
            paid_by_contact_id=store.id
        )
    )

    check_debt(expense)
    check_debt(make_expense(debt=LegacyContact(contact_id=sofia.id)))
    check_debt(make_expense())


def test_check_debt_requires_named_payer(make_expense, contacts):
    sofia, store = contacts
    with pytest.raises(LedgerValidationError):
        check_debt(make_expense(payment_method=PaymentMethod.CONTACT_DEBT,
                                debt=debtors(sofia.id, store.id)))
