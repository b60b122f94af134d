import pytest
from bson import ObjectId
from datetime import date
from decimal import Decimal

from homeledger.core.config import settings
from homeledger.models.base import to_document
from homeledger.models.expense import DebtorList, ExpenseDebtor
from homeledger.services.debt_service import DebtService

TODAY = date(2024, 6, 15)


def stored(model):
    doc = to_document(model)
    doc["_id"] = ObjectId(model.id)
    return doc


@pytest.fixture
def store(mock_db, cursor_returning, contacts, make_expense):
    sofia = contacts[0]
    debt = DebtorList(debtors=[ExpenseDebtor(contact_id=sofia.id)])
    mock_db["contacts"].find.return_value = cursor_returning([stored(c) for c in contacts])
    mock_db["expenses"].find.return_value = cursor_returning([
        stored(make_expense(amount=Decimal("100"), currency="USD",
                            exchange_rate=Decimal("1000"), debt=debt)),
    ])
    return mock_db


@pytest.mark.asyncio
async def test_debts_in_original_currency(store, contacts):
    summaries = await DebtService(store).get_debts(today=TODAY)

    assert len(summaries) == 1
    assert summaries[0].contact.id == contacts[0].id
    usd = summaries[0].balances["USD"]
    assert usd.owed_to_me == Decimal("50")
    assert usd.net_balance == Decimal("50")
    query = store["expenses"].find.call_args[0][0]
    assert query["debt"] == {"$ne": None}
    assert "date" not in query


@pytest.mark.asyncio
async def test_debts_in_reference_currency(store, monkeypatch):
    monkeypatch.setattr(settings, "DEBT_CURRENCY_MODE", "reference")

    summaries = await DebtService(store).get_debts(today=TODAY)

    assert list(summaries[0].balances) == ["ARS"]
    assert summaries[0].balances["ARS"].owed_to_me == Decimal("50000")


@pytest.mark.asyncio
async def test_debts_for_one_month(store):
    await DebtService(store).get_debts(year=2024, month=2, today=TODAY)

    query = store["expenses"].find.call_args[0][0]
    assert query["date"] == {"$gte": "2024-02-01", "$lte": "2024-02-29"}
