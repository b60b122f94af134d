import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from datetime import date
from decimal import Decimal
from pymongo.errors import PyMongoError

from homeledger.engine.recurrence import CatchUpPolicy
from homeledger.models.base import to_document
from homeledger.models.recurring import RecurringExpense
from homeledger.services.recurrence_service import RecurrenceService

TODAY = date(2024, 6, 15)


def template_doc(**overrides):
    fields = {
        "description": "Rent",
        "amount": Decimal("300000"),
        "paid_by": str(ObjectId()),
        "start_date": date(2024, 1, 1),
        "next_due_date": date(2024, 6, 1),
    }
    fields.update(overrides)
    doc = to_document(RecurringExpense(**fields))
    doc["_id"] = ObjectId()
    return doc


def setup_store(mock_db, cursor_returning, templates):
    recurring = mock_db["recurring_expenses"]
    recurring.find.return_value = cursor_returning(templates)
    recurring.update_one.return_value = MagicMock(modified_count=1)

    expenses = mock_db["expenses"]
    expenses.insert_many.side_effect = lambda docs, session=None: MagicMock(
        inserted_ids=[ObjectId() for _ in docs]
    )
    return recurring, expenses


@pytest.mark.asyncio
async def test_generates_due_template_and_advances_it(mock_db, cursor_returning):
    doc = template_doc()
    recurring, expenses = setup_store(mock_db, cursor_returning, [doc])

    report = await RecurrenceService(mock_db).generate_due(today=TODAY)

    assert len(report.generated) == 1
    assert report.failed == []
    generated = report.generated[0]
    assert generated.recurring_id == str(doc["_id"])
    assert generated.date == date(2024, 6, 1)

    inserted = expenses.insert_many.call_args[0][0][0]
    assert inserted["is_recurring"] is True
    assert inserted["recurring_id"] == str(doc["_id"])
    assert inserted["date"] == "2024-06-01"

    # compare-and-set on the previous due date, inside the transaction
    query, update = recurring.update_one.call_args[0]
    assert query == {"_id": doc["_id"], "next_due_date": "2024-06-01"}
    assert update["$set"]["next_due_date"] == "2024-07-01"
    assert recurring.update_one.call_args.kwargs["session"] is mock_db.session
    mock_db.session.start_transaction.assert_called_once()


@pytest.mark.asyncio
async def test_nothing_due_generates_nothing(mock_db, cursor_returning):
    _, expenses = setup_store(mock_db, cursor_returning, [])

    report = await RecurrenceService(mock_db).generate_due(today=TODAY)

    assert report.generated == []
    assert report.failed == []
    expenses.insert_many.assert_not_called()


@pytest.mark.asyncio
async def test_failing_template_does_not_stop_others(mock_db, cursor_returning):
    broken = template_doc(description="Streaming", currency="USD", exchange_rate=Decimal("0"))
    healthy = template_doc(description="Rent")
    recurring, expenses = setup_store(mock_db, cursor_returning, [broken, healthy])

    report = await RecurrenceService(mock_db).generate_due(today=TODAY)

    assert [g.description for g in report.generated] == ["Rent"]
    assert len(report.failed) == 1
    assert report.failed[0].recurring_id == str(broken["_id"])
    assert "USD" in report.failed[0].error
    # the broken template keeps its due date
    assert recurring.update_one.call_count == 1


@pytest.mark.asyncio
async def test_store_error_is_reported(mock_db, cursor_returning):
    first = template_doc(description="Internet")
    second = template_doc(description="Rent")
    _, expenses = setup_store(mock_db, cursor_returning, [first, second])
    expenses.insert_many.side_effect = [
        PyMongoError("connection reset"),
        MagicMock(inserted_ids=[ObjectId()]),
    ]

    report = await RecurrenceService(mock_db).generate_due(today=TODAY)

    assert [f.description for f in report.failed] == ["Internet"]
    assert [g.description for g in report.generated] == ["Rent"]


@pytest.mark.asyncio
async def test_template_moved_by_another_run_is_reported(mock_db, cursor_returning):
    recurring, _ = setup_store(mock_db, cursor_returning, [template_doc()])
    recurring.update_one.return_value = MagicMock(modified_count=0)

    report = await RecurrenceService(mock_db).generate_due(today=TODAY)

    assert report.generated == []
    assert len(report.failed) == 1
    assert "no longer due" in report.failed[0].error


@pytest.mark.asyncio
async def test_single_period_per_run_by_default(mock_db, cursor_returning):
    recurring, _ = setup_store(mock_db, cursor_returning, [template_doc(next_due_date=date(2024, 4, 1))])

    report = await RecurrenceService(mock_db).generate_due(today=TODAY)

    assert [g.date for g in report.generated] == [date(2024, 4, 1)]
    assert recurring.update_one.call_count == 1


@pytest.mark.asyncio
async def test_all_missed_policy_catches_up(mock_db, cursor_returning):
    recurring, _ = setup_store(mock_db, cursor_returning, [template_doc(next_due_date=date(2024, 4, 1))])

    report = await RecurrenceService(mock_db).generate_due(
        today=TODAY, policy=CatchUpPolicy.ALL_MISSED
    )

    assert [g.date for g in report.generated] == [
        date(2024, 4, 1), date(2024, 5, 1), date(2024, 6, 1)
    ]
    previous_dates = [call[0][0]["next_due_date"] for call in recurring.update_one.call_args_list]
    assert previous_dates == ["2024-04-01", "2024-05-01", "2024-06-01"]


@pytest.mark.asyncio
async def test_list_due_queries_active_templates(mock_db, cursor_returning):
    recurring, _ = setup_store(mock_db, cursor_returning, [])

    await RecurrenceService(mock_db).generate_due(today=TODAY)

    query = recurring.find.call_args[0][0]
    assert query == {
        "is_deleted": False,
        "active": True,
        "next_due_date": {"$lte": "2024-06-15"}
    }
