from datetime import date, datetime, timezone
from typing import List, Optional

from homeledger.models.recurring import RecurringExpense
from homeledger.repositories.base import BaseRepository, object_id_or_none
from homeledger.schemas.recurring import RecurringExpenseCreate, RecurringExpenseUpdate


class RecurringExpenseRepository(BaseRepository[RecurringExpense]):
    """Recurring expense template operations."""

    collection_name = "recurring_expenses"
    model = RecurringExpense

    async def create_recurring(self, recurring_data: RecurringExpenseCreate) -> RecurringExpense:
        """Create a new template."""
        return await self.insert(RecurringExpense(**recurring_data.model_dump()))

    async def list_recurring(self) -> List[RecurringExpense]:
        """Templates ordered by next due date."""
        return await self.list("next_due_date", 1)

    async def update_recurring(
        self, recurring_id: str, update_data: RecurringExpenseUpdate
    ) -> Optional[RecurringExpense]:
        return await self.update(recurring_id, update_data.model_dump(exclude_unset=True))

    async def list_due(self, today: date) -> List[RecurringExpense]:
        """Active templates with next_due_date on or before ``today``."""
        cursor = self.collection.find({
            "is_deleted": False,
            "active": True,
            "next_due_date": {"$lte": today.isoformat()}
        }).sort("next_due_date", 1)
        docs = await cursor.to_list(None)
        return [RecurringExpense(**doc) for doc in docs]

    async def advance_due_date(
        self,
        recurring_id: str,
        previous: date,
        next_due: date,
        session=None
    ) -> bool:
        """
        Move next_due_date from ``previous`` to ``next_due``.

        Only matches while the stored date is still ``previous``; returns False
        if another run already moved it.
        """
        oid = object_id_or_none(recurring_id)
        if oid is None:
            return False
        result = await self.collection.update_one(
            {"_id": oid, "next_due_date": previous.isoformat()},
            {"$set": {
                "next_due_date": next_due.isoformat(),
                "updated_at": datetime.now(timezone.utc)
            }},
            session=session
        )
        return result.modified_count == 1
