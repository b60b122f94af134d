"""
ExpenseRepository - expenses and their debt associations.

Debtors are embedded in the expense document under ``debt``, so replacing an
expense's debtor set is a single $set on that field.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from homeledger.models.base import to_document
from homeledger.models.expense import Expense, ExpenseDraft
from homeledger.repositories.base import BaseRepository
from homeledger.schemas.expense import ExpenseFilter, ExpenseUpdate


class ExpenseRepository(BaseRepository[Expense]):
    """Expense database operations."""

    collection_name = "expenses"
    model = Expense

    async def insert_expenses(self, drafts: Sequence[ExpenseDraft], session=None) -> List[Expense]:
        """
        Insert a batch of expenses (e.g. all installments of one purchase).

        Pass a session inside a transaction to make the batch all-or-nothing.
        """
        if not drafts:
            return []

        now = datetime.now(timezone.utc)
        docs = []
        for draft in drafts:
            doc = to_document(draft)
            doc.update({"is_deleted": False, "created_at": now, "updated_at": now})
            docs.append(doc)

        result = await self.collection.insert_many(docs, session=session)
        for doc, inserted_id in zip(docs, result.inserted_ids):
            doc["_id"] = inserted_id
        return [Expense(**doc) for doc in docs]

    async def list_expenses(self, filters: Optional[ExpenseFilter] = None) -> List[Expense]:
        """Expenses matching ``filters``, newest first."""
        filters = filters or ExpenseFilter()
        query = build_expense_query(filters)

        cursor = self.collection.find(query).sort("date", -1)
        if filters.limit:
            cursor = cursor.limit(filters.limit)
        docs = await cursor.to_list(None)
        return [Expense(**doc) for doc in docs]

    async def update_expense(self, expense_id: str, update_data: ExpenseUpdate) -> Optional[Expense]:
        """Update an expense. An explicit ``debt`` replaces the debtor set."""
        return await self.update(expense_id, update_data.model_dump(exclude_unset=True))


def build_expense_query(filters: ExpenseFilter) -> dict:
    """Translate read filters into a MongoDB query."""
    query: dict = {"is_deleted": False}

    date_range = {}
    if filters.start_date:
        date_range["$gte"] = filters.start_date.isoformat()
    if filters.end_date:
        date_range["$lte"] = filters.end_date.isoformat()
    if date_range:
        query["date"] = date_range

    if filters.category_id:
        query["category_id"] = filters.category_id
    if filters.paid_by:
        query["paid_by"] = filters.paid_by
    if filters.search:
        query["description"] = {"$regex": re.escape(filters.search), "$options": "i"}
    if filters.with_debts_only:
        query["debt"] = {"$ne": None}
    return query
