from typing import List, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from homeledger.core.config import settings
from homeledger.engine.debts import check_debt
from homeledger.engine.installments import generate_installments
from homeledger.models.expense import Expense, ExpenseDraft
from homeledger.repositories.expense_repo import ExpenseRepository
from homeledger.schemas.expense import ExpenseCreate, ExpenseUpdate
from homeledger.utils.validation import LedgerValidationError

logger = structlog.get_logger(__name__)


class ExpenseService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.expenses = ExpenseRepository(db)

    async def create(self, expense_in: ExpenseCreate) -> List[Expense]:
        """
        Create an expense, expanded into installments when requested.

        A multi-installment batch is written inside a transaction so either
        every installment is stored or none is.
        """
        drafts = generate_installments(
            expense_in.to_draft(),
            expense_in.installments,
            settings.REFERENCE_CURRENCY
        )

        if len(drafts) == 1:
            created = await self.expenses.insert_expenses(drafts)
        else:
            async with await self.db.client.start_session() as session:
                async with session.start_transaction():
                    created = await self.expenses.insert_expenses(drafts, session=session)

        logger.info(
            "expenses_created",
            description=expense_in.description,
            installments=len(created),
            group_id=drafts[0].installment.group_id if drafts[0].installment else None
        )
        return created

    async def update(self, expense_id: str, expense_in: ExpenseUpdate) -> Optional[Expense]:
        """
        Apply a partial update after checking the record it would produce.

        A body can be fine on its own and still break the stored record, e.g.
        switching to contact_debt on an expense whose debtors name no payer.
        """
        current = await self.expenses.get(expense_id)
        if current is None:
            return None

        changes = expense_in.model_dump(exclude_unset=True)
        try:
            merged = ExpenseDraft(**{
                **current.model_dump(exclude={"id", "is_deleted", "created_at", "updated_at"}),
                **changes
            })
        except ValidationError as exc:
            raise LedgerValidationError(f"Update would leave an invalid expense: {exc}")
        check_debt(merged)

        return await self.expenses.update_expense(expense_id, expense_in)
