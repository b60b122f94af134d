from datetime import date
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from homeledger.core.config import settings
from homeledger.engine.dates import month_bounds
from homeledger.engine.debts import DebtCurrencyMode, compute_debts
from homeledger.models.balance import ContactDebtSummary
from homeledger.repositories.contact_repo import ContactRepository
from homeledger.repositories.expense_repo import ExpenseRepository
from homeledger.schemas.expense import ExpenseFilter


class DebtService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.expenses = ExpenseRepository(db)
        self.contacts = ContactRepository(db)

    async def get_debts(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[ContactDebtSummary]:
        """
        Debt summary per contact, optionally restricted to one month.

        month is 1-based; both year and month are needed to filter.
        """
        filters = ExpenseFilter(with_debts_only=True)
        if year is not None and month is not None:
            start, end = month_bounds(year, month)
            filters = ExpenseFilter(start_date=start, end_date=end, with_debts_only=True)

        expenses = await self.expenses.list_expenses(filters)
        contacts = await self.contacts.list_contacts()

        summaries = compute_debts(
            expenses,
            contacts,
            today=today,
            reference_currency=settings.REFERENCE_CURRENCY,
            currency_mode=DebtCurrencyMode(settings.DEBT_CURRENCY_MODE)
        )
        return list(summaries.values())
