from datetime import date
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from homeledger.core.config import settings
from homeledger.engine.dates import month_bounds, shift_month
from homeledger.engine.reports import category_summaries, monthly_totals
from homeledger.models.balance import CategorySummary, MonthlyTotal
from homeledger.repositories.category_repo import CategoryRepository
from homeledger.repositories.expense_repo import ExpenseRepository
from homeledger.schemas.expense import ExpenseFilter
from homeledger.services.balance_service import BalanceService
from homeledger.utils.validation import LedgerValidationError


class ReportService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.expenses = ExpenseRepository(db)
        self.categories = CategoryRepository(db)
        self.balance = BalanceService(db)

    async def category_report(self, year: int, month: int) -> List[CategorySummary]:
        """Per-category spending for one month."""
        pair = await self.balance.get_pair()
        if pair is None:
            raise LedgerValidationError("Reports need two primary users")

        start, end = month_bounds(year, month)
        expenses = await self.expenses.list_expenses(ExpenseFilter(start_date=start, end_date=end))
        categories = await self.categories.list_categories()
        return category_summaries(expenses, categories, pair, settings.REFERENCE_CURRENCY)

    async def monthly_report(self, months: int = 6, today: Optional[date] = None) -> List[MonthlyTotal]:
        """What each primary user paid over the last ``months`` months."""
        today = today or date.today()
        pair = await self.balance.get_pair()
        if pair is None:
            raise LedgerValidationError("Reports need two primary users")

        first_year, first_month = shift_month(today.year, today.month, -(months - 1))
        start, _ = month_bounds(first_year, first_month)
        _, end = month_bounds(today.year, today.month)
        expenses = await self.expenses.list_expenses(ExpenseFilter(start_date=start, end_date=end))
        return monthly_totals(expenses, pair, months, today, settings.REFERENCE_CURRENCY)
