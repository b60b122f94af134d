from datetime import date
from typing import Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase

from homeledger.core.config import settings
from homeledger.engine.balance import PrimaryPair, compute_balance, primary_pair, settle_up
from homeledger.models.balance import HouseholdBalance
from homeledger.models.settlement import Settlement
from homeledger.repositories.category_repo import CategoryRepository
from homeledger.repositories.expense_repo import ExpenseRepository
from homeledger.repositories.settlement_repo import SettlementRepository
from homeledger.repositories.user_repo import UserRepository
from homeledger.schemas.expense import ExpenseFilter
from homeledger.schemas.settlement import SettleUpRequest

logger = structlog.get_logger(__name__)


class BalanceService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = UserRepository(db)
        self.expenses = ExpenseRepository(db)
        self.settlements = SettlementRepository(db)
        self.categories = CategoryRepository(db)

    async def get_pair(self) -> Optional[PrimaryPair]:
        """The configured primary users, or None if fewer than two exist."""
        users = await self.users.list_users()
        return primary_pair(users, settings.PRIMARY_USER_A_ID, settings.PRIMARY_USER_B_ID)

    async def get_balance(self, today: Optional[date] = None) -> HouseholdBalance:
        """Current balance between the two primary users."""
        today = today or date.today()
        pair = await self.get_pair()
        if pair is None:
            return compute_balance([], [], None, reference_currency=settings.REFERENCE_CURRENCY)

        expenses = await self.expenses.list_expenses(ExpenseFilter(end_date=today))
        settlements = await self.settlements.list_settlements()
        defaults = await self.categories.split_defaults()

        return compute_balance(
            expenses,
            settlements,
            pair,
            defaults,
            today=today,
            reference_currency=settings.REFERENCE_CURRENCY
        )

    async def settle_up(self, request: SettleUpRequest) -> Settlement:
        """Record the settlement that clears the current balance."""
        balance = await self.get_balance(today=request.date)
        settlement = settle_up(balance, request.date, request.notes)
        created = await self.settlements.insert(settlement)
        logger.info(
            "settled_up",
            paid_by=created.paid_by,
            paid_to=created.paid_to,
            amount=str(created.amount)
        )
        return created
