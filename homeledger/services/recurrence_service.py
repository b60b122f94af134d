from datetime import date
from typing import Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from homeledger.core.config import settings
from homeledger.engine.recurrence import (
    CatchUpPolicy,
    advance,
    due_templates,
    materialize,
    periods_to_generate,
)
from homeledger.models.expense import Expense
from homeledger.models.recurring import RecurringExpense
from homeledger.repositories.expense_repo import ExpenseRepository
from homeledger.repositories.recurring_repo import RecurringExpenseRepository
from homeledger.schemas.recurring import FailedTemplate, GeneratedExpense, GenerationReport
from homeledger.utils.validation import LedgerError, validate_exchange_rate

logger = structlog.get_logger(__name__)


class StaleTemplateError(LedgerError):
    """The template's due date changed while this run was processing it."""
    pass


class RecurrenceService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.expenses = ExpenseRepository(db)
        self.recurring = RecurringExpenseRepository(db)

    async def generate_due(
        self,
        today: Optional[date] = None,
        policy: Optional[CatchUpPolicy] = None
    ) -> GenerationReport:
        """
        Materialize every due template.

        Each cycle (insert expense + advance due date) runs in its own
        transaction. A failing template is logged and reported, keeps its due
        date, and does not stop the others.
        """
        today = today or date.today()
        if policy is None:
            policy = CatchUpPolicy.ALL_MISSED if settings.RECURRENCE_CATCH_UP else CatchUpPolicy.SINGLE_PERIOD

        templates = await self.recurring.list_due(today)
        report = GenerationReport()

        for template in due_templates(templates, today):
            for state in periods_to_generate(template, today, policy):
                try:
                    expense = await self._run_cycle(state)
                except (LedgerError, PyMongoError) as exc:
                    logger.warning(
                        "recurring_generation_failed",
                        recurring_id=template.id,
                        due_date=state.next_due_date.isoformat(),
                        error=str(exc)
                    )
                    report.failed.append(FailedTemplate(
                        recurring_id=template.id,
                        description=template.description,
                        error=str(exc)
                    ))
                    break

                report.generated.append(GeneratedExpense(
                    recurring_id=template.id,
                    expense_id=expense.id,
                    description=expense.description,
                    date=expense.date
                ))

        logger.info(
            "recurring_generation_finished",
            generated=len(report.generated),
            failed=len(report.failed)
        )
        return report

    async def _run_cycle(self, template: RecurringExpense) -> Expense:
        draft = materialize(template)
        if draft.currency != settings.REFERENCE_CURRENCY:
            validate_exchange_rate(draft.exchange_rate, draft.currency)

        async with await self.db.client.start_session() as session:
            async with session.start_transaction():
                created = await self.expenses.insert_expenses([draft], session=session)
                moved = await self.recurring.advance_due_date(
                    template.id, template.next_due_date, advance(template), session=session
                )
                if not moved:
                    raise StaleTemplateError(
                        f"Template {template.id} is no longer due on {template.next_due_date}"
                    )
        return created[0]
