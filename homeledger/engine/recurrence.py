"""
Recurring expense scheduling.

A template is due when it is active and its next_due_date is on or before
today. Materializing it yields an expense dated next_due_date; advancing it
moves next_due_date forward by exactly one period from its previous value.

By default each run handles one period per template, so a template that missed
several periods catches up one period per run. ``CatchUpPolicy.ALL_MISSED``
opts into generating every missed period in a single run.
"""

import calendar
from datetime import date
from enum import Enum
from typing import Iterable, List

from homeledger.engine.dates import add_months, add_weeks
from homeledger.models.expense import ExpenseDraft
from homeledger.models.recurring import Frequency, RecurringExpense


class CatchUpPolicy(str, Enum):
    SINGLE_PERIOD = "single_period"
    ALL_MISSED = "all_missed"


def is_due(template: RecurringExpense, today: date) -> bool:
    return template.active and template.next_due_date <= today


def due_templates(templates: Iterable[RecurringExpense], today: date) -> List[RecurringExpense]:
    """Active templates whose next_due_date is on or before ``today``."""
    return [template for template in templates if is_due(template, today)]


def materialize(template: RecurringExpense) -> ExpenseDraft:
    """Concrete expense for the template's current due date."""
    return ExpenseDraft(
        description=template.description,
        amount=template.amount,
        currency=template.currency,
        exchange_rate=template.exchange_rate,
        category_id=template.category_id,
        paid_by=template.paid_by,
        split_percentage=template.split_percentage,
        payment_method=template.payment_method,
        date=template.next_due_date,
        is_recurring=True,
        recurring_id=template.id,
    )


def _anchor_day(template: RecurringExpense) -> int:
    # A due date sitting on a clamped month end goes back to the start day
    due = template.next_due_date
    last_day = calendar.monthrange(due.year, due.month)[1]
    if due.day == last_day and template.start_date.day > due.day:
        return template.start_date.day
    return due.day


def advance(template: RecurringExpense) -> date:
    """
    Next due date after the current one.

    Monthly templates that started on a late day of month return to it after
    a shorter month (start Jan 31: Feb 28, Mar 31, Apr 30, ...).
    """
    if template.frequency == Frequency.MONTHLY:
        return add_months(template.next_due_date, 1, anchor_day=_anchor_day(template))
    return add_weeks(template.next_due_date, 1)


def advanced(template: RecurringExpense) -> RecurringExpense:
    """Copy of the template with next_due_date moved one period forward."""
    return template.model_copy(update={"next_due_date": advance(template)})


def periods_to_generate(
    template: RecurringExpense,
    today: date,
    policy: CatchUpPolicy = CatchUpPolicy.SINGLE_PERIOD
) -> List[RecurringExpense]:
    """
    Template states to materialize in this run, oldest first.

    Each entry carries the next_due_date the expense is dated on. An
    inactive or not-yet-due template yields nothing.
    """
    if not is_due(template, today):
        return []
    if policy == CatchUpPolicy.SINGLE_PERIOD:
        return [template]

    states = []
    current = template
    while is_due(current, today):
        states.append(current)
        current = advanced(current)
    return states
