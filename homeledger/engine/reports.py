"""Spending reports in the reference currency."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from homeledger.engine.balance import PrimaryPair
from homeledger.engine.currency import REFERENCE_CURRENCY, normalize_expense
from homeledger.engine.dates import shift_month
from homeledger.engine.split import resolve_split_percentage, split
from homeledger.models.balance import CategorySummary, MonthlyTotal
from homeledger.models.category import Category
from homeledger.models.expense import Expense

ZERO = Decimal("0")


def category_summaries(
    expenses: Iterable[Expense],
    categories: Iterable[Category],
    pair: PrimaryPair,
    reference_currency: str = REFERENCE_CURRENCY
) -> List[CategorySummary]:
    """
    Totals per category, largest first. Categories with no spending are omitted.

    user_a_owes is A's share of what B paid in the category, and vice versa.
    """
    totals: Dict[str, Dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
    by_id = {category.id: category for category in categories}

    for expense in expenses:
        category = by_id.get(expense.category_id)
        if category is None:
            continue
        amount = normalize_expense(expense, reference_currency)
        bucket = totals[category.id]
        bucket["total"] += amount

        shares = split(amount, resolve_split_percentage(
            expense.split_percentage, category.default_split_percentage
        ))
        if expense.paid_by == pair.user_a.id:
            bucket["user_a_paid"] += amount
            bucket["user_b_owes"] += shares.user_b
        elif expense.paid_by == pair.user_b.id:
            bucket["user_b_paid"] += amount
            bucket["user_a_owes"] += shares.user_a

    summaries = [
        CategorySummary(
            category=by_id[category_id],
            total=bucket["total"],
            user_a_paid=bucket["user_a_paid"],
            user_b_paid=bucket["user_b_paid"],
            user_a_owes=bucket["user_a_owes"],
            user_b_owes=bucket["user_b_owes"]
        )
        for category_id, bucket in totals.items()
        if bucket["total"] > 0
    ]
    summaries.sort(key=lambda summary: summary.total, reverse=True)
    return summaries


def monthly_totals(
    expenses: Iterable[Expense],
    pair: PrimaryPair,
    months: int = 6,
    today: Optional[date] = None,
    reference_currency: str = REFERENCE_CURRENCY
) -> List[MonthlyTotal]:
    """Amount paid by each primary user in each of the last ``months`` months, oldest first."""
    today = today or date.today()
    periods = [shift_month(today.year, today.month, -offset) for offset in range(months - 1, -1, -1)]
    paid = {period: [ZERO, ZERO] for period in periods}

    for expense in expenses:
        period = (expense.date.year, expense.date.month)
        if period not in paid:
            continue
        if expense.paid_by == pair.user_a.id:
            paid[period][0] += normalize_expense(expense, reference_currency)
        elif expense.paid_by == pair.user_b.id:
            paid[period][1] += normalize_expense(expense, reference_currency)

    return [
        MonthlyTotal(year=year, month=month, user_a_paid=paid[(year, month)][0],
                     user_b_paid=paid[(year, month)][1])
        for year, month in periods
    ]
