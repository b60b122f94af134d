from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from homeledger.models.base import CalendarDate, MongoModel, Money
from homeledger.models.expense import PaymentMethod


class Frequency(str, Enum):
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class RecurringExpense(MongoModel):
    """
    Template for periodic expenses (rent, subscriptions, utilities).

    next_due_date only moves forward, one period per materialized expense.
    """
    description: str = Field(..., min_length=1, max_length=200)
    amount: Money = Field(..., gt=0)
    currency: str = Field(default="ARS", min_length=3, max_length=3)
    exchange_rate: Optional[Money] = Decimal("1")
    category_id: Optional[str] = None
    paid_by: str
    split_percentage: Optional[Money] = Field(default=None, ge=0, le=100)
    payment_method: PaymentMethod = PaymentMethod.CASH
    frequency: Frequency = Frequency.MONTHLY
    start_date: CalendarDate
    next_due_date: CalendarDate
    active: bool = True
