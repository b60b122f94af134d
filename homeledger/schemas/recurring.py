import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from homeledger.models.expense import PaymentMethod
from homeledger.models.recurring import Frequency


class RecurringExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    currency: str = Field(default="ARS", min_length=3, max_length=3)
    exchange_rate: Decimal = Field(default=Decimal("1"), gt=0)
    category_id: Optional[str] = None
    paid_by: str
    split_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    payment_method: PaymentMethod = PaymentMethod.CASH
    frequency: Frequency = Frequency.MONTHLY
    start_date: dt.date
    next_due_date: Optional[dt.date] = None  # defaults to start_date
    active: bool = True

    @model_validator(mode="after")
    def default_next_due(self):
        if self.next_due_date is None:
            self.next_due_date = self.start_date
        return self


class RecurringExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    exchange_rate: Optional[Decimal] = Field(None, gt=0)
    category_id: Optional[str] = None
    paid_by: Optional[str] = None
    split_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    payment_method: Optional[PaymentMethod] = None
    frequency: Optional[Frequency] = None
    next_due_date: Optional[dt.date] = None
    active: Optional[bool] = None


class GeneratedExpense(BaseModel):
    recurring_id: str
    expense_id: str
    description: str
    date: dt.date


class FailedTemplate(BaseModel):
    recurring_id: str
    description: str
    error: str


class GenerationReport(BaseModel):
    """Outcome of one recurrence run."""
    generated: List[GeneratedExpense] = []
    failed: List[FailedTemplate] = []
