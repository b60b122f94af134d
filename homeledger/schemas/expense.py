import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from homeledger.engine.debts import check_debt
from homeledger.models.expense import (
    DebtAssociation,
    DebtorList,
    ExpenseDraft,
    PaymentMethod,
)
from homeledger.utils.validation import LedgerValidationError


def _check_contact_payer(payment_method, debt) -> None:
    if payment_method == PaymentMethod.CONTACT_DEBT and isinstance(debt, DebtorList):
        if debt.paid_by_contact_id not in debt.contact_ids():
            raise ValueError("paid_by_contact_id must name one of the debtors when a contact paid")


class ExpenseCreate(BaseModel):
    """Expense creation schema. ``installments`` > 1 expands into a batch."""
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    currency: str = Field(default="ARS", min_length=3, max_length=3)
    exchange_rate: Decimal = Field(default=Decimal("1"), gt=0)
    category_id: Optional[str] = None
    paid_by: str
    split_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    date: dt.date
    payment_method: PaymentMethod = PaymentMethod.CASH
    installments: int = Field(default=1, ge=1, le=120)
    debt: Optional[DebtAssociation] = None
    is_debt_settlement: bool = False
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_debtors(self):
        try:
            check_debt(self.to_draft())
        except LedgerValidationError as exc:
            raise ValueError(str(exc))
        if self.is_debt_settlement and self.debt is None:
            raise ValueError("A debt settlement must name the contact(s) it settles")
        return self

    def to_draft(self) -> ExpenseDraft:
        return ExpenseDraft(**self.model_dump(exclude={"installments"}))


class ExpenseUpdate(BaseModel):
    """Partial update. Sending ``debt`` replaces the whole debt association."""
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    exchange_rate: Optional[Decimal] = Field(None, gt=0)
    category_id: Optional[str] = None
    paid_by: Optional[str] = None
    split_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    date: Optional[dt.date] = None
    payment_method: Optional[PaymentMethod] = None
    debt: Optional[DebtAssociation] = None
    is_debt_settlement: Optional[bool] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_debtors(self):
        # only what the body itself shows; the merged record is checked on update
        _check_contact_payer(self.payment_method, self.debt)
        return self


class ExpenseFilter(BaseModel):
    """Read filters for the expense list."""
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    category_id: Optional[str] = None
    paid_by: Optional[str] = None
    search: Optional[str] = None  # case-insensitive description match
    limit: Optional[int] = Field(None, ge=1, le=1000)
    with_debts_only: bool = False
