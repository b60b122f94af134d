"""
Expense model - a monetary event paid by one of the primary users.

Design principles:
- Amounts are Decimal (Decimal128 in MongoDB), never floats
- Dates are calendar dates, stored as YYYY-MM-DD strings
- The contact side of an expense is an explicit tagged union
  (LegacyContact | DebtorList) instead of "contact_id or debtors"
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from homeledger.models.base import CalendarDate, MongoModel, Money


class PaymentMethod(str, Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CONTACT_DEBT = "contact_debt"  # a contact paid on the household's behalf


class ExpenseDebtor(BaseModel):
    """A contact who owes part of an expense."""
    model_config = ConfigDict(frozen=True)

    contact_id: str
    amount: Optional[Money] = Field(default=None, gt=0)  # None = equal split
    is_paid: bool = False


class LegacyContact(BaseModel):
    """Older records point at a single contact who owes/is owed the full amount."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy_contact"] = "legacy_contact"
    contact_id: str


class DebtorList(BaseModel):
    """
    One or more contacts sharing the expense with the household.

    paid_by_contact_id names which of the debtors actually paid when the
    payment method is CONTACT_DEBT.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["debtors"] = "debtors"
    debtors: List[ExpenseDebtor] = Field(..., min_length=1)
    paid_by_contact_id: Optional[str] = None

    def contact_ids(self) -> List[str]:
        return [debtor.contact_id for debtor in self.debtors]


DebtAssociation = Annotated[
    Union[LegacyContact, DebtorList],
    Field(discriminator="kind")
]


class InstallmentInfo(BaseModel):
    """Position of a record inside an installment purchase."""
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1)  # 1-based
    total: int = Field(..., ge=2)
    group_id: str


class ExpenseFields(BaseModel):
    """Fields shared by stored expenses and drafts."""
    model_config = ConfigDict(frozen=True)

    description: str = Field(..., min_length=1, max_length=200)
    amount: Money = Field(..., gt=0)
    currency: str = Field(default="ARS", min_length=3, max_length=3)
    exchange_rate: Optional[Money] = Decimal("1")
    category_id: Optional[str] = None
    paid_by: str
    split_percentage: Optional[Money] = Field(default=None, ge=0, le=100)
    date: CalendarDate
    payment_method: PaymentMethod = PaymentMethod.CASH

    installment: Optional[InstallmentInfo] = None
    debt: Optional[DebtAssociation] = None
    is_debt_settlement: bool = False

    is_recurring: bool = False
    recurring_id: Optional[str] = None
    notes: Optional[str] = None


class ExpenseDraft(ExpenseFields):
    """An expense that has not been written to the store yet."""
    pass


class Expense(MongoModel, ExpenseFields):
    """Stored expense."""
    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        frozen=True
    )
