"""
Derived results.

The two-party balance is reference-currency only, while contact debts are
tracked per currency. They are separate types on purpose so a caller can never
read one as the other.
"""

from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from homeledger.models.category import Category
from homeledger.models.contact import Contact
from homeledger.models.user import User


class HouseholdBalance(BaseModel):
    """Net position between the two primary users."""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Decimal("0")
    debtor: Optional[User] = None
    creditor: Optional[User] = None
    is_settled: bool = True
    currency: str = "ARS"


class DebtBalance(BaseModel):
    """What the household owes a contact, and is owed by it, in one currency."""
    model_config = ConfigDict(frozen=True)

    currency: str
    owed_by_me: Decimal = Decimal("0")
    owed_to_me: Decimal = Decimal("0")
    net_balance: Decimal = Decimal("0")  # owed_to_me - owed_by_me


class ContactDebtSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    contact: Contact
    balances: Dict[str, DebtBalance]  # keyed by currency code


class CategorySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Category
    total: Decimal
    user_a_paid: Decimal
    user_b_paid: Decimal
    user_a_owes: Decimal
    user_b_owes: Decimal


class MonthlyTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    user_a_paid: Decimal
    user_b_paid: Decimal
