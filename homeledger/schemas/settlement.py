import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class SettlementCreate(BaseModel):
    paid_by: str
    paid_to: str
    amount: Decimal = Field(..., gt=0)
    date: dt.date = Field(default_factory=dt.date.today)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_parties(self):
        if self.paid_by == self.paid_to:
            raise ValueError("A settlement needs two different users")
        return self


class SettleUpRequest(BaseModel):
    date: dt.date = Field(default_factory=dt.date.today)
    notes: Optional[str] = None
