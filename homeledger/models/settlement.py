from typing import Optional

from pydantic import Field

from homeledger.models.base import CalendarDate, MongoModel, Money


class Settlement(MongoModel):
    """Payment from one primary user to the other, in the reference currency."""
    paid_by: str
    paid_to: str
    amount: Money = Field(..., gt=0)
    date: CalendarDate
    notes: Optional[str] = None
