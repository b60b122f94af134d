from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from homeledger.models.base import MongoModel, Money


class Category(MongoModel):
    """
    Spending classification.

    default_split_percentage is the first primary user's share (0-100);
    the second user gets the complement.
    """
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = "tag"
    default_split_percentage: Money = Field(default=Decimal("50"), ge=0, le=100)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = "tag"
    default_split_percentage: Decimal = Field(default=Decimal("50"), ge=0, le=100)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = None
    default_split_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
