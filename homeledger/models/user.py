from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from homeledger.models.base import MongoModel


class User(MongoModel):
    """Primary household member."""
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None


class UserCreate(BaseModel):
    """User creation schema."""
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
