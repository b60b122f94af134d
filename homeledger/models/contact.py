from enum import Enum
from pydantic import BaseModel, Field

from homeledger.models.base import MongoModel


class ContactKind(str, Enum):
    PERSON = "person"
    BUSINESS = "business"
    OTHER = "other"


class Contact(MongoModel):
    """External party that can owe the household or be owed by it."""
    name: str = Field(..., min_length=1, max_length=100)
    kind: ContactKind = ContactKind.PERSON


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    kind: ContactKind = ContactKind.PERSON
