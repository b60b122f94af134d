from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from bson import ObjectId
from bson.decimal128 import Decimal128
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict

from homeledger.engine.dates import parse_iso_date


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stringify_object_id(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


def _from_decimal128(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return value


# ObjectIds are exposed as plain strings outside the repositories
DocumentId = Annotated[str, BeforeValidator(_stringify_object_id)]

# Money is Decimal in memory and Decimal128 in MongoDB
Money = Annotated[Decimal, BeforeValidator(_from_decimal128)]

# Calendar dates are read from their YYYY-MM-DD components, never via a timestamp
CalendarDate = Annotated[date, BeforeValidator(parse_iso_date)]


class MongoModel(BaseModel):
    id: Optional[DocumentId] = Field(default=None, validation_alias="_id")
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        frozen=True
    )


def to_bson(value: Any) -> Any:
    """
    Convert python values into types the BSON encoder accepts.

    - Decimal -> Decimal128
    - Enum -> its value
    - date (but not datetime) -> ISO string, so date range queries
      compare lexicographically and never involve a time zone
    """
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_bson(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_bson(item) for item in value]
    return value


def to_document(model: BaseModel, **kwargs) -> dict:
    """Dump a model into a MongoDB document (without its id)."""
    return to_bson(model.model_dump(exclude={"id"}, **kwargs))
