from datetime import datetime, timezone
from typing import Generic, List, Optional, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from homeledger.models.base import MongoModel, to_bson, to_document

ModelT = TypeVar("ModelT", bound=MongoModel)


def object_id_or_none(value: str) -> Optional[ObjectId]:
    """Parse an id, treating malformed ids as "not found"."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class BaseRepository(Generic[ModelT]):
    """
    Shared CRUD for one collection.

    Documents are soft deleted (is_deleted=True) and every read filters them
    out. Store errors are not caught here; they reach the caller.
    """

    collection_name: str
    model: Type[ModelT]

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.collection_name]

    async def insert(self, item: ModelT, session=None) -> ModelT:
        """Insert a new document."""
        doc = to_document(item)
        now = datetime.now(timezone.utc)
        doc.update({"is_deleted": False, "created_at": now, "updated_at": now})

        result = await self.collection.insert_one(doc, session=session)
        doc["_id"] = result.inserted_id
        return self.model(**doc)

    async def get(self, item_id: str) -> Optional[ModelT]:
        """Get a document by id."""
        oid = object_id_or_none(item_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid, "is_deleted": False})
        if doc:
            return self.model(**doc)
        return None

    async def list(self, sort_field: str = "created_at", direction: int = -1) -> List[ModelT]:
        """List all live documents."""
        cursor = self.collection.find({"is_deleted": False}).sort(sort_field, direction)
        docs = await cursor.to_list(None)
        return [self.model(**doc) for doc in docs]

    async def update(self, item_id: str, updates: dict, session=None) -> Optional[ModelT]:
        """Apply a partial update and return the new document."""
        oid = object_id_or_none(item_id)
        if oid is None:
            return None
        if not updates:
            return await self.get(item_id)

        updates = to_bson(updates)
        updates["updated_at"] = datetime.now(timezone.utc)
        result = await self.collection.find_one_and_update(
            {"_id": oid, "is_deleted": False},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
            session=session
        )
        if result:
            return self.model(**result)
        return None

    async def soft_delete(self, item_id: str) -> bool:
        """Soft delete a document."""
        oid = object_id_or_none(item_id)
        if oid is None:
            return False
        result = await self.collection.update_one(
            {"_id": oid, "is_deleted": False},
            {"$set": {
                "is_deleted": True,
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        return result.modified_count > 0
