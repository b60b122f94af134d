import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from homeledger.core.config import settings

logger = structlog.get_logger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    # Create indexes
    await create_indexes()
    logger.info("mongo_connected", database=settings.DATABASE_NAME)

async def disconnect_from_mongo():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("mongo_disconnected")

async def create_indexes():
    """Create database indexes."""
    # Expense indexes
    await mongodb.db["expenses"].create_index([("date", -1)])
    await mongodb.db["expenses"].create_index("category_id")
    await mongodb.db["expenses"].create_index("paid_by")
    await mongodb.db["expenses"].create_index("installment.group_id")
    await mongodb.db["expenses"].create_index("debt.debtors.contact_id")
    await mongodb.db["expenses"].create_index("debt.contact_id")

    # Recurring templates are looked up by due date
    await mongodb.db["recurring_expenses"].create_index([("active", 1), ("next_due_date", 1)])

    await mongodb.db["settlements"].create_index([("date", -1)])
    await mongodb.db["contacts"].create_index("name")
    await mongodb.db["categories"].create_index("name")

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
