from decimal import Decimal
from typing import Dict, List, Optional

from homeledger.models.category import Category, CategoryCreate, CategoryUpdate
from homeledger.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Category database operations."""

    collection_name = "categories"
    model = Category

    async def create_category(self, category_data: CategoryCreate) -> Category:
        """Create a new category."""
        return await self.insert(Category(**category_data.model_dump()))

    async def list_categories(self) -> List[Category]:
        """Categories sorted by name."""
        return await self.list("name", 1)

    async def update_category(self, category_id: str, update_data: CategoryUpdate) -> Optional[Category]:
        """Update a category."""
        return await self.update(category_id, update_data.model_dump(exclude_unset=True))

    async def split_defaults(self) -> Dict[str, Decimal]:
        """Default split percentage per category id."""
        return {
            category.id: category.default_split_percentage
            for category in await self.list_categories()
        }
