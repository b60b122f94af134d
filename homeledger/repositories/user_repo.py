from typing import List

from homeledger.models.user import User, UserCreate
from homeledger.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User database operations."""

    collection_name = "users"
    model = User

    async def create_user(self, user_data: UserCreate) -> User:
        """Create a new user."""
        return await self.insert(User(**user_data.model_dump()))

    async def list_users(self) -> List[User]:
        """Users in creation order."""
        return await self.list("created_at", 1)
