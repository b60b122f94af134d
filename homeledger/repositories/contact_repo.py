from typing import List

from homeledger.models.contact import Contact, ContactCreate
from homeledger.repositories.base import BaseRepository


class ContactRepository(BaseRepository[Contact]):
    """Contact database operations."""

    collection_name = "contacts"
    model = Contact

    async def create_contact(self, contact_data: ContactCreate) -> Contact:
        """Create a new contact."""
        return await self.insert(Contact(**contact_data.model_dump()))

    async def list_contacts(self) -> List[Contact]:
        """Contacts sorted by name."""
        return await self.list("name", 1)
