from typing import List

from homeledger.models.settlement import Settlement
from homeledger.repositories.base import BaseRepository
from homeledger.schemas.settlement import SettlementCreate


class SettlementRepository(BaseRepository[Settlement]):
    """Settlement database operations."""

    collection_name = "settlements"
    model = Settlement

    async def create_settlement(self, settlement_data: SettlementCreate) -> Settlement:
        """Record a settlement between the primary users."""
        return await self.insert(Settlement(**settlement_data.model_dump()))

    async def list_settlements(self) -> List[Settlement]:
        """Settlements, newest first."""
        return await self.list("date", -1)
