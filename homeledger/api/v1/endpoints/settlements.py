from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from homeledger.db.mongo import get_db
from homeledger.models.settlement import Settlement
from homeledger.repositories.settlement_repo import SettlementRepository
from homeledger.schemas.settlement import SettlementCreate, SettleUpRequest
from homeledger.services.balance_service import BalanceService
from homeledger.utils.validation import LedgerValidationError

router = APIRouter()


@router.get("", response_model=List[Settlement])
async def list_settlements(db = Depends(get_db)):
    """List settlements, newest first."""
    return await SettlementRepository(db).list_settlements()


@router.post("", response_model=Settlement)
async def create_settlement(settlement_in: SettlementCreate, db = Depends(get_db)):
    """Record a payment between the primary users."""
    return await SettlementRepository(db).create_settlement(settlement_in)


@router.post("/settle-up", response_model=Settlement)
async def settle_up(request: SettleUpRequest, db = Depends(get_db)):
    """Record the settlement that clears the current balance."""
    try:
        return await BalanceService(db).settle_up(request)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )


@router.delete("/{settlement_id}")
async def delete_settlement(settlement_id: str, db = Depends(get_db)):
    """Soft delete a settlement."""
    deleted = await SettlementRepository(db).soft_delete(settlement_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settlement not found")

    return {"success": True}
