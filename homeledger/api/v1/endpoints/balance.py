from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from homeledger.db.mongo import get_db
from homeledger.models.balance import ContactDebtSummary, HouseholdBalance
from homeledger.services.balance_service import BalanceService
from homeledger.services.debt_service import DebtService
from homeledger.utils.validation import LedgerValidationError

router = APIRouter()


@router.get("/balance", response_model=HouseholdBalance)
async def get_balance(db = Depends(get_db)):
    """Net balance between the two primary users (reference currency)."""
    return await BalanceService(db).get_balance()


@router.get("/debts", response_model=List[ContactDebtSummary])
async def get_debts(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12, description="1-based month, needs year"),
    db = Depends(get_db)
):
    """Per-contact, per-currency debts."""
    try:
        return await DebtService(db).get_debts(year=year, month=month)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
