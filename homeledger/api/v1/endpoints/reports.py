from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status

from homeledger.db.mongo import get_db
from homeledger.models.balance import CategorySummary, MonthlyTotal
from homeledger.services.report_service import ReportService
from homeledger.utils.validation import LedgerValidationError

router = APIRouter()


@router.get("/categories", response_model=List[CategorySummary])
async def category_report(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    db = Depends(get_db)
):
    """Spending per category for one month."""
    try:
        return await ReportService(db).category_report(year, month)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )


@router.get("/monthly", response_model=List[MonthlyTotal])
async def monthly_report(
    months: int = Query(6, ge=1, le=36),
    db = Depends(get_db)
):
    """Amount paid by each primary user per month."""
    try:
        return await ReportService(db).monthly_report(months)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
