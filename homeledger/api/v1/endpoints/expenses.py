from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from homeledger.db.mongo import get_db
from homeledger.engine.dates import month_bounds
from homeledger.models.expense import Expense
from homeledger.repositories.expense_repo import ExpenseRepository
from homeledger.schemas.expense import ExpenseCreate, ExpenseFilter, ExpenseUpdate
from homeledger.services.expense_service import ExpenseService
from homeledger.utils.validation import LedgerValidationError

router = APIRouter()


@router.get("", response_model=List[Expense])
async def list_expenses(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12, description="1-based month, needs year"),
    category_id: Optional[str] = None,
    paid_by: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db = Depends(get_db)
):
    """List expenses, newest first."""
    start = end = None
    if year is not None and month is not None:
        start, end = month_bounds(year, month)

    filters = ExpenseFilter(
        start_date=start,
        end_date=end,
        category_id=category_id,
        paid_by=paid_by,
        search=search,
        limit=limit
    )
    return await ExpenseRepository(db).list_expenses(filters)


@router.post("", response_model=List[Expense])
async def create_expense(expense_in: ExpenseCreate, db = Depends(get_db)):
    """Create an expense; returns every installment created."""
    try:
        return await ExpenseService(db).create(expense_in)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )


@router.patch("/{expense_id}", response_model=Expense)
async def update_expense(expense_id: str, expense_in: ExpenseUpdate, db = Depends(get_db)):
    """Update an expense, including replacing its debtors."""
    try:
        expense = await ExpenseService(db).update(expense_id, expense_in)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")

    return expense


@router.delete("/{expense_id}")
async def delete_expense(expense_id: str, db = Depends(get_db)):
    """Soft delete an expense."""
    deleted = await ExpenseRepository(db).soft_delete(expense_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")

    return {"success": True}
