from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from homeledger.db.mongo import get_db
from homeledger.models.recurring import RecurringExpense
from homeledger.repositories.recurring_repo import RecurringExpenseRepository
from homeledger.schemas.recurring import (
    GenerationReport,
    RecurringExpenseCreate,
    RecurringExpenseUpdate,
)
from homeledger.services.recurrence_service import RecurrenceService

router = APIRouter()


@router.get("", response_model=List[RecurringExpense])
async def list_recurring(db = Depends(get_db)):
    """List templates by next due date."""
    return await RecurringExpenseRepository(db).list_recurring()


@router.post("", response_model=RecurringExpense)
async def create_recurring(recurring_in: RecurringExpenseCreate, db = Depends(get_db)):
    """Create a recurring expense template."""
    return await RecurringExpenseRepository(db).create_recurring(recurring_in)


@router.post("/generate", response_model=GenerationReport)
async def generate_due_expenses(db = Depends(get_db)):
    """Materialize every template that is due today or earlier."""
    return await RecurrenceService(db).generate_due()


@router.patch("/{recurring_id}", response_model=RecurringExpense)
async def update_recurring(recurring_id: str, recurring_in: RecurringExpenseUpdate, db = Depends(get_db)):
    """Update a template."""
    recurring = await RecurringExpenseRepository(db).update_recurring(recurring_id, recurring_in)
    if not recurring:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recurring expense not found")

    return recurring


@router.delete("/{recurring_id}")
async def delete_recurring(recurring_id: str, db = Depends(get_db)):
    """Soft delete a template."""
    deleted = await RecurringExpenseRepository(db).soft_delete(recurring_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recurring expense not found")

    return {"success": True}
