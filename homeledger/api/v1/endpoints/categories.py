from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from homeledger.db.mongo import get_db
from homeledger.models.category import Category, CategoryCreate, CategoryUpdate
from homeledger.repositories.category_repo import CategoryRepository

router = APIRouter()


@router.get("", response_model=List[Category])
async def list_categories(db = Depends(get_db)):
    """List categories by name."""
    return await CategoryRepository(db).list_categories()


@router.post("", response_model=Category)
async def create_category(category_data: CategoryCreate, db = Depends(get_db)):
    """Create a category."""
    return await CategoryRepository(db).create_category(category_data)


@router.patch("/{category_id}", response_model=Category)
async def update_category(category_id: str, category_data: CategoryUpdate, db = Depends(get_db)):
    """Update a category."""
    category = await CategoryRepository(db).update_category(category_id, category_data)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    return category


@router.delete("/{category_id}")
async def delete_category(category_id: str, db = Depends(get_db)):
    """Soft delete a category."""
    deleted = await CategoryRepository(db).soft_delete(category_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    return {"success": True}
