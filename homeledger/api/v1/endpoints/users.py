from typing import List
from fastapi import APIRouter, Depends

from homeledger.db.mongo import get_db
from homeledger.models.user import User, UserCreate
from homeledger.repositories.user_repo import UserRepository

router = APIRouter()


@router.get("", response_model=List[User])
async def list_users(db = Depends(get_db)):
    """List household users."""
    return await UserRepository(db).list_users()


@router.post("", response_model=User)
async def create_user(user_data: UserCreate, db = Depends(get_db)):
    """Create a household user."""
    return await UserRepository(db).create_user(user_data)
