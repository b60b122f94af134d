from fastapi import APIRouter
from homeledger.api.v1.endpoints import (
    balance,
    categories,
    contacts,
    expenses,
    recurring,
    reports,
    settlements,
    users,
)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(recurring.router, prefix="/recurring", tags=["recurring"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(balance.router, tags=["balance"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
