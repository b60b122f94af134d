from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from homeledger.db.mongo import get_db
from homeledger.models.contact import Contact, ContactCreate
from homeledger.repositories.contact_repo import ContactRepository

router = APIRouter()


@router.get("", response_model=List[Contact])
async def list_contacts(db = Depends(get_db)):
    """List contacts by name."""
    return await ContactRepository(db).list_contacts()


@router.post("", response_model=Contact)
async def create_contact(contact_data: ContactCreate, db = Depends(get_db)):
    """Create a contact."""
    return await ContactRepository(db).create_contact(contact_data)


@router.delete("/{contact_id}")
async def delete_contact(contact_id: str, db = Depends(get_db)):
    """Soft delete a contact."""
    deleted = await ContactRepository(db).soft_delete(contact_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")

    return {"success": True}
