"""Admin contact book endpoints."""
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.auth.jwt import get_current_active_admin
from wonderlake.database import get_db
from wonderlake.models.crm import Contact
from wonderlake.models.user import User
from wonderlake.schemas.crm import ContactCreate, ContactResponse, ContactUpdate
from wonderlake.utils.audit import log_audit_event

router = APIRouter(prefix="/admin/contacts", tags=["Contacts"])


async def _get_contact_or_404(contact_id: UUID, db: AsyncSession) -> Contact:
    contact = await db.get(Contact, contact_id)
    if not contact:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found",
        )
    return contact


async def _ensure_email_free(email: str, db: AsyncSession, exclude_id: UUID = None) -> None:
    query = select(Contact.id).where(Contact.email == email)
    if exclude_id is not None:
        query = query.where(Contact.id != exclude_id)
    result = await db.execute(query)
    if result.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A contact with this email already exists",
        )


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    result = await db.execute(select(Contact).order_by(Contact.name))
    return result.scalars().all()


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    data: ContactCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    await _ensure_email_free(data.email, db)

    contact = Contact(**data.model_dump())
    db.add(contact)
    await db.flush()
    await db.refresh(contact)

    log_audit_event("contact_created", actor=current_user, details={"contact_id": contact.id})
    return contact


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    return await _get_contact_or_404(contact_id, db)


@router.patch("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: UUID,
    data: ContactUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    contact = await _get_contact_or_404(contact_id, db)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("email") and changes["email"] != contact.email:
        await _ensure_email_free(changes["email"], db, exclude_id=contact.id)

    for field, value in changes.items():
        setattr(contact, field, value)
    contact.updated_at = datetime.utcnow()
    await db.flush()
    await db.refresh(contact)

    log_audit_event(
        "contact_updated",
        actor=current_user,
        details={"contact_id": contact.id, "fields": sorted(changes)},
    )
    return contact


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    contact = await _get_contact_or_404(contact_id, db)
    await db.delete(contact)
    await db.flush()

    log_audit_event("contact_deleted", actor=current_user, details={"contact_id": contact_id})
