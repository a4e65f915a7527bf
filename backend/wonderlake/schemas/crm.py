"""Pydantic schemas for interested parties, contacts and unsubscribe."""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# --- Interested parties ---
class InterestedPartyCreate(BaseModel):
    """Public interest form submission."""
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    address: str = Field(min_length=5, max_length=500)
    phone: Optional[str] = Field(default=None, max_length=20)
    notes: Optional[str] = Field(default=None, max_length=1000)
    source: Literal["address_checker", "tax_estimator"]

    @field_validator("phone", "notes", mode="before")
    @classmethod
    def blank_optional(cls, value):
        return _blank_to_none(value)


class InterestedPartyResponse(BaseModel):
    id: UUID
    name: str
    email: str
    address: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    source: str
    email_sent: bool
    unsubscribed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionResponse(BaseModel):
    """Acknowledgement returned by the public forms."""
    success: bool = True
    message: str
    id: UUID


# --- Contacts ---
class ContactBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = None


class ContactCreate(ContactBase):
    source: str = Field(default="manual", max_length=30)


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = None
    source: Optional[str] = Field(default=None, max_length=30)


class ContactResponse(ContactBase):
    id: UUID
    source: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Unsubscribe ---
class UnsubscribeRequest(BaseModel):
    token: str = Field(min_length=1)
    type: Literal["interested", "question"]


class UnsubscribeValidation(BaseModel):
    valid: bool
    already_unsubscribed: bool = False
    email: Optional[str] = None
