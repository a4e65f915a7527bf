"""Pydantic schemas for email correspondence."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field


class SendEmailRequest(BaseModel):
    to: EmailStr
    subject: str = Field(min_length=1, max_length=500)
    html_body: str = Field(min_length=1)
    text_body: Optional[str] = None
    related_type: Optional[str] = Field(default=None, max_length=30)
    related_id: Optional[str] = Field(default=None, max_length=64)


class ReplyRequest(BaseModel):
    subject: Optional[str] = Field(default=None, max_length=500)
    html_body: str = Field(min_length=1)
    text_body: Optional[str] = None


class EmailCorrespondenceResponse(BaseModel):
    id: UUID
    direction: str
    from_email: str
    to_email: str
    subject: str
    body_html: Optional[str] = None
    body_text: Optional[str] = None
    resend_email_id: Optional[str] = None
    status: str
    related_type: Optional[str] = None
    related_id: Optional[str] = None
    sent_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InboundEmailWebhook(BaseModel):
    """Subset of the provider's ``email.received`` event we keep."""
    type: str = "email.received"
    data: dict


class InboundEmailResponse(BaseModel):
    id: UUID
    resend_email_id: Optional[str] = None
    from_email: str
    to_email: str
    subject: Optional[str] = None
    body_text: Optional[str] = None
    body_html: Optional[str] = None
    is_read: bool
    is_replied: bool
    reply_email_id: Optional[str] = None
    received_at: datetime

    class Config:
        from_attributes = True


class EmailUsageResponse(BaseModel):
    month: str
    sent_count: int
    received_count: int
    is_shutoff: bool
    monthly_limit: int
    auto_shutoff_threshold: int
