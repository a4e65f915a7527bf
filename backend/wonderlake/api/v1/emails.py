"""Email correspondence endpoints: admin outbox, inbox and the inbound webhook."""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.auth.jwt import get_current_active_admin
from wonderlake.database import get_db
from wonderlake.models.email import EmailCorrespondence, InboundEmail
from wonderlake.models.user import User
from wonderlake.schemas.email import (
    EmailCorrespondenceResponse,
    EmailUsageResponse,
    InboundEmailResponse,
    InboundEmailWebhook,
    ReplyRequest,
    SendEmailRequest,
)
from wonderlake.services.email import (
    EmailQuotaExceeded,
    EmailSendError,
    ResendClient,
    email_limits,
    ensure_can_send,
    get_or_create_usage,
    html_to_text,
    increment_received,
    increment_sent,
)
from wonderlake.utils.audit import log_audit_event

router = APIRouter(tags=["Email"])
logger = logging.getLogger("wonderlake.api.emails")


def get_resend_client() -> ResendClient:
    return ResendClient()


def _address(value) -> str:
    """Provider payloads carry either a string or a list of recipients."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value or "")


async def _send_and_record(
    db: AsyncSession,
    client: ResendClient,
    current_user: User,
    to: str,
    subject: str,
    html_body: str,
    text_body: Optional[str],
    related_type: Optional[str] = None,
    related_id: Optional[str] = None,
) -> EmailCorrespondence:
    try:
        await ensure_can_send(db)
    except EmailQuotaExceeded as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
        )

    record = EmailCorrespondence(
        direction="outbound",
        from_email=client.from_email,
        to_email=to,
        subject=subject,
        body_html=html_body,
        body_text=text_body or html_to_text(html_body),
        related_type=related_type,
        related_id=related_id,
        sent_by=current_user.email,
    )

    try:
        record.resend_email_id = await client.send_email(to, subject, html_body, text_body)
    except EmailSendError as e:
        # Keep the failed attempt in the outbox before reporting the error.
        record.status = "failed"
        db.add(record)
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    record.status = "sent"
    db.add(record)
    await increment_sent(db)
    await db.flush()
    return record


# --- Outbound ---
@router.post(
    "/admin/emails/send",
    response_model=EmailCorrespondenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_email(
    data: SendEmailRequest,
    db: AsyncSession = Depends(get_db),
    client: ResendClient = Depends(get_resend_client),
    current_user: User = Depends(get_current_active_admin),
):
    """Send an email from the dashboard and keep a copy in the outbox."""
    record = await _send_and_record(
        db,
        client,
        current_user,
        to=data.to,
        subject=data.subject,
        html_body=data.html_body,
        text_body=data.text_body,
        related_type=data.related_type,
        related_id=data.related_id,
    )
    log_audit_event(
        "email_sent",
        actor=current_user,
        details={"to": data.to, "email_id": record.resend_email_id},
    )
    return record


@router.get("/admin/emails", response_model=List[EmailCorrespondenceResponse])
async def list_correspondence(
    related_type: Optional[str] = None,
    related_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    query = select(EmailCorrespondence).order_by(EmailCorrespondence.created_at.desc())
    if related_type:
        query = query.where(EmailCorrespondence.related_type == related_type)
    if related_id:
        query = query.where(EmailCorrespondence.related_id == related_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/admin/emails/usage", response_model=EmailUsageResponse)
async def get_email_usage(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    usage = await get_or_create_usage(db)
    return EmailUsageResponse(
        month=usage.month,
        sent_count=usage.sent_count,
        received_count=usage.received_count,
        is_shutoff=usage.is_shutoff,
        **email_limits(),
    )


# --- Inbound ---
async def _get_inbound_or_404(email_id: UUID, db: AsyncSession) -> InboundEmail:
    email = await db.get(InboundEmail, email_id)
    if not email:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email not found",
        )
    return email


@router.get("/admin/inbound-emails", response_model=List[InboundEmailResponse])
async def list_inbound_emails(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    result = await db.execute(select(InboundEmail).order_by(InboundEmail.received_at.desc()))
    return result.scalars().all()


@router.post("/admin/inbound-emails/{email_id}/read", response_model=InboundEmailResponse)
async def mark_inbound_read(
    email_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    email = await _get_inbound_or_404(email_id, db)
    email.is_read = True
    await db.flush()
    return email


@router.post(
    "/admin/inbound-emails/{email_id}/reply",
    response_model=EmailCorrespondenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_inbound(
    email_id: UUID,
    data: ReplyRequest,
    db: AsyncSession = Depends(get_db),
    client: ResendClient = Depends(get_resend_client),
    current_user: User = Depends(get_current_active_admin),
):
    """Reply to the sender of an inbound email."""
    email = await _get_inbound_or_404(email_id, db)

    subject = data.subject or f"Re: {email.subject or ''}".strip()
    record = await _send_and_record(
        db,
        client,
        current_user,
        to=email.from_email,
        subject=subject,
        html_body=data.html_body,
        text_body=data.text_body,
        related_type="inbound_email",
        related_id=str(email.id),
    )

    email.is_read = True
    email.is_replied = True
    email.reply_email_id = record.resend_email_id
    await db.flush()

    log_audit_event(
        "inbound_email_replied",
        actor=current_user,
        details={"inbound_email_id": email.id, "email_id": record.resend_email_id},
    )
    return record


@router.delete("/admin/inbound-emails/{email_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inbound_email(
    email_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    email = await _get_inbound_or_404(email_id, db)
    await db.delete(email)
    await db.flush()

    log_audit_event("inbound_email_deleted", actor=current_user, details={"inbound_email_id": email_id})


@router.post("/webhooks/resend/inbound")
async def receive_inbound_email(
    event: InboundEmailWebhook,
    db: AsyncSession = Depends(get_db),
    client: ResendClient = Depends(get_resend_client),
):
    """
    Store an email received by the provider.

    Events are delivered at least once, so a provider id seen before is
    acknowledged without storing a second copy. When the event carries no
    body, the content is fetched from the provider.
    """
    if event.type != "email.received":
        return {"received": True, "stored": False}

    data = event.data
    resend_id = data.get("email_id") or data.get("id")
    if resend_id:
        existing = await db.execute(
            select(InboundEmail.id).where(InboundEmail.resend_email_id == resend_id)
        )
        if existing.first():
            logger.info(f"Ignoring duplicate inbound email {resend_id}")
            return {"received": True, "stored": False}

    body_text, body_html = data.get("text"), data.get("html")
    if resend_id and body_text is None and body_html is None:
        try:
            content = await client.get_email(resend_id)
            body_text, body_html = content.get("text"), content.get("html")
        except EmailSendError as e:
            logger.warning(f"Stored inbound email {resend_id} without body: {e}")

    email = InboundEmail(
        resend_email_id=resend_id,
        from_email=_address(data.get("from")),
        to_email=_address(data.get("to")),
        subject=data.get("subject"),
        body_text=body_text,
        body_html=body_html,
    )
    db.add(email)
    await increment_received(db)
    await db.flush()

    logger.info(f"Stored inbound email {email.id} from {email.from_email}")
    return {"received": True, "stored": True, "id": str(email.id)}
