"""Outbound email through the Resend REST API, with monthly usage tracking."""
import logging
import re
from datetime import datetime
from typing import Optional

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.config import get_settings
from wonderlake.models.email import EmailUsage

settings = get_settings()
logger = logging.getLogger("wonderlake.email")

_TAG_RE = re.compile(r"<[^>]*>")


class EmailSendError(RuntimeError):
    """Provider rejected the message or could not be reached."""


class EmailQuotaExceeded(RuntimeError):
    """Sending is shut off for the current month."""


def html_to_text(html: str) -> str:
    return _TAG_RE.sub("", html)


def current_month(now: Optional[datetime] = None) -> str:
    now = now or datetime.utcnow()
    return f"{now.year}-{now.month:02d}"


class ResendClient:
    """Thin async client for the two Resend endpoints the dashboard uses."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        from_email: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.base_url = (base_url or settings.RESEND_API_URL).rstrip("/")
        self.from_email = from_email or settings.EMAIL_FROM
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise EmailSendError("RESEND_API_KEY environment variable is not set")
        return {"Authorization": f"Bearer {self.api_key}"}

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> str:
        """Send one message and return the provider's email id."""
        payload = {
            "from": self.from_email,
            "to": [to],
            "subject": subject,
            "html": html_body,
            "text": text_body or html_to_text(html_body),
        }
        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/emails", json=payload, headers=self._headers()
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPError as e:
                logger.error(f"Failed to send email to {to}: {e}")
                raise EmailSendError(f"Email provider error: {e}") from e

        email_id = data.get("id")
        if not email_id:
            raise EmailSendError("Email provider did not return a message id")
        logger.info(f"Sent email {email_id} to {to}")
        return email_id

    async def get_email(self, email_id: str) -> dict:
        """Fetch a message body from the provider (used for inbound mail)."""
        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/emails/{email_id}", headers=self._headers()
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise EmailSendError(f"Failed to fetch email content: {e}") from e
            return response.json()


def email_limits() -> dict:
    return {
        "monthly_limit": settings.EMAIL_MONTHLY_LIMIT,
        "auto_shutoff_threshold": settings.EMAIL_AUTO_SHUTOFF_THRESHOLD,
    }


async def get_or_create_usage(db: AsyncSession, month: Optional[str] = None) -> EmailUsage:
    month = month or current_month()
    result = await db.execute(select(EmailUsage).where(EmailUsage.month == month))
    usage = result.scalar_one_or_none()
    if usage is None:
        usage = EmailUsage(month=month, sent_count=0, received_count=0, is_shutoff=False)
        db.add(usage)
        await db.flush()
    return usage


def _apply_shutoff(usage: EmailUsage) -> None:
    total = usage.sent_count + usage.received_count
    if not usage.is_shutoff and total >= settings.EMAIL_AUTO_SHUTOFF_THRESHOLD:
        usage.is_shutoff = True
        logger.warning(
            f"Email usage for {usage.month} reached {total}; sending shut off "
            f"(threshold {settings.EMAIL_AUTO_SHUTOFF_THRESHOLD})"
        )


async def ensure_can_send(db: AsyncSession) -> EmailUsage:
    usage = await get_or_create_usage(db)
    if usage.is_shutoff:
        raise EmailQuotaExceeded(
            f"Email sending is shut off for {usage.month} to stay under the monthly limit"
        )
    return usage


async def increment_sent(db: AsyncSession) -> EmailUsage:
    usage = await get_or_create_usage(db)
    usage.sent_count += 1
    _apply_shutoff(usage)
    await db.flush()
    return usage


async def increment_received(db: AsyncSession) -> EmailUsage:
    usage = await get_or_create_usage(db)
    usage.received_count += 1
    _apply_shutoff(usage)
    await db.flush()
    return usage
