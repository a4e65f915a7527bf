"""Unsubscribe tokens for people who gave us their email address."""
import re
import secrets
from typing import Optional, Union

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.models.community import CommunityQuestion
from wonderlake.models.crm import InterestedParty

_EMAIL_MASK_RE = re.compile(r"^(.{2}).*(@.*)$")

_MODELS = {
    "interested": InterestedParty,
    "question": CommunityQuestion,
}

Subscriber = Union[InterestedParty, CommunityQuestion]


def generate_unsubscribe_token() -> str:
    """64 hex characters."""
    return secrets.token_hex(32)


def mask_email(email: str) -> str:
    """``jane.doe@example.com`` -> ``ja***@example.com``."""
    return _EMAIL_MASK_RE.sub(r"\1***\2", email)


async def find_subscriber(db: AsyncSession, kind: str, token: str) -> Optional[Subscriber]:
    model = _MODELS[kind]
    result = await db.execute(select(model).where(model.unsubscribe_token == token))
    return result.scalars().first()


async def unsubscribe(db: AsyncSession, kind: str, token: str) -> bool:
    """Flag every record holding ``token``; False when none does."""
    model = _MODELS[kind]
    result = await db.execute(
        update(model)
        .where(model.unsubscribe_token == token)
        .values(unsubscribed=True)
    )
    return result.rowcount > 0
