"""Interest form and unsubscribe API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.database import get_db
from wonderlake.models.crm import InterestedParty
from wonderlake.schemas.crm import (
    InterestedPartyCreate,
    SubmissionResponse,
    UnsubscribeRequest,
    UnsubscribeValidation,
)
from wonderlake.services.rate_limit import enforce_submission_rate_limit
from wonderlake.services.subscriptions import (
    find_subscriber,
    generate_unsubscribe_token,
    mask_email,
    unsubscribe,
)

router = APIRouter(tags=["Interested Parties"])
logger = logging.getLogger("wonderlake.api.interest")


@router.post(
    "/interested",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_submission_rate_limit)],
)
async def register_interest(
    data: InterestedPartyCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record someone who wants updates about annexation."""
    result = await db.execute(
        select(InterestedParty.id).where(InterestedParty.email == data.email)
    )
    if result.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This email address has already been registered",
        )

    party = InterestedParty(
        name=data.name,
        email=data.email,
        address=data.address,
        phone=data.phone,
        notes=data.notes,
        source=data.source,
        unsubscribe_token=generate_unsubscribe_token(),
    )
    db.add(party)
    await db.flush()
    logger.info(f"Registered interested party {party.id} from {data.source}")

    return SubmissionResponse(
        message="Thank you for your interest! We'll keep you updated.",
        id=party.id,
    )


@router.post("/unsubscribe")
async def unsubscribe_from_emails(
    data: UnsubscribeRequest,
    db: AsyncSession = Depends(get_db),
):
    if not await unsubscribe(db, data.type, data.token):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid or expired unsubscribe link",
        )
    return {"success": True, "message": "You have been unsubscribed"}


@router.get("/unsubscribe/validate", response_model=UnsubscribeValidation)
async def validate_unsubscribe_token(
    token: str = Query(..., min_length=1),
    type: str = Query(..., pattern="^(interested|question)$"),
    db: AsyncSession = Depends(get_db),
):
    """Whether an unsubscribe link is live, without revealing the full address."""
    subscriber = await find_subscriber(db, type, token)
    if subscriber is None:
        return UnsubscribeValidation(valid=False)
    return UnsubscribeValidation(
        valid=True,
        already_unsubscribed=subscriber.unsubscribed,
        email=mask_email(subscriber.email),
    )
