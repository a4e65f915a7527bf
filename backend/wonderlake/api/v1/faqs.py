"""Public community questions and FAQ endpoints."""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.database import get_db
from wonderlake.models.community import CommunityQuestion, DynamicFaq
from wonderlake.schemas.community import CommunityQuestionCreate, DynamicFaqResponse
from wonderlake.schemas.crm import SubmissionResponse
from wonderlake.services.faq_search import search_faqs
from wonderlake.services.rate_limit import enforce_submission_rate_limit
from wonderlake.services.subscriptions import generate_unsubscribe_token

router = APIRouter(tags=["Community"])
logger = logging.getLogger("wonderlake.api.faqs")


@router.post(
    "/questions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_submission_rate_limit)],
)
async def submit_question(
    data: CommunityQuestionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Queue a visitor question for an admin to answer."""
    question = CommunityQuestion(
        name=data.name,
        email=data.email,
        address=data.address,
        phone=data.phone,
        question=data.question,
        category=data.category,
        status="pending",
        unsubscribe_token=generate_unsubscribe_token(),
    )
    db.add(question)
    await db.flush()
    logger.info(f"Received community question {question.id} ({data.category})")

    return SubmissionResponse(
        message="Thank you! Your question has been submitted and will be answered soon.",
        id=question.id,
    )


@router.get("/dynamic-faqs", response_model=List[DynamicFaqResponse])
async def list_faqs(
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(DynamicFaq).order_by(DynamicFaq.created_at.desc())
    if category:
        query = query.where(DynamicFaq.category == category)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/dynamic-faqs/search", response_model=List[DynamicFaqResponse])
async def search_dynamic_faqs(
    q: str = Query(..., min_length=1, max_length=500),
    limit: int = Query(5, ge=1, le=20),
    db: AsyncSession = Depends(get_db),
):
    """Rank published FAQs by how well they match a visitor's question."""
    result = await db.execute(select(DynamicFaq))
    return search_faqs(q, result.scalars().all(), limit=limit)


@router.post("/dynamic-faqs/{faq_id}/view", response_model=DynamicFaqResponse)
async def record_faq_view(
    faq_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    faq = await db.get(DynamicFaq, faq_id)
    if not faq:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="FAQ not found",
        )
    faq.view_count = (faq.view_count or 0) + 1
    await db.flush()
    return faq
