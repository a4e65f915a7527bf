"""Admin dashboard API endpoints."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.auth.jwt import get_current_active_admin, get_current_user
from wonderlake.database import get_db
from wonderlake.models.address import SearchedAddress
from wonderlake.models.community import CommunityQuestion, DynamicFaq
from wonderlake.models.crm import InterestedParty
from wonderlake.models.user import User
from wonderlake.schemas.address import SearchedAddressResponse, SearchedAddressSummary
from wonderlake.schemas.community import (
    AnswerRequest,
    CommunityQuestionResponse,
    DynamicFaqCreate,
    DynamicFaqResponse,
)
from wonderlake.schemas.crm import InterestedPartyResponse
from wonderlake.schemas.user import AdminCheckResponse
from wonderlake.utils.audit import log_audit_event

router = APIRouter(prefix="/admin", tags=["Admin"])


async def _get_question_or_404(question_id: UUID, db: AsyncSession) -> CommunityQuestion:
    question = await db.get(CommunityQuestion, question_id)
    if not question:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found",
        )
    return question


async def _get_faq_or_404(faq_id: UUID, db: AsyncSession) -> DynamicFaq:
    faq = await db.get(DynamicFaq, faq_id)
    if not faq:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="FAQ not found",
        )
    return faq


def _coordinate(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(current_user: User = Depends(get_current_user)):
    """Lets the dashboard decide whether to show admin pages."""
    return AdminCheckResponse(is_admin=current_user.is_admin)


# --- Interested parties ---
@router.get("/interested", response_model=List[InterestedPartyResponse])
async def list_interested_parties(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    result = await db.execute(
        select(InterestedParty).order_by(InterestedParty.created_at.desc())
    )
    return result.scalars().all()


# --- Searched addresses ---
@router.get("/searched-addresses", response_model=List[SearchedAddressResponse])
async def list_searched_addresses(
    result: Optional[str] = Query(None, description="Filter by result tag"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Recorded lookups, newest first."""
    query = select(SearchedAddress).order_by(SearchedAddress.created_at.desc())
    if result:
        query = query.where(SearchedAddress.result == result)
    rows = await db.execute(query.offset(skip).limit(limit))
    return rows.scalars().all()


@router.get("/searched-addresses/map")
async def searched_addresses_map(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """
    Recorded lookups with usable coordinates as a GeoJSON FeatureCollection.

    Rows whose coordinates are missing or not numeric are left out.
    """
    rows = await db.execute(
        select(SearchedAddress)
        .where(SearchedAddress.latitude.is_not(None), SearchedAddress.longitude.is_not(None))
        .order_by(SearchedAddress.created_at.desc())
    )

    features = []
    for row in rows.scalars():
        lat, lon = _coordinate(row.latitude), _coordinate(row.longitude)
        if lat is None or lon is None:
            continue
        features.append({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [lon, lat]},
            "properties": {
                "id": str(row.id),
                "address": row.address,
                "result": row.result,
                "municipality_name": row.municipality_name,
                "created_at": row.created_at.isoformat(),
            },
        })

    return {"type": "FeatureCollection", "features": features}


@router.get("/searched-addresses/summary", response_model=SearchedAddressSummary)
async def searched_addresses_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    rows = await db.execute(
        select(SearchedAddress.result, func.count(SearchedAddress.id))
        .group_by(SearchedAddress.result)
    )
    by_result = {tag: count for tag, count in rows.all()}
    return SearchedAddressSummary(total=sum(by_result.values()), by_result=by_result)


# --- Community questions ---
@router.get("/questions", response_model=List[CommunityQuestionResponse])
async def list_questions(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    query = select(CommunityQuestion).order_by(CommunityQuestion.created_at.desc())
    if status_filter:
        query = query.where(CommunityQuestion.status == status_filter)
    result = await db.execute(query)
    return result.scalars().all()


@router.patch("/questions/{question_id}/answer", response_model=CommunityQuestionResponse)
async def answer_question(
    question_id: UUID,
    data: AnswerRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Answer a question, optionally tidying its wording and category."""
    question = await _get_question_or_404(question_id, db)

    question.answer = data.answer
    if data.edited_question:
        question.question = data.edited_question
    if data.edited_category:
        question.category = data.edited_category
    # A published question keeps its status; the FAQ copy is not rewritten.
    if question.status != "published":
        question.status = "answered"
    question.answered_at = datetime.utcnow()
    await db.flush()

    log_audit_event(
        "community_question_answered",
        actor=current_user,
        details={"question_id": question.id},
    )
    return question


@router.post(
    "/questions/{question_id}/publish",
    response_model=DynamicFaqResponse,
    status_code=status.HTTP_201_CREATED,
)
async def publish_question(
    question_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Copy an answered question into the public FAQ list."""
    question = await _get_question_or_404(question_id, db)

    if question.status != "answered" or not question.answer:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Question must be answered before it can be published",
        )

    faq = DynamicFaq(
        question=question.question,
        answer=question.answer,
        category=question.category,
        source_question_id=question.id,
        view_count=0,
        is_new=True,
    )
    db.add(faq)
    question.status = "published"
    await db.flush()

    log_audit_event(
        "community_question_published",
        actor=current_user,
        details={"question_id": question.id, "faq_id": faq.id},
    )
    return faq


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Delete a question. Published FAQs made from it stay up."""
    question = await _get_question_or_404(question_id, db)

    await db.execute(
        update(DynamicFaq)
        .where(DynamicFaq.source_question_id == question.id)
        .values(source_question_id=None)
    )
    await db.delete(question)
    await db.flush()

    log_audit_event(
        "community_question_deleted",
        actor=current_user,
        details={"question_id": question_id},
    )


# --- FAQs ---
@router.post("/faqs", response_model=DynamicFaqResponse, status_code=status.HTTP_201_CREATED)
async def create_faq(
    data: DynamicFaqCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    faq = DynamicFaq(
        question=data.question,
        answer=data.answer,
        category=data.category,
        view_count=0,
        is_new=True,
    )
    db.add(faq)
    await db.flush()

    log_audit_event("faq_created", actor=current_user, details={"faq_id": faq.id})
    return faq


@router.patch("/faqs/{faq_id}/not-new", response_model=DynamicFaqResponse)
async def mark_faq_not_new(
    faq_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    faq = await _get_faq_or_404(faq_id, db)
    faq.is_new = False
    await db.flush()
    return faq


@router.delete("/faqs/{faq_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_faq(
    faq_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    faq = await _get_faq_or_404(faq_id, db)
    await db.delete(faq)
    await db.flush()

    log_audit_event("faq_deleted", actor=current_user, details={"faq_id": faq_id})
