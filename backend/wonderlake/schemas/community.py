"""Pydantic schemas for community questions and FAQs."""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

QuestionCategory = Literal["general", "taxes", "property_rights", "services"]


class CommunityQuestionCreate(BaseModel):
    """Public question form submission."""
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    address: Optional[str] = Field(default=None, max_length=500)
    phone: Optional[str] = Field(default=None, max_length=20)
    question: str = Field(min_length=10, max_length=2000)
    category: QuestionCategory = "general"


class CommunityQuestionResponse(BaseModel):
    id: UUID
    name: str
    email: str
    address: Optional[str] = None
    phone: Optional[str] = None
    question: str
    category: str
    status: str
    answer: Optional[str] = None
    answered_at: Optional[datetime] = None
    unsubscribed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AnswerRequest(BaseModel):
    """Admin answer, optionally tidying the question text and category."""
    answer: str = Field(min_length=10)
    edited_question: Optional[str] = None
    edited_category: Optional[QuestionCategory] = None


class DynamicFaqCreate(BaseModel):
    question: str = Field(min_length=5)
    answer: str = Field(min_length=10)
    category: QuestionCategory = "general"


class DynamicFaqResponse(BaseModel):
    id: UUID
    question: str
    answer: str
    category: str
    source_question_id: Optional[UUID] = None
    view_count: int
    is_new: bool
    created_at: datetime

    class Config:
        from_attributes = True
