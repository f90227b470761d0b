import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from confreview.models.review import Recommendation


class ReviewPayload(BaseModel):
    score: int
    recommendation: Recommendation
    comments: str
    confidential_comments: str | None = None


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    submission_id: uuid.UUID
    reviewer_id: uuid.UUID
    score: int
    recommendation: str
    comments: str
    confidential_comments: str | None = None
    review_number: int
    for_revision_count: int
    submitted_at: datetime


class AuthorReviewRead(BaseModel):
    """То, что видит автор: без оценки, рекомендации и конфиденциальной части."""

    review_number: int
    comments: str
    submitted_at: datetime


class EligibilityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    has_review: bool
    is_final_verdict: bool
    can_update: bool
    can_create: bool
    reason: str | None = None
    review: ReviewRead | None = None
