import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from confreview.schemas.review import ReviewRead


class CoAuthorIn(BaseModel):
    name: str
    email: str
    user_id: uuid.UUID | None = None


class CoAuthorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    position: int
    name: str
    email: str
    user_id: uuid.UUID | None = None


class SubmissionCreate(BaseModel):
    title: str
    abstract: str
    track_id: uuid.UUID
    file_url: str
    keywords: list[str] = Field(default_factory=list)
    co_authors: list[CoAuthorIn] = Field(default_factory=list)


class RevisionSubmit(BaseModel):
    file_url: str
    abstract: str | None = None


class DecisionCreate(BaseModel):
    decision: Literal["accepted", "rejected"]
    feedback: str | None = None


class DecisionRead(BaseModel):
    decided_by: uuid.UUID | None = None
    decided_at: datetime
    feedback: str | None = None


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    conference_id: uuid.UUID
    track_id: uuid.UUID
    author_id: uuid.UUID
    title: str
    abstract: str
    keywords: list[str]
    file_url: str
    status: str
    organizer_approved: bool
    approved_at: datetime | None = None
    revision_count: int
    decision: DecisionRead | None = None
    co_authors: list[CoAuthorRead] = Field(default_factory=list)
    created_at: datetime
    last_updated_at: datetime


class SubmissionOverviewRead(BaseModel):
    """Статья конференции с отзывами и прогрессом рецензирования."""

    model_config = ConfigDict(from_attributes=True)

    submission: SubmissionRead
    reviews: list[ReviewRead]
    review_count: int
    final_verdict_count: int
