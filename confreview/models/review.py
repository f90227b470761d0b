import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, SmallInteger, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from confreview.core.timeutils import utcnow
from confreview.db.base import Base


class Recommendation(str, Enum):
    ACCEPT = "ACCEPT"
    MINOR_REVISION = "MINOR_REVISION"
    MAJOR_REVISION = "MAJOR_REVISION"
    REJECT = "REJECT"


FINAL_VERDICTS = frozenset({Recommendation.ACCEPT.value, Recommendation.REJECT.value})
REVISION_VERDICTS = frozenset({Recommendation.MINOR_REVISION.value, Recommendation.MAJOR_REVISION.value})

MIN_SCORE = 1
MAX_SCORE = 10
MAX_COMMENTS_LENGTH = 5000


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("reviewer_id", "submission_id", name="uq_reviews_reviewer_submission"),
        UniqueConstraint("submission_id", "review_number", name="uq_reviews_submission_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    submission_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    score: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    recommendation: Mapped[str] = mapped_column(String(20), nullable=False)
    comments: Mapped[str] = mapped_column(Text, nullable=False)
    confidential_comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Порядковый номер отзыва в рамках статьи, не меняется при обновлении
    review_number: Mapped[int] = mapped_column(Integer, nullable=False)
    # revision_count статьи на момент написания
    for_revision_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_final_verdict(self) -> bool:
        return self.recommendation in FINAL_VERDICTS

    @property
    def is_revision_verdict(self) -> bool:
        return self.recommendation in REVISION_VERDICTS
