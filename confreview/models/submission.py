import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from confreview.core.timeutils import utcnow
from confreview.db.base import Base

if TYPE_CHECKING:
    from confreview.models.submission_coauthor import SubmissionCoAuthor
    from confreview.models.track import Track


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    REVISION = "revision"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


TERMINAL_STATUSES = frozenset({SubmissionStatus.ACCEPTED.value, SubmissionStatus.REJECTED.value})


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    conference_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("conferences.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    track_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tracks.id", ondelete="RESTRICT"),
        nullable=False,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    abstract: Mapped[str] = mapped_column(Text, nullable=False)
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    file_url: Mapped[str] = mapped_column(String(1024), nullable=False)

    status: Mapped[str] = mapped_column(String(30), nullable=False, default=SubmissionStatus.SUBMITTED.value)

    organizer_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    revision_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    decided_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decision_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Счётчик оптимистичной блокировки, см. __mapper_args__
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    track: Mapped["Track"] = relationship()
    co_authors: Mapped[list["SubmissionCoAuthor"]] = relationship(
        order_by="SubmissionCoAuthor.position",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def decision(self) -> dict[str, Any] | None:
        if self.decided_at is None:
            return None
        return {
            "decided_by": self.decided_by,
            "decided_at": self.decided_at,
            "feedback": self.decision_feedback,
        }

    def co_author_user_ids(self) -> set[uuid.UUID]:
        return {c.user_id for c in self.co_authors if c.user_id is not None}
