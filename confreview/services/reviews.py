from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from confreview.core.errors import Forbidden, InvalidArgument, WorkflowError
from confreview.core.logging import get_logger
from confreview.core.timeutils import utcnow
from confreview.db.atomic import atomic
from confreview.models import Bid, Recommendation, Review, RoleName
from confreview.models.review import MAX_COMMENTS_LENGTH, MAX_SCORE, MIN_SCORE
from confreview.services import capabilities, lifecycle
from confreview.services.eligibility import ReviewEligibility, ensure_writable, resolve_eligibility

logger = get_logger(__name__)

RECOMMENDATIONS = tuple(r.value for r in Recommendation)


def validate_review_payload(
    score: Any,
    recommendation: Any,
    comments: Any,
    confidential_comments: Any = None,
) -> tuple[int, str, str, str | None]:
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidArgument(f"Score must be an integer between {MIN_SCORE} and {MAX_SCORE}", field="score")

    if isinstance(recommendation, Recommendation):
        recommendation = recommendation.value
    if recommendation not in RECOMMENDATIONS:
        raise InvalidArgument(
            "Invalid recommendation",
            field="recommendation",
            allowed=list(RECOMMENDATIONS),
        )

    comments = comments.strip() if isinstance(comments, str) else ""
    if not comments:
        raise InvalidArgument("Comments are required", field="comments")
    if len(comments) > MAX_COMMENTS_LENGTH:
        raise InvalidArgument(f"Comments cannot exceed {MAX_COMMENTS_LENGTH} characters", field="comments")

    if confidential_comments is not None:
        if not isinstance(confidential_comments, str):
            raise InvalidArgument("Confidential comments must be text", field="confidential_comments")
        confidential_comments = confidential_comments.strip() or None
        if confidential_comments and len(confidential_comments) > MAX_COMMENTS_LENGTH:
            raise InvalidArgument(
                f"Confidential comments cannot exceed {MAX_COMMENTS_LENGTH} characters",
                field="confidential_comments",
            )

    return score, recommendation, comments, confidential_comments


def _find_review(db: Session, reviewer_id: uuid.UUID, submission_id: uuid.UUID, *, for_update: bool = False) -> Review | None:
    stmt = select(Review).where(Review.reviewer_id == reviewer_id, Review.submission_id == submission_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    return db.scalars(stmt).first()


def _find_bid(db: Session, reviewer_id: uuid.UUID, submission_id: uuid.UUID) -> Bid | None:
    stmt = select(Bid).where(Bid.reviewer_id == reviewer_id, Bid.submission_id == submission_id)
    return db.scalars(stmt.execution_options(populate_existing=True)).first()


def _next_review_number(db: Session, submission_id: uuid.UUID) -> int:
    current = db.scalar(select(func.max(Review.review_number)).where(Review.submission_id == submission_id))
    return (current or 0) + 1


def get_review_eligibility(db: Session, reviewer_id: uuid.UUID, submission_id: uuid.UUID) -> ReviewEligibility:
    capabilities.get_user(db, reviewer_id)
    submission = lifecycle.load_submission(db, submission_id)
    review = _find_review(db, reviewer_id, submission_id)
    bid = _find_bid(db, reviewer_id, submission_id)
    return ReviewEligibility.from_resolution(resolve_eligibility(submission, review, bid))


def create_or_update_review(
    db: Session,
    reviewer_id: uuid.UUID,
    submission_id: uuid.UUID,
    *,
    score: Any,
    recommendation: Any,
    comments: Any,
    confidential_comments: Any = None,
) -> Review:
    score, recommendation, comments, confidential_comments = validate_review_payload(
        score, recommendation, comments, confidential_comments
    )

    def _write() -> Review:
        capabilities.require_role(db, reviewer_id, RoleName.REVIEWER)
        submission = lifecycle.load_submission(db, submission_id, for_update=True)
        capabilities.require_not_involved_author(submission, reviewer_id)

        # Решение принимается по последнему закоммиченному состоянию
        existing = _find_review(db, reviewer_id, submission_id, for_update=True)
        bid = _find_bid(db, reviewer_id, submission_id)
        try:
            review = ensure_writable(resolve_eligibility(submission, existing, bid))
        except WorkflowError as exc:
            logger.info(
                "review_write_rejected",
                submission_id=str(submission_id),
                reviewer_id=str(reviewer_id),
                code=exc.code,
            )
            raise

        now = utcnow()
        created = review is None
        if created:
            review = Review(
                submission_id=submission.id,
                reviewer_id=reviewer_id,
                review_number=_next_review_number(db, submission.id),
                created_at=now,
            )

        review.score = score
        review.recommendation = recommendation
        review.comments = comments
        review.confidential_comments = confidential_comments
        review.for_revision_count = submission.revision_count
        review.submitted_at = now
        if created:
            db.add(review)

        lifecycle.on_review_recorded(submission, recommendation)

        logger.info(
            "review_created" if created else "review_updated",
            submission_id=str(submission.id),
            reviewer_id=str(reviewer_id),
            review_number=review.review_number,
            recommendation=recommendation,
            for_revision_count=review.for_revision_count,
            submission_status=submission.status,
        )
        return review

    return atomic(db, _write, action="create_or_update_review")


def list_reviews_for_organizer(db: Session, organizer_id: uuid.UUID, submission_id: uuid.UUID) -> list[Review]:
    submission = lifecycle.load_submission(db, submission_id)
    capabilities.require_organizer(db, organizer_id, submission.conference_id)
    stmt = select(Review).where(Review.submission_id == submission_id).order_by(Review.review_number)
    return list(db.scalars(stmt))


def list_reviews_for_author(db: Session, actor_id: uuid.UUID, submission_id: uuid.UUID) -> list[dict[str, Any]]:
    """Автор и соавторы видят только номер отзыва, комментарии и дату."""
    submission = lifecycle.load_submission(db, submission_id)
    if submission.author_id != actor_id and not capabilities.is_co_author(submission, actor_id):
        raise Forbidden("Only authors of the submission can see its reviews", submission_id=str(submission_id))

    stmt = select(Review).where(Review.submission_id == submission_id).order_by(Review.review_number)
    return [
        {
            "review_number": r.review_number,
            "comments": r.comments,
            "submitted_at": r.submitted_at,
        }
        for r in db.scalars(stmt)
    ]


def list_reviewer_reviews(db: Session, reviewer_id: uuid.UUID) -> list[Review]:
    capabilities.require_role(db, reviewer_id, RoleName.REVIEWER)
    stmt = select(Review).where(Review.reviewer_id == reviewer_id).order_by(Review.submitted_at.desc())
    return list(db.scalars(stmt))
