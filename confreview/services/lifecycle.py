"""
Жизненный цикл статьи: единственное место, где меняется Submission.status.

    submitted ──approve──▶ submitted (organizer_approved=True)
    submitted ──first review──▶ under_review
    under_review ──revision verdict──▶ revision
    revision ──author resubmits──▶ under_review (revision_count += 1)
    under_review ──decision──▶ accepted | rejected (терминальные)

Любой переход вне таблицы -> PreconditionFailed.
"""
from __future__ import annotations

import uuid
from enum import Enum

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session, selectinload

from confreview.core.errors import InvalidArgument, NotFound, PreconditionFailed
from confreview.core.logging import get_logger
from confreview.core.timeutils import utcnow
from confreview.db.atomic import atomic
from confreview.models import Review, Submission, SubmissionStatus
from confreview.models.review import FINAL_VERDICTS, REVISION_VERDICTS
from confreview.services import capabilities

logger = get_logger(__name__)


class LifecycleEvent(str, Enum):
    FIRST_REVIEW = "first_review"
    REVISION_VERDICT = "revision_verdict"
    RESUBMIT = "resubmit"
    ACCEPT = "accept"
    REJECT = "reject"


_S = SubmissionStatus
_E = LifecycleEvent

TRANSITIONS: dict[tuple[str, str], str] = {
    (_S.SUBMITTED.value, _E.FIRST_REVIEW.value): _S.UNDER_REVIEW.value,
    (_S.UNDER_REVIEW.value, _E.FIRST_REVIEW.value): _S.UNDER_REVIEW.value,
    (_S.UNDER_REVIEW.value, _E.REVISION_VERDICT.value): _S.REVISION.value,
    (_S.REVISION.value, _E.RESUBMIT.value): _S.UNDER_REVIEW.value,
    (_S.UNDER_REVIEW.value, _E.ACCEPT.value): _S.ACCEPTED.value,
    (_S.UNDER_REVIEW.value, _E.REJECT.value): _S.REJECTED.value,
}

DECISION_EVENTS: dict[str, LifecycleEvent] = {
    _S.ACCEPTED.value: _E.ACCEPT,
    _S.REJECTED.value: _E.REJECT,
}


def next_status(status: str, event: LifecycleEvent) -> str | None:
    return TRANSITIONS.get((status, event.value))


def transition(submission: Submission, event: LifecycleEvent) -> str:
    current = submission.status
    target = next_status(current, event)
    if target is None:
        logger.info(
            "transition_rejected",
            submission_id=str(submission.id),
            from_status=current,
            lifecycle_event=event.value,
        )
        raise PreconditionFailed(
            f"Cannot apply '{event.value}' to a submission in status '{current}'",
            submission_id=str(submission.id),
            status=current,
            event=event.value,
        )

    if event is LifecycleEvent.FIRST_REVIEW and not submission.organizer_approved:
        raise PreconditionFailed(
            "Submission is not approved for review",
            submission_id=str(submission.id),
        )

    submission.status = target
    submission.last_updated_at = utcnow()
    if target != current:
        logger.info(
            "submission_transition",
            submission_id=str(submission.id),
            from_status=current,
            to_status=target,
            lifecycle_event=event.value,
        )
    return target


def load_submission(db: Session, submission_id: uuid.UUID, *, for_update: bool = False) -> Submission:
    """
    Читает статью вместе с соавторами всегда из базы, а не из identity map:
    проверки прав не должны видеть устаревший список соавторов.
    for_update=True дополнительно берёт строку под блокировку.
    """
    stmt = (
        select(Submission)
        .where(Submission.id == submission_id)
        .options(selectinload(Submission.co_authors))
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update()
    submission = db.scalars(stmt).first()
    if submission is None:
        raise NotFound("Submission not found", submission_id=str(submission_id))
    return submission


def has_final_verdict(db: Session, submission_id: uuid.UUID) -> bool:
    stmt = select(
        exists().where(
            Review.submission_id == submission_id,
            Review.recommendation.in_(sorted(FINAL_VERDICTS)),
        )
    )
    return bool(db.scalar(stmt))


def on_review_recorded(submission: Submission, recommendation: str) -> None:
    """Вызывается журналом отзывов внутри той же транзакции."""
    if submission.status == SubmissionStatus.SUBMITTED.value:
        transition(submission, LifecycleEvent.FIRST_REVIEW)

    if recommendation in REVISION_VERDICTS and submission.status == SubmissionStatus.UNDER_REVIEW.value:
        transition(submission, LifecycleEvent.REVISION_VERDICT)

    # Любая запись отзыва обновляет строку статьи -> проверка version_id_col
    submission.last_updated_at = utcnow()


def approve_submission(db: Session, submission_id: uuid.UUID, acting_organizer_id: uuid.UUID) -> Submission:
    def _approve() -> Submission:
        submission = load_submission(db, submission_id, for_update=True)
        capabilities.require_organizer(db, acting_organizer_id, submission.conference_id)

        if submission.is_terminal:
            raise PreconditionFailed(
                "A decided submission cannot be approved for review",
                submission_id=str(submission.id),
                status=submission.status,
            )
        if submission.organizer_approved:
            logger.info("submission_already_approved", submission_id=str(submission.id))
            return submission

        now = utcnow()
        submission.organizer_approved = True
        submission.approved_at = now
        submission.last_updated_at = now
        logger.info(
            "submission_approved",
            submission_id=str(submission.id),
            organizer_id=str(acting_organizer_id),
        )
        return submission

    return atomic(db, _approve, action="approve_submission")


def record_decision(
    db: Session,
    organizer_id: uuid.UUID,
    submission_id: uuid.UUID,
    decision: str,
    feedback: str | None = None,
) -> Submission:
    event = DECISION_EVENTS.get(decision)
    if event is None:
        raise InvalidArgument("Decision must be 'accepted' or 'rejected'", decision=decision)

    def _decide() -> Submission:
        submission = load_submission(db, submission_id, for_update=True)
        capabilities.require_organizer(db, organizer_id, submission.conference_id)

        if submission.status != SubmissionStatus.UNDER_REVIEW.value:
            raise PreconditionFailed(
                "A decision can only be recorded while the submission is under review",
                submission_id=str(submission.id),
                status=submission.status,
            )
        if not has_final_verdict(db, submission.id):
            raise PreconditionFailed(
                "At least one review with a final verdict (ACCEPT or REJECT) is required",
                submission_id=str(submission.id),
            )

        transition(submission, event)
        submission.decided_by = organizer_id
        submission.decided_at = utcnow()
        submission.decision_feedback = (feedback or "").strip() or None
        logger.info(
            "decision_recorded",
            submission_id=str(submission.id),
            organizer_id=str(organizer_id),
            decision=decision,
        )
        return submission

    return atomic(db, _decide, action="record_decision")


def submit_revision(
    db: Session,
    author_id: uuid.UUID,
    submission_id: uuid.UUID,
    *,
    file_url: str,
    abstract: str | None = None,
) -> Submission:
    file_url = (file_url or "").strip()
    if not file_url:
        raise InvalidArgument("fileUrl is required", field="file_url")
    if abstract is not None:
        abstract = abstract.strip()
        if not abstract:
            raise InvalidArgument("Abstract cannot be blank", field="abstract")

    def _resubmit() -> Submission:
        submission = load_submission(db, submission_id, for_update=True)
        capabilities.require_primary_author(submission, author_id)

        if submission.status != SubmissionStatus.REVISION.value:
            raise PreconditionFailed(
                'Revision can only be submitted when status is "revision"',
                submission_id=str(submission.id),
                status=submission.status,
            )

        submission.file_url = file_url
        if abstract is not None:
            submission.abstract = abstract
        submission.revision_count += 1
        transition(submission, LifecycleEvent.RESUBMIT)

        reopened = db.scalar(
            select(func.count())
            .select_from(Review)
            .where(
                Review.submission_id == submission.id,
                Review.recommendation.in_(sorted(REVISION_VERDICTS)),
                Review.for_revision_count < submission.revision_count,
            )
        )
        logger.info(
            "revision_submitted",
            submission_id=str(submission.id),
            revision_count=submission.revision_count,
            reopened_reviews=reopened,
        )
        return submission

    return atomic(db, _resubmit, action="submit_revision")
