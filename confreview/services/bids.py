from __future__ import annotations

import uuid
from typing import Any, Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from confreview.core.errors import Conflict, InvalidArgument, NotEligible, NotFound
from confreview.core.logging import get_logger
from confreview.core.timeutils import utcnow
from confreview.db.atomic import atomic
from confreview.models import Bid, BidStatus, Conference, RoleName, Submission, SubmissionCoAuthor, Track
from confreview.models.bid import MAX_CONFIDENCE, MIN_CONFIDENCE
from confreview.models.submission import TERMINAL_STATUSES
from confreview.services import capabilities, lifecycle

logger = get_logger(__name__)


def validate_confidence(confidence: Any) -> int:
    if isinstance(confidence, bool) or not isinstance(confidence, int):
        raise InvalidArgument("Confidence must be an integer", field="confidence")
    if not MIN_CONFIDENCE <= confidence <= MAX_CONFIDENCE:
        raise InvalidArgument(
            f"Confidence must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}",
            field="confidence",
            value=confidence,
        )
    return confidence


def _existing_bid(db: Session, reviewer_id: uuid.UUID, submission_id: uuid.UUID) -> Bid | None:
    stmt = select(Bid).where(Bid.reviewer_id == reviewer_id, Bid.submission_id == submission_id)
    return db.scalars(stmt).first()


def place_bid(db: Session, reviewer_id: uuid.UUID, submission_id: uuid.UUID, confidence: Any) -> Bid:
    confidence = validate_confidence(confidence)

    def _place() -> Bid:
        capabilities.require_role(db, reviewer_id, RoleName.REVIEWER)
        submission = lifecycle.load_submission(db, submission_id)
        capabilities.require_not_involved_author(submission, reviewer_id)

        if _existing_bid(db, reviewer_id, submission_id) is not None:
            raise Conflict("You have already bid on this submission", submission_id=str(submission_id))

        if not submission.organizer_approved:
            raise NotEligible("This submission is not yet approved for review", submission_id=str(submission_id))
        if submission.is_terminal:
            raise NotEligible(
                f"This submission is already {submission.status}",
                submission_id=str(submission_id),
            )

        bid = Bid(
            conference_id=submission.conference_id,
            submission_id=submission.id,
            reviewer_id=reviewer_id,
            confidence=confidence,
            status=BidStatus.PENDING.value,
            created_at=utcnow(),
        )
        db.add(bid)
        # Уникальный индекс (reviewer_id, submission_id) ловит параллельную ставку
        db.flush()
        logger.info(
            "bid_placed",
            bid_id=str(bid.id),
            submission_id=str(submission_id),
            reviewer_id=str(reviewer_id),
            confidence=confidence,
        )
        return bid

    return atomic(db, _place, action="place_bid")


def set_bid_status(db: Session, organizer_id: uuid.UUID, bid_id: uuid.UUID, status: str) -> Bid:
    allowed = {s.value for s in BidStatus}
    if status not in allowed:
        raise InvalidArgument("Invalid bid status", field="status", allowed=sorted(allowed))

    def _set() -> Bid:
        bid = db.get(Bid, bid_id, populate_existing=True)
        if bid is None:
            raise NotFound("Bid not found", bid_id=str(bid_id))
        capabilities.require_organizer(db, organizer_id, bid.conference_id)

        previous = bid.status
        bid.status = status
        logger.info(
            "bid_status_changed",
            bid_id=str(bid.id),
            organizer_id=str(organizer_id),
            from_status=previous,
            to_status=status,
        )
        return bid

    return atomic(db, _set, action="set_bid_status")


def list_reviewer_bids(db: Session, reviewer_id: uuid.UUID) -> list[Bid]:
    capabilities.require_role(db, reviewer_id, RoleName.REVIEWER)
    stmt = select(Bid).where(Bid.reviewer_id == reviewer_id).order_by(Bid.created_at.desc(), Bid.id)
    return list(db.scalars(stmt))


def track_matches_expertise(track_name: str, expertise_domains: Iterable[str]) -> bool:
    """Подстрока без учёта регистра в любую сторону. Пустая экспертиза -> всё подходит."""
    domains = [d.strip().lower() for d in expertise_domains if d and d.strip()]
    if not domains:
        return True
    name = (track_name or "").strip().lower()
    return any(domain in name or (name and name in domain) for domain in domains)


class EligibleSubmissions:
    """
    Ленивая и перезапускаемая выборка статей для ставок: каждый проход
    заново читает одобренные, ещё не решённые статьи конференции.
    Свои статьи (автор или соавтор) рецензенту не показываются.
    """

    def __init__(
        self,
        db: Session,
        reviewer_id: uuid.UUID,
        conference_id: uuid.UUID,
        expertise_domains: Iterable[str],
    ) -> None:
        self._db = db
        self.reviewer_id = reviewer_id
        self.conference_id = conference_id
        self.expertise_domains = tuple(expertise_domains)

    def _statement(self):
        co_authored = select(SubmissionCoAuthor.submission_id).where(
            SubmissionCoAuthor.user_id == self.reviewer_id
        )
        return (
            select(Submission, Track.name)
            .join(Track, Track.id == Submission.track_id)
            .where(
                Submission.conference_id == self.conference_id,
                Submission.organizer_approved.is_(True),
                Submission.status.not_in(sorted(TERMINAL_STATUSES)),
                Submission.author_id != self.reviewer_id,
                Submission.id.not_in(co_authored),
            )
            .order_by(Submission.created_at, Submission.id)
        )

    def __iter__(self) -> Iterator[Submission]:
        for submission, track_name in self._db.execute(self._statement()):
            if track_matches_expertise(track_name, self.expertise_domains):
                yield submission


def list_eligible_submissions(
    db: Session,
    reviewer_id: uuid.UUID,
    conference_id: uuid.UUID,
    expertise_domains: Iterable[str] | None = None,
) -> EligibleSubmissions:
    capabilities.require_role(db, reviewer_id, RoleName.REVIEWER)
    if db.get(Conference, conference_id) is None:
        raise NotFound("Conference not found", conference_id=str(conference_id))
    if expertise_domains is None:
        expertise_domains = capabilities.get_user(db, reviewer_id).expertise_domains or []
    return EligibleSubmissions(db, reviewer_id, conference_id, expertise_domains)
