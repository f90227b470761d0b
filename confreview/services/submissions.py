from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from confreview.core.errors import Forbidden, InvalidArgument, NotFound, PreconditionFailed
from confreview.core.logging import get_logger
from confreview.core.timeutils import utcnow
from confreview.db.atomic import atomic
from confreview.models import Conference, Review, RoleName, Submission, SubmissionCoAuthor, SubmissionStatus, Track
from confreview.models.submission import TERMINAL_STATUSES
from confreview.services import capabilities, lifecycle

logger = get_logger(__name__)

MAX_TITLE_LENGTH = 300
MAX_ABSTRACT_LENGTH = 5000


def _required_text(value: Any, field: str, max_length: int | None = None) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise InvalidArgument(f"{field} is required", field=field)
    if max_length is not None and len(text) > max_length:
        raise InvalidArgument(f"{field} cannot exceed {max_length} characters", field=field)
    return text


def normalize_keywords(keywords: Iterable[str] | None) -> list[str]:
    """Упорядоченное множество: порядок первого вхождения, без дублей и пустых."""
    seen: set[str] = set()
    result: list[str] = []
    for kw in keywords or []:
        kw = (kw or "").strip()
        key = kw.lower()
        if kw and key not in seen:
            seen.add(key)
            result.append(kw)
    return result


def _build_co_authors(co_authors: Iterable[dict[str, Any]] | None, author_id: uuid.UUID) -> list[SubmissionCoAuthor]:
    rows: list[SubmissionCoAuthor] = []
    emails: set[str] = set()
    for position, item in enumerate(co_authors or []):
        name = _required_text(item.get("name"), "co_author.name", 255)
        email = _required_text(item.get("email"), "co_author.email", 320)
        if email.lower() in emails:
            raise InvalidArgument("Duplicate co-author email", field="co_authors", email=email)
        emails.add(email.lower())

        user_id = item.get("user_id")
        if user_id is not None and user_id == author_id:
            raise InvalidArgument("The primary author cannot be listed as a co-author", field="co_authors")
        rows.append(SubmissionCoAuthor(position=position, name=name, email=email, user_id=user_id))
    return rows


def create_submission(
    db: Session,
    author_id: uuid.UUID,
    conference_id: uuid.UUID,
    *,
    title: Any,
    abstract: Any,
    track_id: uuid.UUID,
    file_url: Any,
    keywords: Iterable[str] | None = None,
    co_authors: Iterable[dict[str, Any]] | None = None,
) -> Submission:
    title = _required_text(title, "title", MAX_TITLE_LENGTH)
    abstract = _required_text(abstract, "abstract", MAX_ABSTRACT_LENGTH)
    file_url = _required_text(file_url, "file_url")
    keywords = normalize_keywords(keywords)
    co_authors = [dict(c) for c in co_authors or []]

    def _create() -> Submission:
        capabilities.require_role(db, author_id, RoleName.AUTHOR)

        conference = db.get(Conference, conference_id)
        if conference is None:
            raise NotFound("Conference not found", conference_id=str(conference_id))
        if not conference.is_active:
            raise PreconditionFailed("Conference is not accepting submissions", conference_id=str(conference_id))

        track = db.scalars(
            select(Track).where(Track.id == track_id, Track.conference_id == conference_id)
        ).first()
        if track is None:
            raise NotFound("Invalid track for this conference", track_id=str(track_id))

        deadline = track.effective_deadline()
        if deadline is not None and utcnow() > deadline:
            raise PreconditionFailed(
                "Submission deadline has passed for this track",
                track_id=str(track_id),
                deadline=deadline.isoformat(),
            )

        now = utcnow()
        submission = Submission(
            conference_id=conference.id,
            track_id=track.id,
            author_id=author_id,
            title=title,
            abstract=abstract,
            keywords=keywords,
            file_url=file_url,
            status=SubmissionStatus.SUBMITTED.value,
            organizer_approved=False,
            revision_count=0,
            created_at=now,
            last_updated_at=now,
            co_authors=_build_co_authors(co_authors, author_id),
        )
        db.add(submission)
        db.flush()
        logger.info(
            "submission_created",
            submission_id=str(submission.id),
            conference_id=str(conference_id),
            author_id=str(author_id),
        )
        return submission

    return atomic(db, _create, action="create_submission")


def get_submission(db: Session, actor_id: uuid.UUID, submission_id: uuid.UUID) -> Submission:
    submission = lifecycle.load_submission(db, submission_id)
    if not capabilities.can_view_submission(db, submission, actor_id):
        raise Forbidden("You cannot view this submission", submission_id=str(submission_id))
    return submission


def list_author_submissions(
    db: Session,
    actor_id: uuid.UUID,
    track_id: uuid.UUID | None = None,
) -> list[Submission]:
    """Статьи, где пользователь основной автор или соавтор; новые сверху."""
    capabilities.get_user(db, actor_id)
    co_authored = select(SubmissionCoAuthor.submission_id).where(SubmissionCoAuthor.user_id == actor_id)
    stmt = select(Submission).where(
        or_(Submission.author_id == actor_id, Submission.id.in_(co_authored))
    )
    if track_id is not None:
        stmt = stmt.where(Submission.track_id == track_id)
    stmt = stmt.order_by(Submission.created_at.desc(), Submission.id)
    return list(db.scalars(stmt))


@dataclass(frozen=True)
class SubmissionOverview:
    submission: Submission
    reviews: list[Review]

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def final_verdict_count(self) -> int:
        return sum(1 for r in self.reviews if r.is_final_verdict)


def list_conference_submissions(
    db: Session,
    organizer_id: uuid.UUID,
    conference_id: uuid.UUID,
    *,
    pending_approval: bool = False,
) -> list[SubmissionOverview]:
    capabilities.require_organizer(db, organizer_id, conference_id)

    stmt = select(Submission).where(Submission.conference_id == conference_id)
    if pending_approval:
        stmt = stmt.where(
            Submission.organizer_approved.is_(False),
            Submission.status.not_in(sorted(TERMINAL_STATUSES)),
        )
    submissions = list(db.scalars(stmt.order_by(Submission.created_at.desc(), Submission.id)))

    reviews_by_submission: dict[uuid.UUID, list[Review]] = defaultdict(list)
    if submissions:
        review_stmt = (
            select(Review)
            .where(Review.submission_id.in_([s.id for s in submissions]))
            .order_by(Review.review_number)
        )
        for review in db.scalars(review_stmt):
            reviews_by_submission[review.submission_id].append(review)

    return [SubmissionOverview(s, reviews_by_submission[s.id]) for s in submissions]


def require_paper_access(db: Session, actor_id: uuid.UUID, object_key: str) -> Submission:
    """Файл статьи доступен тем же, кто может открыть саму статью."""
    capabilities.get_user(db, actor_id)
    stmt = (
        select(Submission)
        .where(Submission.file_url == object_key)
        .options(selectinload(Submission.co_authors))
        .execution_options(populate_existing=True)
    )
    candidates = list(db.scalars(stmt))
    if not candidates:
        raise NotFound("No submission refers to this file", object_key=object_key)
    for submission in candidates:
        if capabilities.can_view_submission(db, submission, actor_id):
            return submission
    raise Forbidden("You cannot download this file", object_key=object_key)
