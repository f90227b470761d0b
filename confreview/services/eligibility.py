"""
Может ли рецензент создать, посмотреть или обновить отзыв.

resolve_eligibility: чистая функция над (статья, отзыв, ставка); её
результат используют и API, и журнал отзывов перед записью.
Порядок проверок:

1. отзыва нет             -> NoReview (создать можно при принятой ставке,
                             одобренной и не закрытой статье)
2. ACCEPT / REJECT        -> FinalVerdict, только просмотр
3. revision, автор ещё не прислал правку  -> AwaitingRevision
4. revision, правка получена              -> Updatable (или Closed, если
                                             статья уже решена)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from confreview.core.errors import AlreadyFinalized, AwaitingAuthorRevision, NotEligible
from confreview.models import Bid, BidStatus, Review, Submission


@dataclass(frozen=True)
class NoReview:
    can_create: bool
    reason: str | None = None


@dataclass(frozen=True)
class FinalVerdict:
    review: Review


@dataclass(frozen=True)
class AwaitingRevision:
    review: Review


@dataclass(frozen=True)
class Updatable:
    review: Review


@dataclass(frozen=True)
class Closed:
    review: Review


Eligibility = Union[NoReview, FinalVerdict, AwaitingRevision, Updatable, Closed]


def resolve_eligibility(submission: Submission, review: Review | None, bid: Bid | None) -> Eligibility:
    if review is None:
        if bid is None or bid.status != BidStatus.ACCEPTED.value:
            return NoReview(can_create=False, reason="An accepted bid on this submission is required")
        if not submission.organizer_approved:
            return NoReview(can_create=False, reason="Submission is not approved for review")
        if submission.is_terminal:
            return NoReview(can_create=False, reason=f"Submission is already {submission.status}")
        return NoReview(can_create=True)

    if review.is_final_verdict:
        return FinalVerdict(review)

    if submission.revision_count <= review.for_revision_count:
        return AwaitingRevision(review)

    if submission.is_terminal:
        return Closed(review)
    return Updatable(review)


def ensure_writable(eligibility: Eligibility) -> Review | None:
    """
    Возвращает отзыв для обновления (None -> создать новый) или бросает
    ошибку, объясняющую почему писать нельзя.
    """
    if isinstance(eligibility, NoReview):
        if not eligibility.can_create:
            raise NotEligible(eligibility.reason or "Not eligible to review this submission")
        return None
    if isinstance(eligibility, Updatable):
        return eligibility.review
    if isinstance(eligibility, FinalVerdict):
        raise AlreadyFinalized(
            "Your review carries a final verdict and can no longer be changed",
            review_id=str(eligibility.review.id),
        )
    if isinstance(eligibility, AwaitingRevision):
        raise AwaitingAuthorRevision(
            "The author has not submitted a revision yet",
            review_id=str(eligibility.review.id),
        )
    raise NotEligible(
        "The submission has already been decided",
        review_id=str(eligibility.review.id),
    )


@dataclass(frozen=True)
class ReviewEligibility:
    has_review: bool
    is_final_verdict: bool
    can_update: bool
    can_create: bool
    review: Review | None = None
    reason: str | None = None

    @classmethod
    def from_resolution(cls, eligibility: Eligibility) -> "ReviewEligibility":
        if isinstance(eligibility, NoReview):
            return cls(
                has_review=False,
                is_final_verdict=False,
                can_update=False,
                can_create=eligibility.can_create,
                reason=eligibility.reason,
            )
        review = eligibility.review
        return cls(
            has_review=True,
            is_final_verdict=isinstance(eligibility, FinalVerdict),
            can_update=isinstance(eligibility, Updatable),
            can_create=False,
            review=review,
        )
