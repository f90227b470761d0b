"""Unit tests for the review eligibility resolver (no database needed)."""

import uuid

import pytest

from confreview.core.errors import AlreadyFinalized, AwaitingAuthorRevision, NotEligible
from confreview.models import Bid, BidStatus, Recommendation, Review, Submission, SubmissionStatus
from confreview.services.eligibility import (
    AwaitingRevision,
    Closed,
    FinalVerdict,
    NoReview,
    ReviewEligibility,
    Updatable,
    ensure_writable,
    resolve_eligibility,
)


def make_submission(status=SubmissionStatus.UNDER_REVIEW, approved=True, revision_count=0):
    return Submission(
        id=uuid.uuid4(),
        status=status.value,
        organizer_approved=approved,
        revision_count=revision_count,
    )


def make_review(recommendation, for_revision_count=0):
    return Review(id=uuid.uuid4(), recommendation=recommendation.value, for_revision_count=for_revision_count)


def make_bid(status=BidStatus.ACCEPTED):
    return Bid(id=uuid.uuid4(), status=status.value)


class TestNoReview:
    """Case 1: the reviewer has not written a review yet."""

    def test_accepted_bid_on_approved_submission_can_create(self):
        result = resolve_eligibility(make_submission(), None, make_bid())
        assert result == NoReview(can_create=True)
        assert ensure_writable(result) is None

    @pytest.mark.parametrize("bid", [None, make_bid(BidStatus.PENDING), make_bid(BidStatus.REJECTED)])
    def test_without_accepted_bid_is_not_eligible(self, bid):
        result = resolve_eligibility(make_submission(), None, bid)
        assert isinstance(result, NoReview)
        assert result.can_create is False
        with pytest.raises(NotEligible):
            ensure_writable(result)

    def test_unapproved_submission_is_not_eligible(self):
        result = resolve_eligibility(make_submission(SubmissionStatus.SUBMITTED, approved=False), None, make_bid())
        assert result.can_create is False
        assert "approved" in result.reason

    @pytest.mark.parametrize("status", [SubmissionStatus.ACCEPTED, SubmissionStatus.REJECTED])
    def test_terminal_submission_is_not_eligible(self, status):
        result = resolve_eligibility(make_submission(status), None, make_bid())
        assert result.can_create is False
        with pytest.raises(NotEligible):
            ensure_writable(result)

    def test_revision_status_still_allows_a_first_review(self):
        result = resolve_eligibility(make_submission(SubmissionStatus.REVISION), None, make_bid())
        assert result.can_create is True


class TestExistingReview:
    """Cases 2-4: a review already exists for the pair."""

    @pytest.mark.parametrize("recommendation", [Recommendation.ACCEPT, Recommendation.REJECT])
    @pytest.mark.parametrize(
        "status",
        [SubmissionStatus.UNDER_REVIEW, SubmissionStatus.REVISION, SubmissionStatus.ACCEPTED],
    )
    def test_final_verdict_is_view_only_regardless_of_status(self, recommendation, status):
        review = make_review(recommendation)
        result = resolve_eligibility(make_submission(status, revision_count=3), review, make_bid())
        assert result == FinalVerdict(review)
        with pytest.raises(AlreadyFinalized):
            ensure_writable(result)

    @pytest.mark.parametrize("recommendation", [Recommendation.MINOR_REVISION, Recommendation.MAJOR_REVISION])
    def test_revision_verdict_waits_for_author(self, recommendation):
        review = make_review(recommendation, for_revision_count=1)
        result = resolve_eligibility(make_submission(SubmissionStatus.REVISION, revision_count=1), review, make_bid())
        assert result == AwaitingRevision(review)
        with pytest.raises(AwaitingAuthorRevision):
            ensure_writable(result)

    def test_revision_verdict_becomes_updatable_after_resubmission(self):
        review = make_review(Recommendation.MAJOR_REVISION, for_revision_count=0)
        result = resolve_eligibility(make_submission(revision_count=1), review, make_bid())
        assert result == Updatable(review)
        assert ensure_writable(result) is review

    def test_updatable_ignores_bid_state(self):
        review = make_review(Recommendation.MINOR_REVISION, for_revision_count=0)
        result = resolve_eligibility(make_submission(revision_count=1), review, None)
        assert isinstance(result, Updatable)

    def test_decided_submission_closes_pending_update(self):
        review = make_review(Recommendation.MINOR_REVISION, for_revision_count=0)
        result = resolve_eligibility(make_submission(SubmissionStatus.ACCEPTED, revision_count=1), review, make_bid())
        assert result == Closed(review)
        with pytest.raises(NotEligible):
            ensure_writable(result)


class TestReviewEligibilitySummary:
    """Flag view used by the API."""

    def test_no_review_flags(self):
        summary = ReviewEligibility.from_resolution(NoReview(can_create=True))
        assert (summary.has_review, summary.is_final_verdict, summary.can_update, summary.can_create) == (
            False,
            False,
            False,
            True,
        )
        assert summary.review is None

    def test_final_verdict_flags(self):
        review = make_review(Recommendation.ACCEPT)
        summary = ReviewEligibility.from_resolution(FinalVerdict(review))
        assert summary.has_review is True
        assert summary.is_final_verdict is True
        assert summary.can_update is False
        assert summary.review is review

    def test_awaiting_revision_flags(self):
        summary = ReviewEligibility.from_resolution(AwaitingRevision(make_review(Recommendation.MINOR_REVISION)))
        assert (summary.has_review, summary.is_final_verdict, summary.can_update) == (True, False, False)

    def test_updatable_flags(self):
        summary = ReviewEligibility.from_resolution(Updatable(make_review(Recommendation.MAJOR_REVISION)))
        assert (summary.has_review, summary.is_final_verdict, summary.can_update) == (True, False, True)
