"""End-to-end review cycle across the bid ledger, review ledger and lifecycle."""

import pytest

from confreview.core.errors import AlreadyFinalized, NotEligible, PreconditionFailed
from confreview.models import Review, RoleName
from confreview.services import bids, lifecycle, reviews


def review(db, reviewer, submission, recommendation, score=7):
    return reviews.create_or_update_review(
        db,
        reviewer.id,
        submission.id,
        score=score,
        recommendation=recommendation,
        comments=f"{recommendation} comments",
    )


class TestFullCycle:
    def test_revision_round_trip_to_acceptance(self, db, submission, organizer, reviewer, author):
        lifecycle.approve_submission(db, submission.id, organizer.id)

        bid = bids.place_bid(db, reviewer.id, submission.id, 7)
        assert bid.status == "pending"
        bids.set_bid_status(db, organizer.id, bid.id, "accepted")

        first = review(db, reviewer, submission, "MAJOR_REVISION")
        db.refresh(submission)
        assert submission.status == "revision"
        assert first.for_revision_count == 0

        waiting = reviews.get_review_eligibility(db, reviewer.id, submission.id)
        assert waiting.has_review is True
        assert waiting.is_final_verdict is False
        assert waiting.can_update is False

        lifecycle.submit_revision(db, author.id, submission.id, file_url="papers/v2.pdf")
        db.refresh(submission)
        assert submission.revision_count == 1
        assert submission.status == "under_review"

        reopened = reviews.get_review_eligibility(db, reviewer.id, submission.id)
        assert reopened.has_review is True
        assert reopened.can_update is True

        second = review(db, reviewer, submission, "ACCEPT", score=9)
        assert second.id == first.id
        assert second.for_revision_count == 1
        assert second.recommendation == "ACCEPT"

        decided = lifecycle.record_decision(db, organizer.id, submission.id, "accepted", "Congratulations")
        assert decided.status == "accepted"
        assert decided.decided_at is not None
        assert decided.decision["decided_at"] is not None
        assert decided.decision["feedback"] == "Congratulations"

        with pytest.raises(AlreadyFinalized):
            review(db, reviewer, submission, "REJECT")

    def test_new_reviewer_cannot_join_decided_submission(self, db, factory, submission, organizer, reviewer):
        late = factory.user(RoleName.REVIEWER)
        lifecycle.approve_submission(db, submission.id, organizer.id)
        for who in (reviewer, late):
            bid = bids.place_bid(db, who.id, submission.id, 5)
            bids.set_bid_status(db, organizer.id, bid.id, "accepted")

        review(db, reviewer, submission, "REJECT")
        lifecycle.record_decision(db, organizer.id, submission.id, "rejected")

        with pytest.raises(NotEligible):
            review(db, late, submission, "ACCEPT")

    def test_decision_waits_for_a_final_verdict(self, db, factory, submission, organizer, reviewer, author):
        second = factory.user(RoleName.REVIEWER)
        lifecycle.approve_submission(db, submission.id, organizer.id)
        for who in (reviewer, second):
            bid = bids.place_bid(db, who.id, submission.id, 6)
            bids.set_bid_status(db, organizer.id, bid.id, "accepted")

        review(db, reviewer, submission, "MINOR_REVISION")
        lifecycle.submit_revision(db, author.id, submission.id, file_url="papers/v2.pdf")
        with pytest.raises(PreconditionFailed):
            lifecycle.record_decision(db, organizer.id, submission.id, "accepted")

        review(db, second, submission, "ACCEPT")
        assert lifecycle.record_decision(db, organizer.id, submission.id, "accepted").status == "accepted"

    def test_one_review_per_pair_across_revisions(self, db, submission, organizer, reviewer, author):
        lifecycle.approve_submission(db, submission.id, organizer.id)
        bid = bids.place_bid(db, reviewer.id, submission.id, 8)
        bids.set_bid_status(db, organizer.id, bid.id, "accepted")

        for round_number in range(3):
            review(db, reviewer, submission, "MINOR_REVISION")
            lifecycle.submit_revision(db, author.id, submission.id, file_url=f"papers/v{round_number + 2}.pdf")

        stored = db.query(Review).all()
        assert len(stored) == 1
        assert stored[0].review_number == 1
        assert stored[0].for_revision_count == 2
        db.refresh(submission)
        assert submission.revision_count == 3
