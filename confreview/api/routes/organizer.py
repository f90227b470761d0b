import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from confreview.api.deps import get_current_user_id, get_db
from confreview.schemas.bid import BidRead, BidStatusUpdate
from confreview.schemas.review import ReviewRead
from confreview.schemas.submission import DecisionCreate, SubmissionOverviewRead, SubmissionRead
from confreview.services import bids, lifecycle, reviews, submissions

router = APIRouter(prefix="/organizer", tags=["organizer"])


@router.get("/conferences/{conference_id}/submissions", response_model=list[SubmissionOverviewRead])
def list_conference_submissions(
    conference_id: uuid.UUID,
    pending_approval: bool = Query(default=False),
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Все статьи конференции с отзывами; ?pending_approval=true оставляет ждущие одобрения."""
    return submissions.list_conference_submissions(db, user_id, conference_id, pending_approval=pending_approval)


@router.put("/submissions/{submission_id}/approve", response_model=SubmissionRead)
def approve_submission(
    submission_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return lifecycle.approve_submission(db, submission_id, user_id)


@router.patch("/submissions/{submission_id}/decision", response_model=SubmissionRead)
def record_decision(
    submission_id: uuid.UUID,
    payload: DecisionCreate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return lifecycle.record_decision(db, user_id, submission_id, payload.decision, payload.feedback)


@router.get("/submissions/{submission_id}/reviews", response_model=list[ReviewRead])
def list_reviews(
    submission_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return reviews.list_reviews_for_organizer(db, user_id, submission_id)


@router.patch("/bids/{bid_id}", response_model=BidRead)
def set_bid_status(
    bid_id: uuid.UUID,
    payload: BidStatusUpdate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return bids.set_bid_status(db, user_id, bid_id, payload.status)
