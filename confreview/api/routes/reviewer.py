import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from confreview.api.deps import get_current_user_id, get_db
from confreview.schemas.bid import BidCreate, BidRead
from confreview.schemas.review import EligibilityRead, ReviewPayload, ReviewRead
from confreview.schemas.submission import SubmissionRead
from confreview.services import bids, reviews

router = APIRouter(prefix="/reviewer", tags=["reviewer"])


@router.get("/conferences/{conference_id}/submissions", response_model=list[SubmissionRead])
def list_eligible_submissions(
    conference_id: uuid.UUID,
    domain: list[str] | None = Query(default=None),
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """
    Статьи, на которые можно сделать ставку. Без ?domain= берётся
    экспертиза из профиля рецензента.
    """
    return list(bids.list_eligible_submissions(db, user_id, conference_id, domain))


@router.post("/bids", response_model=BidRead, status_code=status.HTTP_201_CREATED)
def place_bid(
    payload: BidCreate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return bids.place_bid(db, user_id, payload.submission_id, payload.confidence)


@router.get("/bids", response_model=list[BidRead])
def list_bids(
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return bids.list_reviewer_bids(db, user_id)


@router.get("/submissions/{submission_id}/eligibility", response_model=EligibilityRead)
def get_eligibility(
    submission_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return reviews.get_review_eligibility(db, user_id, submission_id)


@router.put("/submissions/{submission_id}/review", response_model=ReviewRead)
def create_or_update_review(
    submission_id: uuid.UUID,
    payload: ReviewPayload,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return reviews.create_or_update_review(
        db,
        user_id,
        submission_id,
        score=payload.score,
        recommendation=payload.recommendation,
        comments=payload.comments,
        confidential_comments=payload.confidential_comments,
    )


@router.get("/reviews", response_model=list[ReviewRead])
def list_my_reviews(
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return reviews.list_reviewer_reviews(db, user_id)
