import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from confreview.api.deps import get_current_user_id, get_db
from confreview.schemas.review import AuthorReviewRead
from confreview.schemas.submission import RevisionSubmit, SubmissionCreate, SubmissionRead
from confreview.services import lifecycle, reviews, submissions

router = APIRouter(tags=["submissions"])


@router.post(
    "/conferences/{conference_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_submission(
    conference_id: uuid.UUID,
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return submissions.create_submission(
        db,
        user_id,
        conference_id,
        title=payload.title,
        abstract=payload.abstract,
        track_id=payload.track_id,
        file_url=payload.file_url,
        keywords=payload.keywords,
        co_authors=[c.model_dump() for c in payload.co_authors],
    )


@router.get("/submissions", response_model=list[SubmissionRead])
def list_my_submissions(
    track_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return submissions.list_author_submissions(db, user_id, track_id)


@router.get("/submissions/{submission_id}", response_model=SubmissionRead)
def get_submission(
    submission_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return submissions.get_submission(db, user_id, submission_id)


@router.get("/submissions/{submission_id}/reviews", response_model=list[AuthorReviewRead])
def get_submission_reviews(
    submission_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Комментарии рецензентов, видимые автору и соавторам."""
    return reviews.list_reviews_for_author(db, user_id, submission_id)


@router.put("/submissions/{submission_id}/revision", response_model=SubmissionRead)
def submit_revision(
    submission_id: uuid.UUID,
    payload: RevisionSubmit,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return lifecycle.submit_revision(
        db,
        user_id,
        submission_id,
        file_url=payload.file_url,
        abstract=payload.abstract,
    )
