"""
Проверки прав перед любой изменяющей операцией.

Соавторы видят статью, но не могут ничего менять: это проверяется здесь,
а не конечным автоматом.
"""
from __future__ import annotations

import uuid

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from confreview.core.errors import Forbidden, NotFound
from confreview.models import Bid, BidStatus, Conference, Role, RoleName, Submission, User, UserRole


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found", user_id=str(user_id))
    return user


def get_role_names(db: Session, user_id: uuid.UUID) -> set[str]:
    stmt = (
        select(Role.name)
        .join(UserRole, UserRole.role_id == Role.id)
        .where(UserRole.user_id == user_id)
    )
    return set(db.scalars(stmt))


def require_role(db: Session, user_id: uuid.UUID, role: RoleName) -> None:
    get_user(db, user_id)
    roles = get_role_names(db, user_id)
    if role.value not in roles and RoleName.ADMIN.value not in roles:
        raise Forbidden(f"The '{role.value}' role is required", user_id=str(user_id))


def is_conference_organizer(db: Session, user_id: uuid.UUID, conference: Conference) -> bool:
    roles = get_role_names(db, user_id)
    if RoleName.ADMIN.value in roles:
        return True
    if RoleName.ORG_COMMITTEE.value not in roles:
        return False
    return conference.organizer_id is None or conference.organizer_id == user_id


def require_organizer(db: Session, user_id: uuid.UUID, conference_id: uuid.UUID) -> Conference:
    get_user(db, user_id)
    conference = db.get(Conference, conference_id)
    if conference is None:
        raise NotFound("Conference not found", conference_id=str(conference_id))
    if not is_conference_organizer(db, user_id, conference):
        raise Forbidden(
            "You are not authorized to manage this conference",
            user_id=str(user_id),
            conference_id=str(conference_id),
        )
    return conference


def is_co_author(submission: Submission, user_id: uuid.UUID) -> bool:
    return user_id in submission.co_author_user_ids()


def require_primary_author(submission: Submission, user_id: uuid.UUID) -> None:
    if submission.author_id == user_id:
        return
    if is_co_author(submission, user_id):
        raise Forbidden(
            "Co-authors have read-only access to the submission",
            submission_id=str(submission.id),
        )
    raise Forbidden("Only the primary author can modify the submission", submission_id=str(submission.id))


def require_not_involved_author(submission: Submission, user_id: uuid.UUID) -> None:
    # Автор и соавторы не рецензируют свою статью
    if submission.author_id == user_id or is_co_author(submission, user_id):
        raise Forbidden("Authors cannot review their own submission", submission_id=str(submission.id))


def has_accepted_bid(db: Session, user_id: uuid.UUID, submission_id: uuid.UUID) -> bool:
    stmt = select(
        exists().where(
            Bid.reviewer_id == user_id,
            Bid.submission_id == submission_id,
            Bid.status == BidStatus.ACCEPTED.value,
        )
    )
    return bool(db.scalar(stmt))


def can_view_submission(db: Session, submission: Submission, user_id: uuid.UUID) -> bool:
    if submission.author_id == user_id or is_co_author(submission, user_id):
        return True
    # Назначенный рецензент открывает статью, которую рецензирует
    if has_accepted_bid(db, user_id, submission.id):
        return True
    conference = db.get(Conference, submission.conference_id)
    return conference is not None and is_conference_organizer(db, user_id, conference)
