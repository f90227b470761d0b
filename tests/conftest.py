"""Shared fixtures: in-memory database, seeded roles and a small conference."""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import confreview.models  # noqa: F401
from confreview.core.timeutils import utcnow
from confreview.db.base import Base
from confreview.models import (
    Bid,
    BidStatus,
    Conference,
    Role,
    RoleName,
    Submission,
    Track,
    User,
    UserRole,
)
from confreview.models.user_role import ROLE_IDS


def seed_roles(db: Session) -> None:
    for name, role_id in ROLE_IDS.items():
        db.add(Role(id=role_id, name=name))
    db.commit()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_roles(session)
    yield session
    session.close()


class Factory:
    """Creates committed rows for tests."""

    def __init__(self, db: Session):
        self.db = db

    def user(self, *roles: RoleName, name: str | None = None, expertise: list[str] | None = None) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            name=name or f"user-{suffix}",
            email=f"{suffix}@example.org",
            expertise_domains=expertise or [],
        )
        self.db.add(user)
        self.db.flush()
        for role in roles:
            self.db.add(UserRole(user_id=user.id, role_id=ROLE_IDS[role.value]))
        self.db.commit()
        return user

    def conference(self, organizer: User | None = None, **kwargs) -> Conference:
        conference = Conference(
            title=kwargs.pop("title", "ICML Workshop"),
            organizer_id=organizer.id if organizer else None,
            submission_deadline=kwargs.pop("submission_deadline", utcnow() + timedelta(days=30)),
            **kwargs,
        )
        self.db.add(conference)
        self.db.commit()
        return conference

    def track(self, conference: Conference, name: str = "Machine Learning", **kwargs) -> Track:
        track = Track(conference_id=conference.id, name=name, **kwargs)
        self.db.add(track)
        self.db.commit()
        return track

    def submission(self, author: User, track: Track, **kwargs) -> Submission:
        now = kwargs.pop("created_at", utcnow())
        submission = Submission(
            conference_id=track.conference_id,
            track_id=track.id,
            author_id=author.id,
            title=kwargs.pop("title", "Sparse attention for long documents"),
            abstract=kwargs.pop("abstract", "We study sparse attention."),
            keywords=kwargs.pop("keywords", ["attention"]),
            file_url=kwargs.pop("file_url", "papers/original.pdf"),
            created_at=now,
            last_updated_at=now,
            **kwargs,
        )
        self.db.add(submission)
        self.db.commit()
        return submission

    def bid(self, reviewer: User, submission: Submission, status: BidStatus = BidStatus.ACCEPTED, confidence: int = 7) -> Bid:
        bid = Bid(
            conference_id=submission.conference_id,
            submission_id=submission.id,
            reviewer_id=reviewer.id,
            confidence=confidence,
            status=status.value,
        )
        self.db.add(bid)
        self.db.commit()
        return bid


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def organizer(factory):
    return factory.user(RoleName.ORG_COMMITTEE, name="Olga Organizer")


@pytest.fixture
def author(factory):
    return factory.user(RoleName.AUTHOR, name="Anna Author")


@pytest.fixture
def reviewer(factory):
    return factory.user(RoleName.REVIEWER, name="Roman Reviewer", expertise=["machine learning"])


@pytest.fixture
def conference(factory, organizer):
    return factory.conference(organizer)


@pytest.fixture
def track(factory, conference):
    return factory.track(conference)


@pytest.fixture
def submission(factory, author, track):
    return factory.submission(author, track)


@pytest.fixture
def approved_submission(factory, author, track):
    return factory.submission(author, track, organizer_approved=True, approved_at=utcnow())
