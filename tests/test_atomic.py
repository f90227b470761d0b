"""Concurrency handling: optimistic versions, unique indexes and retries."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from confreview.core.errors import Conflict, NotFound
from confreview.db.atomic import atomic
from confreview.db.base import Base
from confreview.models import Bid, Submission
from confreview.services import bids
from tests.conftest import Factory, seed_roles


class TestAtomic:
    def test_commits_on_success(self):
        db = MagicMock()
        assert atomic(db, lambda: "done", action="test") == "done"
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_retries_once_after_stale_data(self):
        db = MagicMock()
        operation = MagicMock(side_effect=[StaleDataError("stale"), "second"])
        assert atomic(db, operation, action="test", retries=1) == "second"
        assert operation.call_count == 2
        db.rollback.assert_called_once()

    def test_gives_up_with_conflict(self):
        db = MagicMock()
        operation = MagicMock(side_effect=StaleDataError("stale"))
        with pytest.raises(Conflict):
            atomic(db, operation, action="test", retries=1)
        assert operation.call_count == 2

    def test_integrity_error_from_commit_is_a_conflict(self):
        db = MagicMock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))
        with pytest.raises(Conflict):
            atomic(db, lambda: None, action="test", retries=0)

    def test_domain_errors_are_not_retried(self):
        db = MagicMock()
        operation = MagicMock(side_effect=NotFound("missing"))
        with pytest.raises(NotFound):
            atomic(db, operation, action="test", retries=3)
        operation.assert_called_once()
        db.rollback.assert_called_once()


class TestConcurrentBids:
    def test_lost_race_on_unique_index_is_a_conflict(self, db, approved_submission, reviewer, factory):
        factory.bid(reviewer, approved_submission)
        # Второй писатель не увидел первую ставку при проверке
        with patch("confreview.services.bids._existing_bid", return_value=None):
            with pytest.raises(Conflict):
                bids.place_bid(db, reviewer.id, approved_submission.id, 4)
        assert db.query(Bid).count() == 1


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield factory
    engine.dispose()


class TestOptimisticVersion:
    def test_stale_submission_write_is_rejected(self, file_sessions):
        setup = file_sessions()
        seed_roles(setup)
        make = Factory(setup)
        author = make.user()
        track = make.track(make.conference())
        submission_id = make.submission(author, track).id
        setup.close()

        first, second = file_sessions(), file_sessions()
        mine = first.get(Submission, submission_id)
        theirs = second.get(Submission, submission_id)

        mine.title = "First writer"
        first.commit()

        theirs.title = "Second writer"
        with pytest.raises(StaleDataError):
            second.commit()
        second.rollback()

        check = file_sessions()
        stored = check.get(Submission, submission_id)
        assert stored.title == "First writer"
        assert stored.version == 2
        for session in (first, second, check):
            session.close()
