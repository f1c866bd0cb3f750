"""Tests for the Database lifecycle and the unit_of_work transaction boundary."""

import pytest
from identity.user.user import User
from shared.database import Database, get_database, get_session, reset_database, set_database, unit_of_work
from sqlalchemy import func, select, text


def _user_count(session):
    return session.scalar(select(func.count()).select_from(User))


class TestUnitOfWork:
    def test_commits_on_success(self, session, database):
        with unit_of_work(session):
            session.add(User(id="user_1", email="a@example.com"))

        with database.session() as other:
            assert _user_count(other) == 1

    def test_rolls_back_on_exception(self, session):
        with pytest.raises(RuntimeError):
            with unit_of_work(session):
                session.add(User(id="user_1", email="a@example.com"))
                session.flush()
                raise RuntimeError("abort")

        assert _user_count(session) == 0

    def test_rolls_back_on_cancellation(self, session):
        with pytest.raises(KeyboardInterrupt):
            with unit_of_work(session):
                session.add(User(id="user_1", email="a@example.com"))
                session.flush()
                raise KeyboardInterrupt

        assert _user_count(session) == 0


class TestDatabase:
    def test_lazy_init(self):
        db = Database("sqlite://")
        assert not db.is_initialized

        db.engine
        assert db.is_initialized
        db.dispose()
        assert not db.is_initialized

    def test_in_memory_database_is_shared_between_sessions(self, database):
        with database.session() as first:
            with unit_of_work(first):
                first.add(User(id="user_1"))

        with database.session() as second:
            assert _user_count(second) == 1

    def test_sqlite_foreign_keys_are_enforced(self, database):
        with database.session() as session:
            assert session.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_set_and_reset_process_database(self):
        db = Database("sqlite://")
        set_database(db)
        assert get_database() is db

        reset_database()
        assert get_database() is not db
        reset_database()

    def test_get_session_closes_the_session(self, database):
        dependency = get_session()
        session = next(dependency)
        session.add(User(id="user_pending"))

        with pytest.raises(StopIteration):
            next(dependency)

        with database.session() as other:
            assert other.get(User, "user_pending") is None
