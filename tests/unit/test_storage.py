"""Tests for the SQLAlchemy record store."""

import threading
import uuid

import pytest

from interview_prep.core.database_models import UserTable
from interview_prep.core.models import QuestionDraft, QuestionSource, Session, SessionUpdate
from interview_prep.core.storage import DatabaseManager, SessionNotFoundError
from tests.db_helpers import count_questions


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'store.db'}")
    yield manager
    manager.dispose()


def _add_user(db_manager: DatabaseManager, email: str) -> str:
    with db_manager.SessionLocal() as db_session:
        user = UserTable(email=email, full_name="Test", password_hash="x")
        db_session.add(user)
        db_session.commit()
        return user.id


@pytest.fixture
def user_id(db_manager):
    return _add_user(db_manager, "owner@example.com")


@pytest.fixture
def session(db_manager, user_id):
    return db_manager.create_session(
        Session(user_id=user_id, title="Backend Engineer", skills="Go,SQL", experience="3 years", description="prep")
    )


def _drafts(count: int, prefix: str = "Q") -> list[QuestionDraft]:
    return [QuestionDraft(question_text=f"{prefix}{i}", answer=f"A{i}") for i in range(count)]


class TestSessions:
    def test_create_and_find(self, db_manager, session, user_id):
        found = db_manager.find_session(session.id, user_id)

        assert found.title == "Backend Engineer"
        assert found.questions == []

    def test_find_is_scoped_to_owner(self, db_manager, session):
        other = _add_user(db_manager, "other@example.com")

        assert db_manager.find_session(session.id, other) is None

    def test_list_newest_first(self, db_manager, session, user_id):
        newer = db_manager.create_session(
            Session(user_id=user_id, title="Newer", skills="Rust", experience="1 year", description="d")
        )

        assert [s.id for s in db_manager.list_sessions(user_id)] == [newer.id, session.id]

    def test_update_only_given_fields(self, db_manager, session, user_id):
        updated = db_manager.update_session(session.id, user_id, SessionUpdate(description="new"))

        assert updated.description == "new"
        assert updated.title == "Backend Engineer"
        assert db_manager.find_session(session.id, user_id).updated_at > session.updated_at

    def test_update_unknown_session(self, db_manager, user_id):
        assert db_manager.update_session(str(uuid.uuid4()), user_id, SessionUpdate(title="x")) is None


class TestQuestions:
    def test_add_questions_keeps_order_and_source(self, db_manager, session, user_id):
        drafts = _drafts(2) + [QuestionDraft(question_text="F", answer="fa", source=QuestionSource.FALLBACK)]

        created = db_manager.add_questions(session.id, user_id, drafts)

        assert [q.order_index for q in created] == [0, 1, 2]
        assert [q.source for q in created] == [
            QuestionSource.AI_GENERATED,
            QuestionSource.AI_GENERATED,
            QuestionSource.FALLBACK,
        ]
        stored = db_manager.find_session(session.id, user_id)
        assert [q.question_text for q in stored.questions] == ["Q0", "Q1", "F"]

    def test_append_continues_order(self, db_manager, session, user_id):
        db_manager.add_questions(session.id, user_id, _drafts(2))

        appended = db_manager.add_questions(session.id, user_id, _drafts(5, prefix="M"))

        assert [q.order_index for q in appended] == [2, 3, 4, 5, 6]
        assert len(db_manager.find_session(session.id, user_id).questions) == 7

    def test_add_questions_bumps_updated_at(self, db_manager, session, user_id):
        before = db_manager.find_session(session.id, user_id).updated_at

        db_manager.add_questions(session.id, user_id, _drafts(1))

        assert db_manager.find_session(session.id, user_id).updated_at > before

    def test_add_questions_to_foreign_session(self, db_manager, session):
        other = _add_user(db_manager, "other@example.com")

        with pytest.raises(SessionNotFoundError):
            db_manager.add_questions(session.id, other, _drafts(1))

        assert count_questions(db_manager, session.id) == 0

    def test_concurrent_appends_are_all_kept(self, db_manager, session, user_id):
        errors = []

        def append(prefix: str):
            try:
                db_manager.add_questions(session.id, user_id, _drafts(5, prefix=prefix))
            except Exception as e:  # surfaced by the assertion below
                errors.append(e)

        threads = [threading.Thread(target=append, args=(f"T{i}-",)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        questions = db_manager.find_session(session.id, user_id).questions
        assert len(questions) == 20
        assert sorted(q.order_index for q in questions) == list(range(20))

    def test_find_question_requires_session_and_owner(self, db_manager, session, user_id):
        question = db_manager.add_questions(session.id, user_id, _drafts(1))[0]
        other_session = db_manager.create_session(
            Session(user_id=user_id, title="Other", skills="Go", experience="1", description="d")
        )

        assert db_manager.find_question(question.id, session.id, user_id).id == question.id
        assert db_manager.find_question(question.id, other_session.id, user_id) is None
        assert db_manager.find_question(question.id, session.id, str(uuid.uuid4())) is None


class TestDelete:
    def test_delete_removes_questions(self, db_manager, session, user_id):
        db_manager.add_questions(session.id, user_id, _drafts(3))

        assert db_manager.delete_session(session.id, user_id) is True

        assert db_manager.find_session(session.id, user_id) is None
        assert count_questions(db_manager, session.id) == 0

    def test_delete_missing_session(self, db_manager, user_id):
        assert db_manager.delete_session(str(uuid.uuid4()), user_id) is False

    def test_delete_foreign_session_is_refused(self, db_manager, session, user_id):
        db_manager.add_questions(session.id, user_id, _drafts(2))
        other = _add_user(db_manager, "other@example.com")

        assert db_manager.delete_session(session.id, other) is False
        assert count_questions(db_manager, session.id) == 2


def test_sqlite_parent_directory_is_created(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "store.db"

    manager = DatabaseManager(f"sqlite:///{db_path}")
    manager.dispose()

    assert db_path.parent.is_dir()
