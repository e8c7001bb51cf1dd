"""Tests for session orchestration on top of a real store and a scripted provider."""

import uuid

import pytest

from interview_prep.core.database_models import UserTable
from interview_prep.core.models import QuestionSource, SessionUpdate
from interview_prep.core.services.exceptions import InvalidInputError, QuestionNotFoundError, SessionNotFoundError
from interview_prep.core.services.explanation_generator import ExplanationGenerator
from interview_prep.core.services.question_generator import QuestionGenerator
from interview_prep.core.services.session_service import SessionService
from interview_prep.core.storage import DatabaseManager, SessionSaveError
from tests.db_helpers import count_questions
from tests.mocks.mock_provider import MockProvider, questions_json


@pytest.fixture
def storage(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'sessions.db'}")
    yield manager
    manager.dispose()


@pytest.fixture
def user_id(storage):
    with storage.SessionLocal() as db_session:
        user = UserTable(email="owner@example.com", full_name="Owner", password_hash="x")
        db_session.add(user)
        db_session.commit()
        return user.id


@pytest.fixture
def provider():
    return MockProvider()


@pytest.fixture
def service(storage, provider):
    return SessionService(storage, QuestionGenerator(provider), ExplanationGenerator(provider))


def _create(service: SessionService, user_id: str):
    return service.create_session(user_id, "Backend Engineer", "Go,SQL", "3 years", "prep")


class TestCreate:
    def test_create_with_fallback(self, service, user_id):
        session = _create(service, user_id)

        assert len(session.questions) == 2
        assert all(q.source == QuestionSource.FALLBACK for q in session.questions)
        assert all(not q.is_ai_generated for q in session.questions)

    def test_create_with_ai(self, service, provider, user_id):
        provider.queue(questions_json(5))

        session = _create(service, user_id)

        assert [q.is_ai_generated for q in session.questions] == [True] * 5

    def test_invalid_input_stores_nothing(self, service, storage, provider, user_id):
        with pytest.raises(InvalidInputError) as exc_info:
            service.create_session(user_id, "Backend Engineer", " , ", "3 years", "prep")

        assert exc_info.value.field == "skills"
        assert storage.list_sessions(user_id) == []
        assert provider.call_count == 0

    def test_failed_question_insert_removes_session(self, service, storage, user_id, monkeypatch):
        def fail(*args, **kwargs):
            raise SessionSaveError("write failed")

        monkeypatch.setattr(storage, "add_questions", fail)

        with pytest.raises(SessionSaveError):
            _create(service, user_id)

        assert storage.list_sessions(user_id) == []


class TestLookups:
    @pytest.mark.parametrize("bad_id", ["not-a-uuid", "", "1234"])
    def test_malformed_ids_are_not_found(self, service, user_id, bad_id):
        with pytest.raises(SessionNotFoundError):
            service.get_session(bad_id, user_id)
        with pytest.raises(SessionNotFoundError):
            service.delete_session(bad_id, user_id)
        with pytest.raises(SessionNotFoundError):
            service.update_session(bad_id, user_id, SessionUpdate(title="x"))

    def test_question_details_with_malformed_question_id(self, service, user_id):
        session = _create(service, user_id)

        with pytest.raises(QuestionNotFoundError):
            service.question_details(session.id, "nope", user_id)

    def test_unknown_question(self, service, user_id):
        session = _create(service, user_id)

        with pytest.raises(QuestionNotFoundError):
            service.question_details(session.id, str(uuid.uuid4()), user_id)


class TestGenerateMore:
    def test_returns_only_new_questions(self, service, user_id):
        session = _create(service, user_id)

        new_questions = service.generate_more(session.id, user_id)

        assert len(new_questions) == 5
        assert {q.id for q in new_questions}.isdisjoint({q.id for q in session.questions})
        assert len(service.get_session(session.id, user_id).questions) == 7

    def test_uses_current_session_fields(self, service, provider, user_id):
        session = _create(service, user_id)
        service.update_session(session.id, user_id, SessionUpdate(skills="Rust"))

        new_questions = service.generate_more(session.id, user_id)

        assert "Rust" in provider.prompts[-1]
        assert new_questions[0].question_text == "Explain your experience with Rust"

    def test_session_deleted_before_append(self, service, storage, user_id, monkeypatch):
        session = _create(service, user_id)
        original_generate = service.question_generator.generate_more

        def generate_then_delete(*args):
            drafts = original_generate(*args)
            storage.delete_session(session.id, user_id)
            return drafts

        monkeypatch.setattr(service.question_generator, "generate_more", generate_then_delete)

        with pytest.raises(SessionNotFoundError):
            service.generate_more(session.id, user_id)

        assert count_questions(storage, session.id) == 0
