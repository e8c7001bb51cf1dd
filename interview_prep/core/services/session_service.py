"""Service orchestrating interview sessions, their questions and explanations."""

import logging
import uuid

from interview_prep.core.logging import log_event, mask_text, span
from interview_prep.core.models import Explanation, Question, Session, SessionUpdate
from interview_prep.core.services.exceptions import QuestionNotFoundError, SessionNotFoundError
from interview_prep.core.services.explanation_generator import ExplanationGenerator
from interview_prep.core.services.question_generator import QuestionGenerator
from interview_prep.core.storage import SessionNotFoundError as MissingSessionRowError
from interview_prep.core.storage import StorageError
from interview_prep.core.storage_interface import StorageInterface


class SessionService:
    """Owner-scoped operations on sessions.

    A session that does not exist and one owned by another user are reported
    the same way, through ``SessionNotFoundError``. Storage errors propagate
    unchanged; generation errors never do.
    """

    def __init__(
        self,
        storage: StorageInterface,
        question_generator: QuestionGenerator,
        explanation_generator: ExplanationGenerator,
    ):
        self.storage = storage
        self.question_generator = question_generator
        self.explanation_generator = explanation_generator

    def create_session(self, user_id: str, title: str, skills: str, experience: str, description: str) -> Session:
        """Persist a session, generate its first questions and return it populated.

        If the questions cannot be stored the new session is removed again
        before the storage error is re-raised.
        """
        self.question_generator.validate_inputs(title, skills)
        session = self.storage.create_session(
            Session(user_id=user_id, title=title, skills=skills, experience=experience, description=description)
        )
        log_event(
            "session.created",
            component="service",
            operation="create_session",
            session_id=session.id,
            title=mask_text(title),
        )

        drafts = self.question_generator.generate_initial(title, experience, skills)

        try:
            self.storage.add_questions(session.id, user_id, drafts)
        except StorageError as e:
            log_event(
                "session.create_rollback",
                component="service",
                operation="create_session",
                session_id=session.id,
                error_type=type(e).__name__,
                error_msg=str(e),
                level=logging.ERROR,
            )
            self.storage.delete_session(session.id, user_id)
            raise

        return self._require_session(session.id, user_id)

    def list_sessions(self, user_id: str) -> list[Session]:
        return self.storage.list_sessions(user_id)

    def get_session(self, session_id: str, user_id: str) -> Session:
        return self._require_session(session_id, user_id)

    def update_session(self, session_id: str, user_id: str, session_update: SessionUpdate) -> Session:
        """Apply only the provided fields; questions are left as they are."""
        if not _is_valid_uuid(session_id):
            raise SessionNotFoundError(session_id)

        session = self.storage.update_session(session_id, user_id, session_update)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete_session(self, session_id: str, user_id: str) -> None:
        if not _is_valid_uuid(session_id) or not self.storage.delete_session(session_id, user_id):
            raise SessionNotFoundError(session_id)
        log_event("session.deleted", component="service", operation="delete_session", session_id=session_id)

    def generate_more(self, session_id: str, user_id: str) -> list[Question]:
        """Append a new batch of questions and return only that batch."""
        session = self._require_session(session_id, user_id)

        with span(
            "session.generate_more",
            component="service",
            operation="generate_more",
            session_id=session_id,
            existing=len(session.questions),
        ):
            drafts = self.question_generator.generate_more(session.title, session.experience, session.skills)
            try:
                return self.storage.add_questions(session_id, user_id, drafts)
            except MissingSessionRowError as e:
                # deleted between the read and the append
                raise SessionNotFoundError(session_id) from e

    def question_details(self, session_id: str, question_id: str, user_id: str) -> Explanation:
        """Explain a question that belongs to both the session and the user."""
        if not _is_valid_uuid(session_id) or not _is_valid_uuid(question_id):
            raise QuestionNotFoundError(question_id)

        question = self.storage.find_question(question_id, session_id, user_id)
        if question is None:
            raise QuestionNotFoundError(question_id)

        return self.explanation_generator.explain(question.question_text)

    def _require_session(self, session_id: str, user_id: str) -> Session:
        if not _is_valid_uuid(session_id):
            raise SessionNotFoundError(session_id)

        session = self.storage.find_session(session_id, user_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session


def _is_valid_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True
