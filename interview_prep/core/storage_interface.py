from abc import ABC, abstractmethod

from .models import Question, QuestionDraft, Session, SessionUpdate


class StorageInterface(ABC):
    """Abstract record store for interview sessions and their questions."""

    @abstractmethod
    def create_session(self, session: Session) -> Session:
        """Persist a new session without questions."""
        pass

    @abstractmethod
    def add_questions(self, session_id: str, user_id: str, drafts: list[QuestionDraft]) -> list[Question]:
        """Append questions to a session in a single transaction."""
        pass

    @abstractmethod
    def find_session(self, session_id: str, user_id: str) -> Session | None:
        """Load a session with its questions if it exists and belongs to the user."""
        pass

    @abstractmethod
    def list_sessions(self, user_id: str) -> list[Session]:
        """List a user's sessions, newest first, with questions populated."""
        pass

    @abstractmethod
    def update_session(self, session_id: str, user_id: str, session_update: SessionUpdate) -> Session | None:
        """Apply a partial update. Returns None if not found or not owned."""
        pass

    @abstractmethod
    def delete_session(self, session_id: str, user_id: str) -> bool:
        """Delete a session and all its questions. Returns False if not found or not owned."""
        pass

    @abstractmethod
    def find_question(self, question_id: str, session_id: str, user_id: str) -> Question | None:
        """Load a question that belongs to both the session and the user."""
        pass
