"""Direct database queries for assertions the store API does not expose."""

from sqlalchemy import func, select

from interview_prep.core.database_models import QuestionTable
from interview_prep.core.storage import DatabaseManager


def count_questions(db_manager: DatabaseManager, session_id: str) -> int:
    """Questions still stored under a session id, whether or not the session row exists."""
    with db_manager.SessionLocal() as db_session:
        return db_session.execute(
            select(func.count()).select_from(QuestionTable).where(QuestionTable.session_id == session_id)
        ).scalar_one()
