from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy import create_engine, delete, func, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.orm import selectinload, sessionmaker

from .database_models import (
    Base,
    QuestionTable,
    SessionTable,
    enable_sqlite_foreign_keys,
)
from .logging import span
from .models import Question, QuestionDraft, QuestionSource, Session, SessionUpdate
from .storage_interface import StorageInterface

DEFAULT_DATABASE_URL = "sqlite:///./interview_prep.db"


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class SessionNotFoundError(StorageError):
    """Raised when a write targets a session that no longer exists."""

    pass


class SessionSaveError(StorageError):
    """Raised when a session or its questions cannot be written."""

    pass


class SessionLoadError(StorageError):
    """Raised when a session cannot be read."""

    pass


class SessionDeleteError(StorageError):
    """Raised when a session cannot be deleted."""

    pass


class DatabaseManager(StorageInterface):
    def __init__(self, database_url: str = DEFAULT_DATABASE_URL):
        """Create the engine, session factory and (if needed) the schema."""
        self.database_url = database_url
        url = make_url(database_url)
        self.db_engine = url.get_backend_name()

        connect_args = {}
        if self.db_engine == "sqlite":
            connect_args["check_same_thread"] = False
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(
            database_url,
            echo=False,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args=connect_args,
        )
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        if self.db_engine == "sqlite":
            enable_sqlite_foreign_keys(self.engine)

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def _session_query(self):
        return select(SessionTable).options(selectinload(SessionTable.questions))

    def create_session(self, session: Session) -> Session:
        with span(
            "db.create_session",
            component="db",
            operation="create_session",
            session_id=session.id,
            db_engine=self.db_engine,
        ):
            with self.SessionLocal() as db_session:
                try:
                    row = SessionTable(
                        id=session.id,
                        user_id=session.user_id,
                        title=session.title,
                        skills=session.skills,
                        experience=session.experience,
                        description=session.description,
                        created_at=session.created_at,
                        updated_at=session.updated_at,
                    )
                    db_session.add(row)
                    db_session.commit()
                    return _session_from_row(row, questions=[])
                except Exception as e:
                    db_session.rollback()
                    raise SessionSaveError(f"Failed to save session {session.id}: {e}") from e

    def add_questions(self, session_id: str, user_id: str, drafts: list[QuestionDraft]) -> list[Question]:
        """Insert the drafts after the session's current questions.

        The insert and the session timestamp bump share one transaction, and
        no list of question references is rewritten, so concurrent appends
        to the same session are all kept.
        """
        with span(
            "db.add_questions",
            component="db",
            operation="add_questions",
            session_id=session_id,
            count=len(drafts),
            db_engine=self.db_engine,
        ):
            with self.SessionLocal() as db_session:
                try:
                    touched = db_session.execute(
                        update(SessionTable)
                        .where(SessionTable.id == session_id, SessionTable.user_id == user_id)
                        .values(updated_at=datetime.now(UTC))
                    )
                    if touched.rowcount == 0:
                        raise SessionNotFoundError(f"Session {session_id} not found")

                    next_index = db_session.execute(
                        select(func.coalesce(func.max(QuestionTable.order_index) + 1, 0)).where(
                            QuestionTable.session_id == session_id
                        )
                    ).scalar_one()

                    rows = [
                        QuestionTable(
                            session_id=session_id,
                            user_id=user_id,
                            question_text=draft.question_text,
                            answer=draft.answer,
                            source=draft.source.value,
                            order_index=next_index + offset,
                        )
                        for offset, draft in enumerate(drafts)
                    ]
                    db_session.add_all(rows)
                    db_session.commit()
                    return [_question_from_row(row) for row in rows]
                except SessionNotFoundError:
                    db_session.rollback()
                    raise
                except Exception as e:
                    db_session.rollback()
                    raise SessionSaveError(f"Failed to save questions for session {session_id}: {e}") from e

    def find_session(self, session_id: str, user_id: str) -> Session | None:
        with span(
            "db.find_session",
            component="db",
            operation="find_session",
            session_id=session_id,
            db_engine=self.db_engine,
        ):
            with self.SessionLocal() as db_session:
                try:
                    row = db_session.execute(
                        self._session_query().where(SessionTable.id == session_id, SessionTable.user_id == user_id)
                    ).scalar_one_or_none()
                    return _session_from_row(row) if row else None
                except Exception as e:
                    raise SessionLoadError(f"Failed to load session {session_id}: {e}") from e

    def list_sessions(self, user_id: str) -> list[Session]:
        with span("db.list_sessions", component="db", operation="list_sessions", db_engine=self.db_engine):
            with self.SessionLocal() as db_session:
                try:
                    rows = (
                        db_session.execute(
                            self._session_query()
                            .where(SessionTable.user_id == user_id)
                            .order_by(SessionTable.created_at.desc())
                        )
                        .scalars()
                        .all()
                    )
                    return [_session_from_row(row) for row in rows]
                except Exception as e:
                    raise SessionLoadError(f"Failed to list sessions: {e}") from e

    def update_session(self, session_id: str, user_id: str, session_update: SessionUpdate) -> Session | None:
        changes = session_update.model_dump(exclude_none=True)
        with span(
            "db.update_session",
            component="db",
            operation="update_session",
            session_id=session_id,
            fields=sorted(changes),
            db_engine=self.db_engine,
        ):
            with self.SessionLocal() as db_session:
                try:
                    row = db_session.execute(
                        self._session_query().where(SessionTable.id == session_id, SessionTable.user_id == user_id)
                    ).scalar_one_or_none()
                    if not row:
                        return None

                    for field, value in changes.items():
                        setattr(row, field, value)
                    if changes:
                        row.updated_at = datetime.now(UTC)

                    db_session.commit()
                    return _session_from_row(row)
                except Exception as e:
                    db_session.rollback()
                    raise SessionSaveError(f"Failed to update session {session_id}: {e}") from e

    def delete_session(self, session_id: str, user_id: str) -> bool:
        """Delete a session and its questions in one transaction."""
        with span(
            "db.delete_session",
            component="db",
            operation="delete_session",
            session_id=session_id,
            db_engine=self.db_engine,
        ):
            with self.SessionLocal() as db_session:
                try:
                    row = db_session.execute(
                        select(SessionTable).where(SessionTable.id == session_id, SessionTable.user_id == user_id)
                    ).scalar_one_or_none()
                    if not row:
                        return False

                    db_session.execute(delete(QuestionTable).where(QuestionTable.session_id == session_id))
                    db_session.delete(row)
                    db_session.commit()
                    return True
                except Exception as e:
                    db_session.rollback()
                    raise SessionDeleteError(f"Failed to delete session {session_id}: {e}") from e

    def find_question(self, question_id: str, session_id: str, user_id: str) -> Question | None:
        with span(
            "db.find_question",
            component="db",
            operation="find_question",
            session_id=session_id,
            question_id=question_id,
            db_engine=self.db_engine,
        ):
            with self.SessionLocal() as db_session:
                try:
                    row = db_session.execute(
                        select(QuestionTable).where(
                            QuestionTable.id == question_id,
                            QuestionTable.session_id == session_id,
                            QuestionTable.user_id == user_id,
                        )
                    ).scalar_one_or_none()
                    return _question_from_row(row) if row else None
                except Exception as e:
                    raise SessionLoadError(f"Failed to load question {question_id}: {e}") from e


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _question_from_row(row: QuestionTable) -> Question:
    return Question(
        id=row.id,
        session_id=row.session_id,
        user_id=row.user_id,
        question_text=row.question_text,
        answer=row.answer,
        source=QuestionSource(row.source),
        order_index=row.order_index,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


def _session_from_row(row: SessionTable, questions: list[Question] | None = None) -> Session:
    if questions is None:
        questions = [_question_from_row(q) for q in row.questions]
    return Session(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        skills=row.skills,
        experience=row.experience,
        description=row.description,
        questions=questions,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )
