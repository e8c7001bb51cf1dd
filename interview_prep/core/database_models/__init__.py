from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def enable_sqlite_foreign_keys(engine: Engine):
    """Turn on foreign key enforcement for every SQLite connection of an engine."""

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
        if "sqlite" in type(dbapi_connection).__module__:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UserTable(Base):
    """Registered users."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    sessions = relationship("SessionTable", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (Index("ix_users_email", "email"),)


class SessionTable(Base):
    """Interview preparation sessions."""

    __tablename__ = "interview_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String, nullable=False)
    skills = Column(Text, nullable=False)
    experience = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("UserTable", back_populates="sessions")
    questions = relationship(
        "QuestionTable",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="QuestionTable.order_index",
    )

    __table_args__ = (Index("ix_interview_sessions_user_id", "user_id"),)


class QuestionTable(Base):
    """Questions belonging to a session. Immutable once written."""

    __tablename__ = "questions"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    session_id = Column(String, ForeignKey("interview_sessions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    question_text = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    source = Column(String, nullable=False)
    order_index = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    session = relationship("SessionTable", back_populates="questions")

    __table_args__ = (
        Index("ix_questions_session_id", "session_id"),
        Index("ix_questions_user_id", "user_id"),
        UniqueConstraint("session_id", "order_index", name="uq_questions_session_order"),
    )


__all__ = [
    "Base",
    "UserTable",
    "SessionTable",
    "QuestionTable",
    "enable_sqlite_foreign_keys",
]
