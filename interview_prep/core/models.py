from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class QuestionSource(str, Enum):
    """Where a question's content came from."""

    AI_GENERATED = "ai_generated"
    FALLBACK = "fallback"


class User(BaseModel):
    id: str
    email: str
    full_name: str
    password_hash: str = Field(repr=False)
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    full_name: str
    email: str
    password: str = Field(repr=False)


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    created_at: datetime


class QuestionDraft(BaseModel):
    """A generated question/answer pair that has not been persisted yet."""

    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(alias="questionText", min_length=1)
    answer: str = Field(min_length=1)
    source: QuestionSource = QuestionSource.AI_GENERATED


class Question(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    session_id: str
    user_id: str
    question_text: str
    answer: str
    source: QuestionSource
    order_index: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_ai_generated(self) -> bool:
        return self.source == QuestionSource.AI_GENERATED


class Session(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    skills: str
    experience: str
    description: str
    questions: list[Question] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SessionUpdate(BaseModel):
    title: str | None = None
    skills: str | None = None
    experience: str | None = None
    description: str | None = None


class ExplanationSection(BaseModel):
    title: str | None = None
    content: str
    code: str | None = None
    points: list[str] = []


class Explanation(BaseModel):
    title: str
    content: str
    sections: list[ExplanationSection] = []


def parse_skills(skills: str) -> list[str]:
    """Split a comma-separated skills string, dropping blank entries."""
    return [skill.strip() for skill in skills.split(",") if skill.strip()]
