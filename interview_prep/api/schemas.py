from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from interview_prep.core.models import Explanation, Question, QuestionSource, Session, UserResponse


def _require_text(value: str, field_label: str) -> str:
    if not value.strip():
        raise ValueError(f"{field_label} cannot be empty or only whitespace")
    if "\x00" in value:
        raise ValueError(f"{field_label} contains invalid characters")
    return value.strip()


class SessionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="Target role, e.g. 'Backend Engineer'")
    skills: str = Field(..., min_length=1, max_length=500, description="Comma-separated skills")
    experience: str = Field(..., min_length=1, max_length=100, description="Experience level, e.g. '3 years'")
    description: str = Field(..., min_length=1, max_length=5000)

    @field_validator("title", "skills", "experience", "description")
    @classmethod
    def validate_text(cls, v: str, info: ValidationInfo) -> str:
        return _require_text(v, info.field_name.capitalize())

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: str) -> str:
        if not any(skill.strip() for skill in v.split(",")):
            raise ValueError("At least one skill is required")
        return v


class SessionUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    skills: str | None = Field(None, min_length=1, max_length=500)
    experience: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=5000)

    @field_validator("title", "skills", "experience", "description")
    @classmethod
    def validate_text(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return v
        return _require_text(v, info.field_name.capitalize())

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: str | None) -> str | None:
        if v is not None and not any(skill.strip() for skill in v.split(",")):
            raise ValueError("At least one skill is required")
        return v


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", max_length=200)
    email: str = Field(..., max_length=254)
    password: str = Field(..., repr=False)


class LoginRequest(BaseModel):
    # Presence is checked by the route so that a missing field is a 400
    email: str | None = None
    password: str | None = Field(None, repr=False)


class QuestionOut(BaseModel):
    id: str
    session_id: str
    question_text: str
    answer: str
    source: QuestionSource
    is_ai_generated: bool
    order_index: int
    created_at: datetime

    @classmethod
    def from_question(cls, question: Question) -> "QuestionOut":
        return cls(
            id=question.id,
            session_id=question.session_id,
            question_text=question.question_text,
            answer=question.answer,
            source=question.source,
            is_ai_generated=question.is_ai_generated,
            order_index=question.order_index,
            created_at=question.created_at,
        )


class SessionOut(BaseModel):
    id: str
    user_id: str
    title: str
    skills: str
    experience: str
    description: str
    questions: list[QuestionOut]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionOut":
        return cls(
            id=session.id,
            user_id=session.user_id,
            title=session.title,
            skills=session.skills,
            experience=session.experience,
            description=session.description,
            questions=[QuestionOut.from_question(q) for q in session.questions],
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class SessionData(BaseModel):
    session: SessionOut


class SessionListData(BaseModel):
    sessions: list[SessionOut]


class QuestionListData(BaseModel):
    questions: list[QuestionOut]


class UserData(BaseModel):
    user: UserResponse


class SessionResponse(BaseModel):
    status: Literal["success"] = "success"
    data: SessionData


class SessionListResponse(BaseModel):
    status: Literal["success"] = "success"
    results: int
    data: SessionListData


class GeneratedQuestionsResponse(BaseModel):
    status: Literal["success"] = "success"
    data: QuestionListData


class ExplanationResponse(BaseModel):
    status: Literal["success"] = "success"
    data: Explanation


class AuthResponse(BaseModel):
    status: Literal["success"] = "success"
    token: str
    data: UserData


class CurrentUserResponse(BaseModel):
    status: Literal["success"] = "success"
    data: UserData


class MessageResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
