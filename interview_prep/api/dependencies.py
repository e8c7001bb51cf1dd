import os
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session as DBSession

from interview_prep.api.auth import get_token_config
from interview_prep.api.exceptions import AuthenticationException
from interview_prep.core.models import User
from interview_prep.core.services import ExplanationGenerator, QuestionGenerator, SessionService, UserService
from interview_prep.core.services.auth_cookie_config import AuthCookieConfig
from interview_prep.core.services.llm_config import LLMConfig
from interview_prep.core.storage import DEFAULT_DATABASE_URL, DatabaseManager
from interview_prep.providers.base import Provider


@lru_cache
def get_storage() -> DatabaseManager:
    """Get storage instance (cached)."""
    return DatabaseManager(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))


@lru_cache
def get_provider() -> Provider:
    """One provider client per process, built from MODEL_ID on first use."""
    config = LLMConfig()
    return Provider.from_id(config.model_id, timeout_seconds=config.timeout_seconds)


def get_question_generator(provider: Annotated[Provider, Depends(get_provider)]) -> QuestionGenerator:
    return QuestionGenerator(provider)


def get_explanation_generator(provider: Annotated[Provider, Depends(get_provider)]) -> ExplanationGenerator:
    return ExplanationGenerator(provider)


def get_session_service(
    question_generator: Annotated[QuestionGenerator, Depends(get_question_generator)],
    explanation_generator: Annotated[ExplanationGenerator, Depends(get_explanation_generator)],
) -> SessionService:
    """Get session service instance."""
    return SessionService(get_storage(), question_generator, explanation_generator)


def get_database_session():
    """Get database session with proper cleanup."""
    db_session = get_storage().SessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()


def get_user_service(db_session: Annotated[DBSession, Depends(get_database_session)]) -> UserService:
    return UserService(db_session)


def get_auth_cookie_config() -> AuthCookieConfig:
    return AuthCookieConfig(max_age=get_token_config().get_max_age_seconds())


def get_current_user(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Load the user named by the verified token; a token for a deleted user is rejected."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise AuthenticationException()

    user = user_service.get_user_by_id(user_id)
    if not user:
        raise AuthenticationException("User belonging to this token no longer exists")
    return user


def get_current_user_id(user: Annotated[User, Depends(get_current_user)]) -> str:
    return user.id
