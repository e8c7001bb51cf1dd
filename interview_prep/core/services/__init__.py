"""Core services for interview preparation."""

from .explanation_generator import ExplanationGenerator
from .question_generator import QuestionGenerator
from .session_service import SessionService
from .user_service import UserService

__all__ = [
    "QuestionGenerator",
    "ExplanationGenerator",
    "SessionService",
    "UserService",
]
