"""Service for generating interview questions with a deterministic fallback."""

from interview_prep.core.logging import span
from interview_prep.core.models import QuestionDraft, parse_skills
from interview_prep.core.prompts import generate_more_questions_prompt, generate_questions_prompt
from interview_prep.core.services.exceptions import InvalidInputError
from interview_prep.providers.base import Provider
from interview_prep.providers.exceptions import FallbackFactory, handle_provider_operation

INITIAL_QUESTION_COUNT = 5
MORE_QUESTION_COUNT = 5


class QuestionGenerator:
    """Produces question/answer drafts for a role, experience level and skill set.

    The provider is called exactly once per request. Any failure on that path
    is logged and replaced by templated drafts, so callers always receive a
    non-empty list.
    """

    def __init__(self, provider: Provider):
        self.provider = provider

    def generate_initial(self, role: str, experience: str, skills: str) -> list[QuestionDraft]:
        """Questions for a newly created session (two fallback drafts on failure)."""
        self.validate_inputs(role, skills)
        prompt = generate_questions_prompt(role, experience, skills, INITIAL_QUESTION_COUNT)

        with span(
            "questions.generate_initial",
            component="service",
            operation="generate_initial",
            count=INITIAL_QUESTION_COUNT,
        ):
            return handle_provider_operation(
                operation="generate_initial",
                provider=self.provider.name,
                model=self.provider.model,
                operation_func=lambda: self.provider.generate_questions(prompt),
                fallback_factory=lambda: FallbackFactory.initial_questions(skills, experience),
            )

    def generate_more(self, role: str, experience: str, skills: str) -> list[QuestionDraft]:
        """Additional questions for an existing session (five fallback drafts on failure)."""
        self.validate_inputs(role, skills)
        prompt = generate_more_questions_prompt(role, experience, skills, MORE_QUESTION_COUNT)

        with span(
            "questions.generate_more",
            component="service",
            operation="generate_more",
            count=MORE_QUESTION_COUNT,
        ):
            return handle_provider_operation(
                operation="generate_more",
                provider=self.provider.name,
                model=self.provider.model,
                operation_func=lambda: self.provider.generate_questions(prompt),
                fallback_factory=lambda: FallbackFactory.more_questions(skills, experience),
            )

    @staticmethod
    def validate_inputs(role: str, skills: str) -> None:
        if not role or not role.strip():
            raise InvalidInputError("title", "Role title must not be empty")
        if not parse_skills(skills or ""):
            raise InvalidInputError("skills", "At least one skill is required")
