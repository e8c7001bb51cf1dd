"""Service for explaining a single interview question."""

from interview_prep.core.logging import span
from interview_prep.core.models import Explanation
from interview_prep.core.prompts import explain_question_prompt
from interview_prep.providers.base import Provider
from interview_prep.providers.exceptions import FallbackFactory, handle_provider_operation


class ExplanationGenerator:
    """Builds a structured explanation; never raises on provider failure."""

    def __init__(self, provider: Provider):
        self.provider = provider

    def explain(self, question_text: str) -> Explanation:
        prompt = explain_question_prompt(question_text)
        with span("questions.explain", component="service", operation="explain_question"):
            return handle_provider_operation(
                operation="explain_question",
                provider=self.provider.name,
                model=self.provider.model,
                operation_func=lambda: self.provider.explain_question(prompt),
                fallback_factory=lambda: FallbackFactory.question_explanation(question_text),
            )
