import json
import logging
import re
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from interview_prep.core.logging import log_event
from interview_prep.core.models import (
    Explanation,
    ExplanationSection,
    QuestionDraft,
    QuestionSource,
    parse_skills,
)

T = TypeVar("T")

_CODE_FENCE = re.compile(r"```json|```")


class ProviderError(Exception):
    """Base exception for provider operations."""

    pass


class ProviderConnectionError(ProviderError):
    """Raised when the provider cannot be reached or times out."""

    pass


class ProviderResponseError(ProviderError):
    """Raised when the provider returns an unusable response."""

    pass


class ProviderParseError(ProviderError):
    """Raised when response text cannot be parsed into the expected shape."""

    pass


def handle_provider_operation(
    operation: str,
    provider: str,
    model: str,
    operation_func: Callable[[], T],
    fallback_factory: Callable[[], T],
) -> T:
    """Run a provider operation once, substituting the fallback on any failure.

    There is no retry: a failed call, a timeout, unparseable text and a
    schema mismatch all go straight to ``fallback_factory``. Nothing raised
    by ``operation_func`` reaches the caller.
    """
    try:
        return operation_func()
    except ValidationError as e:
        reason = "validation_error"
        log_event(
            "llm.validation_error",
            component="provider",
            operation=operation,
            provider=provider,
            model=model,
            error_type="ValidationError",
            error_msg=str(e),
            level=logging.ERROR,
        )
    except (ProviderParseError, json.JSONDecodeError, KeyError, TypeError) as e:
        reason = "parse_error"
        log_event(
            "llm.parse_error",
            component="provider",
            operation=operation,
            provider=provider,
            model=model,
            error_type=type(e).__name__,
            error_msg=str(e),
            level=logging.WARNING,
        )
    except Exception as e:
        reason = "provider_error"
        log_event(
            "llm.provider_error",
            component="provider",
            operation=operation,
            provider=provider,
            model=model,
            error_type=type(e).__name__,
            error_msg=str(e),
            level=logging.WARNING,
        )

    log_event(
        "llm.using_fallback",
        component="provider",
        operation=operation,
        reason=reason,
        level=logging.WARNING,
    )
    return fallback_factory()


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers wrapped around a model's JSON answer."""
    return _CODE_FENCE.sub("", text).strip()


def parse_json_response(content: str | None, error_context: dict[str, Any]) -> Any:
    """Strip code fences from model output and decode the JSON inside.

    Raises:
        ProviderParseError: If the content is empty or not valid JSON
    """
    if not content:
        raise ProviderParseError("Empty response content")

    cleaned = strip_code_fences(content)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        log_event(
            "llm.json_parse_error",
            component="provider",
            operation=error_context.get("operation", "unknown"),
            provider=error_context.get("provider", "unknown"),
            model=error_context.get("model", "unknown"),
            error_msg=str(e),
            content_length=len(content),
        )
        raise ProviderParseError(f"Invalid JSON response: {e}") from e


def extract_content_from_response(response: Any, provider: str) -> str:
    """Pull the text out of a vendor SDK response object.

    Raises:
        ProviderResponseError: If the response has no usable text
    """
    try:
        if provider == "openai":
            return getattr(response, "output_text", "") or ""
        elif provider == "anthropic":
            content = ""
            for block in getattr(response, "content", None) or []:
                if getattr(block, "type", None) == "text":
                    content += block.text
            return content
        elif provider == "google":
            return getattr(response, "text", "") or ""
        else:
            raise ProviderResponseError(f"Unknown provider: {provider}")
    except (AttributeError, TypeError) as e:
        raise ProviderResponseError(f"Failed to extract content: {e}") from e


REACT_HOOKS_EXAMPLE = """// Example of using React Hooks
import React, { useState, useEffect, useCallback } from 'react';

function MyComponent() {
  const [data, setData] = useState([]);

  const fetchData = useCallback(async () => {
    const response = await fetch('https://api.example.com/data');
    const result = await response.json();
    setData(result);
  }, []);

  useEffect(() => {
    fetchData();
  }, [fetchData]);

  return <div>{/* Component JSX */}</div>;
}"""


class FallbackFactory:
    """Deterministic local content used when the model output is unusable."""

    @staticmethod
    def initial_questions(skills: str, experience: str) -> list[QuestionDraft]:
        """Two templated questions for a newly created session."""
        first_skill = _first_skill(skills)
        return [
            QuestionDraft(
                question_text=f"Explain your experience with {skills}",
                answer=f"As a {experience} developer, I would approach {skills} by...",
                source=QuestionSource.FALLBACK,
            ),
            QuestionDraft(
                question_text=f"What are the core concepts of {first_skill}?",
                answer="The core concepts include...",
                source=QuestionSource.FALLBACK,
            ),
        ]

    @staticmethod
    def more_questions(skills: str, experience: str) -> list[QuestionDraft]:
        """Five templated questions for the "generate more" request."""
        skill = _first_skill(skills)
        templates = [
            (f"Explain your experience with {skill}", f"As a {experience} developer, I would approach {skill} by..."),
            (f"What are the advanced concepts of {skill}?", "The advanced concepts include..."),
            (f"How would you optimize {skill} performance?", "Performance optimization can be achieved through..."),
            (f"Describe a challenging project involving {skill}", "In one of my recent projects, I had to..."),
            (f"What are the best practices for {skill} development?", "Some best practices include..."),
        ]
        return [
            QuestionDraft(question_text=text, answer=answer, source=QuestionSource.FALLBACK)
            for text, answer in templates
        ]

    @staticmethod
    def question_explanation(question_text: str) -> Explanation:
        """Two-section explanation derived only from the question text."""
        words = question_text.split()
        first_word = words[0] if words else question_text
        return Explanation(
            title=f"Understanding {question_text}",
            content=(
                f"This question explores your knowledge of {first_word} concepts. "
                "Let's break down the key aspects you should cover in your answer."
            ),
            sections=[
                ExplanationSection(
                    title="Core Concepts",
                    content=(
                        f"When answering about {question_text}, focus on the fundamental principles "
                        "and how they apply in real-world scenarios."
                    ),
                    code=REACT_HOOKS_EXAMPLE if "React" in question_text else None,
                    points=[
                        "Explain the basic concept clearly and concisely",
                        "Provide practical examples from your experience",
                        "Discuss advantages and potential drawbacks",
                    ],
                ),
                ExplanationSection(
                    title="Best Practices",
                    content=(
                        "When answering this question in an interview, "
                        "follow these guidelines to make a strong impression."
                    ),
                    points=[
                        "Structure your answer with an introduction, main points, and conclusion",
                        "Use specific examples from your own projects",
                        "Connect your answer to the specific requirements of the role",
                        "Demonstrate your problem-solving approach",
                    ],
                ),
            ],
        )


def _first_skill(skills: str) -> str:
    parsed = parse_skills(skills)
    return parsed[0] if parsed else skills.strip()
