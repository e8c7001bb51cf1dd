from importlib import import_module

from pydantic import TypeAdapter

from interview_prep.core.logging import span
from interview_prep.core.models import Explanation, QuestionDraft, QuestionSource
from interview_prep.core.prompts import SYSTEM_INSTRUCTIONS

from .exceptions import ProviderConnectionError, ProviderParseError, parse_json_response

DEFAULT_TIMEOUT_SECONDS = 30.0

_drafts_adapter = TypeAdapter(list[QuestionDraft])

_PROVIDER_MODULES = {
    "google": "interview_prep.providers.google",
    "openai": "interview_prep.providers.openai",
    "anthropic": "interview_prep.providers.anthropic",
}


class Provider:
    """Adapter around one vendor's generative AI client.

    Subclasses build their SDK client in ``_create_client`` and implement
    ``complete``. The client is created on first use, inside the guarded
    call, so a missing API key is a provider failure like any other.
    The JSON handling shared by every vendor lives here and raises on any
    problem, leaving fallback decisions to the caller.
    """

    name = "base"

    def __init__(self, model: str, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client = None

    @staticmethod
    def from_id(model_id: str, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> "Provider":
        # parse like "google:gemini-2.0-flash" / "openai:gpt-4o-mini" / "anthropic:claude-3-5-haiku-latest"
        if ":" not in model_id:
            raise ValueError(
                f"Model ID must be in format 'vendor:model', got: '{model_id}'. "
                f"Use 'google:gemini-2.0-flash' or similar."
            )

        vendor, model = model_id.split(":", 1)
        if vendor not in _PROVIDER_MODULES:
            raise ValueError(f"Unknown provider '{vendor}'")

        module = import_module(_PROVIDER_MODULES[vendor])
        return module.ProviderImpl(model, timeout_seconds=timeout_seconds)

    @property
    def client(self):
        if self._client is None:
            try:
                self._client = self._create_client()
            except Exception as e:
                raise ProviderConnectionError(f"Could not create {self.name} client: {e}") from e
        return self._client

    def _create_client(self):
        raise NotImplementedError

    def complete(self, prompt: str, instructions: str, temperature: float = 0.7) -> str:
        """Send one prompt and return the raw response text."""
        raise NotImplementedError

    def generate_questions(self, prompt: str) -> list[QuestionDraft]:
        """Ask the model for question/answer pairs.

        Raises:
            ProviderParseError: If the response is not a non-empty JSON array
            pydantic.ValidationError: If an element lacks ``questionText`` or ``answer``
        """
        context = {"operation": "generate_questions", "provider": self.name, "model": self.model}
        with span(
            "llm.generate_questions",
            component="provider",
            operation="generate_questions",
            provider=self.name,
            model=self.model,
            prompt_len=len(prompt),
        ):
            content = self.complete(prompt, SYSTEM_INSTRUCTIONS["questions"], temperature=0.7)
            data = parse_json_response(content, context)

            if not isinstance(data, list):
                raise ProviderParseError(f"Expected a JSON array, got {type(data).__name__}")
            if not data:
                raise ProviderParseError("Model returned an empty question list")

            # provenance comes from this path, never from the model output
            drafts = _drafts_adapter.validate_python(data)
            return [draft.model_copy(update={"source": QuestionSource.AI_GENERATED}) for draft in drafts]

    def explain_question(self, prompt: str) -> Explanation:
        """Ask the model for a structured explanation of one question."""
        context = {"operation": "explain_question", "provider": self.name, "model": self.model}
        with span(
            "llm.explain_question",
            component="provider",
            operation="explain_question",
            provider=self.name,
            model=self.model,
            prompt_len=len(prompt),
        ):
            content = self.complete(prompt, SYSTEM_INSTRUCTIONS["explanations"], temperature=0.3)
            data = parse_json_response(content, context)

            if not isinstance(data, dict):
                raise ProviderParseError(f"Expected a JSON object, got {type(data).__name__}")

            return Explanation.model_validate(data)
