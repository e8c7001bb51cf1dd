import os

from openai import OpenAI

from .base import Provider
from .exceptions import extract_content_from_response


class ProviderImpl(Provider):
    name = "openai"

    def _create_client(self) -> OpenAI:
        # max_retries=0: a single attempt, the fallback covers failures
        return OpenAI(
            api_key=os.environ.get("OPENAI_API_KEY"),
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    def complete(self, prompt: str, instructions: str, temperature: float = 0.7) -> str:
        response = self.client.responses.create(
            model=self.model,
            input=prompt,
            instructions=instructions,
            temperature=temperature,
        )
        return extract_content_from_response(response, "openai")
