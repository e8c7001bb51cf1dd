import os

from anthropic import Anthropic

from .base import Provider
from .exceptions import extract_content_from_response


class ProviderImpl(Provider):
    name = "anthropic"

    def _create_client(self) -> Anthropic:
        return Anthropic(
            api_key=os.environ.get("ANTHROPIC_API_KEY"),
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    def complete(self, prompt: str, instructions: str, temperature: float = 0.7) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=2000,
            system=instructions,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return extract_content_from_response(response, "anthropic")
