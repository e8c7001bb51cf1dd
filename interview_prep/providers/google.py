import os

from google import genai
from google.genai import types

from .base import Provider
from .exceptions import extract_content_from_response


class ProviderImpl(Provider):
    name = "google"

    def _create_client(self) -> genai.Client:
        # HttpOptions.timeout is in milliseconds
        return genai.Client(
            api_key=os.environ.get("GEMINI_API_KEY"),
            http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
        )

    def complete(self, prompt: str, instructions: str, temperature: float = 0.7) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=instructions,
                temperature=temperature,
            ),
        )
        return extract_content_from_response(response, "google")
