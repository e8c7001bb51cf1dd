"""Generative AI provider configuration service."""

import os

DEFAULT_MODEL_ID = "google:gemini-2.0-flash"
DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_TIMEOUT_SECONDS = 300.0


class LLMConfig:
    """Model selection and call timeout, read from the environment."""

    def __init__(self):
        self.model_id = os.getenv("MODEL_ID") or DEFAULT_MODEL_ID
        self.timeout_seconds = self._get_timeout_seconds()

    def _get_timeout_seconds(self) -> float:
        try:
            timeout = float(os.getenv("LLM_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)))
        except (ValueError, TypeError):
            return DEFAULT_TIMEOUT_SECONDS

        if timeout <= 0 or timeout > MAX_TIMEOUT_SECONDS:
            return DEFAULT_TIMEOUT_SECONDS
        return timeout
