"""
Ollama Provider

Sends prompts to a locally running Ollama daemon over its HTTP generate API.
"""

import logging
from typing import Optional

import requests

from .base import LLMProvider
from .errors import NetworkError, SerializationError

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434/api/generate"

# Models that Ollama has to download before first use
ONLINE_MODELS = {"wizardcoder"}


class OllamaProvider(LLMProvider):
    """Provider backed by the Ollama daemon."""

    def __init__(self, model: str = "codellama", api_url: str = DEFAULT_OLLAMA_URL,
                 timeout: float = 60.0, session: Optional[requests.Session] = None):
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        logger.debug("POST %s model=%s", self.api_url, self.model)

        try:
            response = self._session.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise NetworkError(f"Ollama request timed out after {self.timeout}s: {e}") from e
        except requests.RequestException as e:
            raise NetworkError(f"Could not reach Ollama at {self.api_url}: {e}") from e

        if not response.ok:
            raise NetworkError(
                f"Ollama API error: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise SerializationError(f"Ollama returned invalid JSON: {e}") from e

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise SerializationError("Ollama response is missing the 'response' field")
        return text

    def name(self) -> str:
        return "Ollama"

    def is_online(self) -> bool:
        return self.model in ONLINE_MODELS
