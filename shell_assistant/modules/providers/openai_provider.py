"""
OpenAI Provider

Hosted chat-completions backend. Requires OPENAI_API_KEY (environment or
.env file) and enforces a per-session ceiling on the number of calls.
"""

import logging
import os
import threading
from typing import Optional

import openai
from dotenv import load_dotenv
from openai import OpenAI

from .base import LLMProvider
from .errors import (
    CredentialError,
    NetworkError,
    RateLimitExceeded,
    SerializationError,
    UnknownLLMError,
)

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
MAX_CALLS_PER_SESSION = 50


class OpenAIProvider(LLMProvider):
    """Provider backed by the OpenAI chat completions API."""

    def __init__(self, model: str = DEFAULT_OPENAI_MODEL, api_key: Optional[str] = None,
                 max_calls: int = MAX_CALLS_PER_SESSION, base_url: Optional[str] = None,
                 timeout: float = 60.0, client=None):
        # Load environment variables so a .env file can provide the key
        load_dotenv()

        api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise CredentialError(
                "OPENAI_API_KEY environment variable not set. Please set your OpenAI API key."
            )
        if not api_key.startswith("sk-"):
            raise CredentialError("Invalid OpenAI API key format. API keys should start with 'sk-'")

        self.model = model
        self.max_calls = max_calls
        self._call_count = 0
        self._count_lock = threading.Lock()
        self._client = client or OpenAI(
            api_key=api_key,
            base_url=base_url or os.environ.get("OPENAI_BASE_URL"),
            timeout=timeout,
            max_retries=0,
        )

    @property
    def call_count(self) -> int:
        with self._count_lock:
            return self._call_count

    def _reserve_call(self) -> None:
        with self._count_lock:
            current = self._call_count
            self._call_count += 1
        if current >= self.max_calls:
            raise RateLimitExceeded(f"Session limit of {self.max_calls} OpenAI calls reached")

    def generate(self, prompt: str) -> str:
        self._reserve_call()

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.AuthenticationError as e:
            raise CredentialError(
                "Invalid OpenAI API key. Please check your OPENAI_API_KEY environment variable.",
                status_code=getattr(e, "status_code", None),
            ) from e
        except openai.RateLimitError as e:
            raise RateLimitExceeded(str(e), status_code=getattr(e, "status_code", None)) from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"Could not reach OpenAI: {e}") from e
        except openai.APIStatusError as e:
            raise UnknownLLMError(f"OpenAI API error: {e.message}", status_code=e.status_code) from e
        except openai.OpenAIError as e:
            raise UnknownLLMError(f"OpenAI request failed: {e}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise SerializationError("No choices in OpenAI response")

        content = choices[0].message.content
        if content is None:
            raise SerializationError("OpenAI response has no message content")
        return content

    def name(self) -> str:
        return "OpenAI"

    def is_online(self) -> bool:
        return True
