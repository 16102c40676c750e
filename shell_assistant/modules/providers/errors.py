"""
Provider error taxonomy.

Every backend failure is raised as an LLMError subclass so callers (and the
fallback chain) can handle provider problems without catching anything else.
"""
from enum import Enum
from typing import Optional

from ...core.errors import ShellAssistantError


class LLMErrorKind(Enum):
    """Kinds of provider failure"""
    NETWORK = "network"
    SERIALIZATION = "serialization"
    LOCAL_MODEL = "local_model"
    CREDENTIAL = "credential"
    RATE_LIMIT = "rate_limit"
    UNKNOWN = "unknown"


class LLMError(ShellAssistantError):
    """Base class for provider failures."""
    kind = LLMErrorKind.UNKNOWN
    label = "LLM error"

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        detail = self.message
        if self.status_code is not None:
            detail = f"({self.status_code}) {detail}".strip()
        return f"{self.label}: {detail}" if detail else self.label


class NetworkError(LLMError):
    kind = LLMErrorKind.NETWORK
    label = "Network error"


class SerializationError(LLMError):
    kind = LLMErrorKind.SERIALIZATION
    label = "Serialization error"


class LocalModelError(LLMError):
    kind = LLMErrorKind.LOCAL_MODEL
    label = "Local model error"


class CredentialError(LLMError):
    kind = LLMErrorKind.CREDENTIAL
    label = "API key error"


class RateLimitExceeded(LLMError):
    kind = LLMErrorKind.RATE_LIMIT
    label = "Rate limit exceeded"


class UnknownLLMError(LLMError):
    kind = LLMErrorKind.UNKNOWN
    label = "Unknown error"
