"""
Providers Module
LLM backends (Ollama daemon, local GGUF model, OpenAI API) and the fallback chain
"""
from .base import LLMProvider
from .chain import ProviderChain
from .errors import (
    CredentialError,
    LLMError,
    LLMErrorKind,
    LocalModelError,
    NetworkError,
    RateLimitExceeded,
    SerializationError,
    UnknownLLMError,
)
from .factory import build_provider_chain
from .local_model import LocalModelProvider
from .ollama import OllamaProvider
from .openai_provider import OpenAIProvider

__all__ = [
    'LLMProvider', 'ProviderChain', 'build_provider_chain',
    'OllamaProvider', 'LocalModelProvider', 'OpenAIProvider',
    'LLMError', 'LLMErrorKind', 'NetworkError', 'SerializationError', 'LocalModelError',
    'CredentialError', 'RateLimitExceeded', 'UnknownLLMError',
]
