"""
Builds the session's provider chain from configuration and CLI overrides.
"""

import logging
import os
from typing import Optional

from .chain import ProviderChain
from .local_model import DEFAULT_MODEL_PATH, LocalModelProvider
from .ollama import ONLINE_MODELS, OllamaProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


def build_provider_chain(config, backend: Optional[str] = None, online: bool = False,
                         offline: bool = False, model_path: Optional[str] = None,
                         openai_model: Optional[str] = None) -> ProviderChain:
    """
    Create the provider chain for this session.

    Args:
        config: AppConfig with the `llm` and `privacy` sections
        backend: Backend override ("ollama", "llm-rs", "openai")
        online: Allow online providers and pick the downloadable Ollama model
        offline: Never construct online providers
        model_path: Override for the local GGUF model path
        openai_model: Override for the OpenAI model name

    Returns:
        ProviderChain with the selected primary and the local model as fallback

    Raises:
        CredentialError: OpenAI backend selected without a usable API key
    """
    llm = config.llm
    backend = (backend or llm.backend or "ollama").lower()
    offline = offline or (config.privacy.offline_only and not online)
    if model_path:
        local_path = os.path.expanduser(model_path)
    else:
        local_path = str(config.get_model_path() or DEFAULT_MODEL_PATH)

    def local_provider():
        return LocalModelProvider(local_path, max_tokens=llm.max_tokens, temperature=llm.temperature)

    if backend == "openai" and offline:
        logger.warning("OpenAI backend requires internet. Using local LLM instead.")
        return ProviderChain(local_provider())

    if backend == "llm-rs":
        return ProviderChain(local_provider())

    if backend == "openai":
        model = openai_model or llm.openai_model
        provider = OpenAIProvider(model=model, timeout=llm.timeout)
        logger.info("OpenAI backend initialized with model: %s", model)
        return ProviderChain(provider, local_provider())

    if backend != "ollama":
        logger.warning("Unknown backend: %s. Using default (Ollama)", backend)

    model = "wizardcoder" if online else llm.model
    if offline and model in ONLINE_MODELS:
        logger.warning("Ollama model '%s' requires internet. Using codellama instead.", model)
        model = "codellama"
    return ProviderChain(OllamaProvider(model, timeout=llm.timeout), local_provider())
