"""
Local Model Provider

Runs a GGUF model file in-process through llama-cpp-python. The model is
loaded lazily on the first prompt and reused for the rest of the session.
"""

import logging
import os
import threading

from .base import LLMProvider
from .errors import LocalModelError

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PATH = "models/tinyllama.gguf"


class LocalModelProvider(LLMProvider):
    """Provider backed by a local GGUF model file."""

    def __init__(self, model_path: str = DEFAULT_MODEL_PATH, max_tokens: int = 256,
                 temperature: float = 0.7, n_ctx: int = 2048, n_threads: int = None,
                 n_gpu_layers: int = 0):
        self.model_path = model_path
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.n_ctx = n_ctx
        self.n_threads = n_threads or os.cpu_count() or 1
        self.n_gpu_layers = n_gpu_layers
        self._llm = None
        self._load_lock = threading.Lock()

    def _load_model(self):
        with self._load_lock:
            if self._llm is not None:
                return self._llm

            if not os.path.exists(self.model_path):
                raise LocalModelError(f"Model file not found: {self.model_path}")

            try:
                from llama_cpp import Llama
            except ImportError as e:
                raise LocalModelError(
                    "llama-cpp-python is required for the local backend. "
                    "Install it with: pip install llama-cpp-python"
                ) from e

            logger.info("Loading model: %s", self.model_path)
            logger.debug("Config: ctx=%s, threads=%s, gpu_layers=%s",
                         self.n_ctx, self.n_threads, self.n_gpu_layers)
            try:
                self._llm = Llama(
                    model_path=self.model_path,
                    n_ctx=self.n_ctx,
                    n_threads=self.n_threads,
                    n_gpu_layers=self.n_gpu_layers,
                    verbose=False,
                )
            except Exception as e:
                raise LocalModelError(f"Failed to load model: {e}") from e
            return self._llm

    def generate(self, prompt: str) -> str:
        llm = self._load_model()
        try:
            result = llm(prompt, max_tokens=self.max_tokens, temperature=self.temperature)
        except Exception as e:
            raise LocalModelError(f"Inference error: {e}") from e

        try:
            return result["choices"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise LocalModelError(f"Unexpected inference result: {e}") from e

    def name(self) -> str:
        return "llama.cpp"
