"""
Provider fallback chain.

A primary provider plus at most one fallback, fixed when the session starts.
The fallback is tried exactly once after a primary failure; its error is the
one reported when both fail.
"""

import logging
from typing import List, Optional

from .base import LLMProvider
from .errors import LLMError

logger = logging.getLogger(__name__)


class ProviderChain:
    """Ordered primary/fallback pair of providers."""

    def __init__(self, primary: LLMProvider, fallback: Optional[LLMProvider] = None):
        self.primary = primary
        # Never retry the same provider
        self.fallback = fallback if fallback is not primary else None

    @property
    def providers(self) -> List[LLMProvider]:
        return [p for p in (self.primary, self.fallback) if p is not None]

    def name(self) -> str:
        return self.primary.name()

    def is_online(self) -> bool:
        """True if any provider in the chain needs internet access."""
        return any(p.is_online() for p in self.providers)

    def generate_with_fallback(self, prompt: str) -> str:
        try:
            return self.primary.generate(prompt)
        except LLMError as e:
            if self.fallback is None:
                logger.error("%s failed: %s", self.primary.name(), e)
                raise
            logger.warning("%s failed: %s. Falling back to %s...",
                           self.primary.name(), e, self.fallback.name())

        try:
            return self.fallback.generate(prompt)
        except LLMError as e:
            logger.error("%s failed: %s. No further fallback.", self.fallback.name(), e)
            raise
