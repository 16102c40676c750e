from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """A backend that turns a prompt into raw model text.

    `generate` returns the model's text or raises an LLMError subclass.
    """

    @abstractmethod
    def generate(self, prompt: str) -> str:
        ...

    @abstractmethod
    def name(self) -> str:
        ...

    def is_online(self) -> bool:
        """True if this provider needs internet access."""
        return False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name()}>"
