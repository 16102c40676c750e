from dataclasses import dataclass
from typing import Optional

from ..safety.classifier import SafetyVerdict


@dataclass(frozen=True)
class RequestRecord:
    """What happened to one user request, handed to the persistence sinks."""
    input: str
    command: str
    explanation: str
    verdict: SafetyVerdict
    executed: bool
    exit_status: Optional[int] = None
    backend: str = ""
    action: str = ""
    notes: Optional[str] = None
