"""
Command History

Bounded history of generated commands persisted as a JSON file. Entries are
loaded on start and the file is rewritten after every change. Users can mark
the last entry as helpful, not helpful, or correct its command.
"""

import json
import logging
import time
from collections import deque
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .records import RequestRecord

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 100


class FeedbackType(Enum):
    NONE = "none"
    HELPFUL = "helpful"
    NOT_HELPFUL = "not_helpful"
    EDITED = "edited"


@dataclass
class CommandEntry:
    input: str
    command: str
    explanation: Optional[str] = None
    timestamp: int = 0
    feedback: FeedbackType = FeedbackType.NONE
    original_command: Optional[str] = None
    safety_level: Optional[str] = None
    executed: bool = False
    exit_status: Optional[int] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["feedback"] = self.feedback.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CommandEntry":
        known = {key: value for key, value in data.items() if key in cls.__dataclass_fields__}
        known["feedback"] = FeedbackType(known.get("feedback", FeedbackType.NONE.value))
        return cls(**known)


class CommandHistory:
    """In-memory command history with optional JSON file persistence."""

    def __init__(self, file_path: Optional[str] = None, max_size: int = DEFAULT_HISTORY_SIZE):
        self.max_size = max_size
        self.file_path = Path(file_path) if file_path else None
        self._entries = deque(maxlen=max_size)
        if self.file_path:
            self._load()

    def _load(self) -> None:
        if not self.file_path.exists():
            return
        try:
            with self.file_path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            for item in data.get("entries", []):
                self._entries.append(CommandEntry.from_dict(item))
            logger.debug("Loaded %d history entries from %s", len(self._entries), self.file_path)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not load history file %s: %s", self.file_path, e)

    def _save(self) -> None:
        if not self.file_path:
            return
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with self.file_path.open("w", encoding="utf-8") as handle:
                json.dump({"entries": [e.to_dict() for e in self._entries]}, handle, indent=2)
        except OSError as e:
            logger.warning("Could not save history to %s: %s", self.file_path, e)

    def add_entry(self, input: str, command: str, explanation: Optional[str] = None,
                  **extra) -> CommandEntry:
        entry = CommandEntry(
            input=input,
            command=command,
            explanation=explanation,
            timestamp=int(time.time()),
            **extra,
        )
        self._entries.append(entry)
        self._save()
        return entry

    def record(self, record: RequestRecord) -> None:
        """Persistence sink: store one completed request."""
        self.add_entry(
            record.input,
            record.command,
            record.explanation,
            safety_level=record.verdict.level.value,
            executed=record.executed,
            exit_status=record.exit_status,
        )

    def update_last_entry_feedback(self, feedback: FeedbackType, edited_command: Optional[str] = None) -> bool:
        if not self._entries:
            return False
        entry = self._entries[-1]
        entry.feedback = feedback
        if feedback is FeedbackType.EDITED and edited_command:
            if entry.original_command is None:
                entry.original_command = entry.command
            entry.command = edited_command
        self._save()
        return True

    def entries(self) -> List[CommandEntry]:
        return list(self._entries)

    def get_recent(self, count: int) -> List[CommandEntry]:
        """Up to ``count`` entries, newest first."""
        return list(reversed(self._entries))[:max(count, 0)]

    def clear(self) -> None:
        self._entries.clear()
        self._save()

    def __len__(self) -> int:
        return len(self._entries)
