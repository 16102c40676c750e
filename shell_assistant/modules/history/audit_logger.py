"""
Command Audit Logger

Append-only JSON-lines audit trail of generated commands, what the safety
classifier said about them, and whether they were executed.
"""

import getpass
import json
import logging
import os
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .records import RequestRecord

logger = logging.getLogger(__name__)


@dataclass
class AuditEntry:
    timestamp: str
    user: str
    input: str
    generated_command: str
    executed: bool
    safety_level: str
    llm_backend: str = ""
    action: str = ""
    exit_code: Optional[int] = None
    organization: Optional[str] = None
    department: Optional[str] = None
    notes: Optional[str] = None
    session_id: Optional[str] = None


@dataclass
class AuditStats:
    total_commands: int = 0
    executed_commands: int = 0
    failed_commands: int = 0
    dangerous_commands: int = 0


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.getenv("USER") or os.getenv("USERNAME") or "unknown"


class AuditLogger:
    """
    Append-only audit logger for generated commands.
    """

    def __init__(self, log_path: str, organization: Optional[str] = None,
                 department: Optional[str] = None):
        """
        Initialize audit logger.

        Args:
            log_path: File receiving one JSON object per line
            organization: Organization recorded with every entry
            department: Department recorded with every entry
        """
        self.log_path = Path(log_path)
        self.organization = organization
        self.department = department
        self.session_id = uuid.uuid4().hex
        self.user = _current_user()

    def log_command(self, input: str, generated_command: str, executed: bool,
                    safety_level: str, llm_backend: str = "", exit_code: Optional[int] = None,
                    notes: Optional[str] = None, action: str = "") -> Optional[AuditEntry]:
        """
        Write one audit entry.

        Returns:
            The entry written, or None if the log could not be written
        """
        entry = AuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            user=self.user,
            input=input,
            generated_command=generated_command,
            executed=executed,
            safety_level=safety_level,
            llm_backend=llm_backend,
            action=action,
            exit_code=exit_code,
            organization=self.organization,
            department=self.department,
            notes=notes,
            session_id=self.session_id,
        )
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(asdict(entry)) + "\n")
        except OSError as e:
            logger.error("Failed to write audit log %s: %s", self.log_path, e)
            return None
        return entry

    def record(self, record: RequestRecord) -> None:
        """Persistence sink: audit one completed request."""
        self.log_command(
            input=record.input,
            generated_command=record.command,
            executed=record.executed,
            safety_level=record.verdict.level.value,
            llm_backend=record.backend,
            action=record.action,
            exit_code=record.exit_status,
            notes=record.notes or record.verdict.reason,
        )

    def read_entries(self) -> List[AuditEntry]:
        if not self.log_path.exists():
            return []

        entries = []
        with self.log_path.open("r", encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    entries.append(AuditEntry(**{
                        key: value for key, value in data.items()
                        if key in AuditEntry.__dataclass_fields__
                    }))
                except (ValueError, TypeError) as e:
                    logger.warning("Skipping malformed audit line %d: %s", line_number, e)
        return entries

    def entries_for_user(self, username: str) -> List[AuditEntry]:
        return [e for e in self.read_entries() if e.user == username]

    def entries_by_safety(self, safety_level: str) -> List[AuditEntry]:
        return [e for e in self.read_entries() if e.safety_level == safety_level]

    def get_entries_in_range(self, start: datetime, end: datetime) -> List[AuditEntry]:
        """Entries whose timestamp falls within [start, end]. Naive bounds are taken as UTC."""
        start, end = _as_utc(start), _as_utc(end)
        selected = []
        for entry in self.read_entries():
            try:
                stamp = _as_utc(datetime.fromisoformat(entry.timestamp))
            except ValueError:
                logger.warning("Skipping audit entry with bad timestamp: %s", entry.timestamp)
                continue
            if start <= stamp <= end:
                selected.append(entry)
        return selected

    def get_statistics(self) -> AuditStats:
        stats = AuditStats()
        for entry in self.read_entries():
            stats.total_commands += 1
            if entry.executed:
                stats.executed_commands += 1
                if entry.exit_code not in (None, 0):
                    stats.failed_commands += 1
            if entry.safety_level in ("dangerous", "blocked"):
                stats.dangerous_commands += 1
        return stats
