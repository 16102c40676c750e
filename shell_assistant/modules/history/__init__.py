"""
History Module
Command history and audit trail sinks for completed requests
"""
from .audit_logger import AuditEntry, AuditLogger, AuditStats
from .command_history import CommandEntry, CommandHistory, FeedbackType
from .records import RequestRecord

__all__ = [
    'AuditEntry', 'AuditLogger', 'AuditStats',
    'CommandEntry', 'CommandHistory', 'FeedbackType', 'RequestRecord',
]
