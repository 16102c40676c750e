"""
Command Safety Classifier

Scores a candidate shell command against fixed risk rules and the
organization's allow/block policy. Classification is a pure function of the
command and the policy: no I/O, no hidden state, and it never raises.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional


class SafetyLevel(Enum):
    """Ordered risk levels: SAFE < WARNING < DANGEROUS < BLOCKED"""
    SAFE = "safe"
    WARNING = "warning"
    DANGEROUS = "dangerous"
    BLOCKED = "blocked"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, SafetyLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, SafetyLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, SafetyLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, SafetyLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_ORDER = [SafetyLevel.SAFE, SafetyLevel.WARNING, SafetyLevel.DANGEROUS, SafetyLevel.BLOCKED]


@dataclass(frozen=True)
class SafetyVerdict:
    """Result of classifying one command string."""
    level: SafetyLevel
    reason: Optional[str] = None

    @property
    def is_safe(self) -> bool:
        return self.level is SafetyLevel.SAFE

    @property
    def is_blocked(self) -> bool:
        return self.level is SafetyLevel.BLOCKED


@dataclass(frozen=True)
class PolicyConfig:
    """Organization-supplied command policy. Read-only for the classifier."""
    allowed_patterns: FrozenSet[str] = frozenset()
    blocked_patterns: FrozenSet[str] = frozenset()
    compliance_mode: bool = False


class CommandSafetyClassifier:
    """
    Evaluates shell commands for potential security risks.

    Checks run in a fixed order and the first match decides the verdict:
    policy blocklist, policy allowlist, known-safe tools, high-risk
    commands, dangerous flags, deletion combined with force/recursion, and
    file-overwriting redirection.
    """

    def __init__(self):
        """Initialize the classifier with its fixed rule tables."""
        # Listing/reading tools
        self.safe_commands = frozenset([
            "ls", "dir", "pwd", "cat", "head", "tail", "less", "more", "wc",
            "tree", "whoami", "date", "df", "du", "uname", "hostname", "which",
            "file", "stat", "ps", "env", "id", "uptime",
            "get-childitem", "gci", "get-content", "gc", "get-location",
            "get-process", "get-service", "get-date",
            "git status", "git log", "git diff", "git branch",
        ])

        self.high_risk_commands = frozenset([
            # Destructive file and disk operations
            "rm", "rmdir", "del", "deltree", "format", "fdisk", "mkfs", "dd",
            "mv", "rd", "erase", "shred", "wipefs", "parted",
            # Permissions and privilege escalation
            "chmod", "chown", "sudo", "su", "doas",
            # Process and service termination
            "kill", "killall", "pkill", "shutdown", "reboot", "halt", "poweroff",
            # PowerShell cmdlets
            "remove-item", "set-executionpolicy", "invoke-expression", "iex",
            "invoke-command", "invoke-webrequest", "start-process",
            "restart-computer", "stop-computer", "stop-service", "stop-process",
            "reset-service", "remove-service", "remove-module",
            "remove-psdrive", "remove-variable",
        ])

        # Force, recursive and silent-delete flags
        self.high_risk_patterns = [
            "-rf",
            "-r -f",
            "-force",
            "-confirm:$false",
            "-recursive",
            "force=true",
            "recurse",
            "/s /q",
            " /y",
        ]

        self.deletion_tokens = frozenset([
            "rm", "rmdir", "del", "rd", "erase", "remove-item", "unlink",
            "shred", "rmi", "prune", "purge", "-delete",
        ])
        self.force_tokens = frozenset([
            "-r", "-f", "-rf", "-fr", "-recurse", "-force", "--force",
            "--recursive", "/s", "/q", "/f",
        ])

        self._short_flag = re.compile(r"^-[a-z]{0,3}[rf][a-z]{0,3}$")
        self._compound_operator = re.compile(r"[;&|`<>]|\$\(")
        self._overwrite_redirect = re.compile(r"(?<!>)>(?![>&])")

    def classify(self, command: str, policy: PolicyConfig) -> SafetyVerdict:
        """
        Classify a shell command.

        Args:
            command: Candidate shell command
            policy: Organization policy (allow/block patterns, compliance mode)

        Returns:
            SafetyVerdict with the level and an advisory reason
        """
        verdict = self._classify(command, policy)
        if policy.compliance_mode and verdict.level is SafetyLevel.WARNING:
            return SafetyVerdict(SafetyLevel.DANGEROUS, verdict.reason)
        return verdict

    def _classify(self, command: str, policy: PolicyConfig) -> SafetyVerdict:
        command_lower = command.lower()
        words = command_lower.split()

        blocked = self._match_blocklist(command, command_lower, policy)
        if blocked is not None:
            return SafetyVerdict(SafetyLevel.BLOCKED, f"Command matches blocked pattern '{blocked}'")

        if not self._passes_allowlist(command, command_lower, policy):
            return SafetyVerdict(SafetyLevel.BLOCKED, "Command is not on the allowlist")

        if self._is_known_safe(command_lower, words):
            return SafetyVerdict(SafetyLevel.SAFE)

        risky = self._match_high_risk_command(words)
        if risky is not None:
            level = SafetyLevel.DANGEROUS if policy.compliance_mode else SafetyLevel.WARNING
            return SafetyVerdict(level, f"Command '{risky}' can be destructive")

        for pattern in self.high_risk_patterns:
            if pattern in command_lower:
                return SafetyVerdict(
                    SafetyLevel.DANGEROUS,
                    f"Pattern '{pattern.strip()}' often used in destructive operations",
                )

        if self._is_forced_deletion(words):
            return SafetyVerdict(SafetyLevel.DANGEROUS, "Recursive or forced deletion can be dangerous")

        if self._overwrite_redirect.search(command):
            return SafetyVerdict(SafetyLevel.WARNING, "File redirection (>) will overwrite existing files")

        return SafetyVerdict(SafetyLevel.SAFE)

    def _match_blocklist(self, command: str, command_lower: str, policy: PolicyConfig) -> Optional[str]:
        for pattern in sorted(policy.blocked_patterns):
            if not pattern:
                continue
            if pattern in command or pattern.lower() in command_lower:
                return pattern
        return None

    def _passes_allowlist(self, command: str, command_lower: str, policy: PolicyConfig) -> bool:
        allowed = [pattern for pattern in policy.allowed_patterns if pattern]
        if not allowed:
            return True
        return any(
            command.startswith(pattern) or command_lower.startswith(pattern.lower())
            for pattern in allowed
        )

    def _is_known_safe(self, command_lower: str, words: list) -> bool:
        if not words or self._compound_operator.search(command_lower):
            return False
        return words[0] in self.safe_commands or command_lower.strip() in self.safe_commands

    def _match_high_risk_command(self, words: list) -> Optional[str]:
        if words and self._is_high_risk(words[0]):
            return words[0]
        for word in words:
            clean_word = _strip_edges(word)
            if clean_word and self._is_high_risk(clean_word):
                return clean_word
        return None

    def _is_high_risk(self, word: str) -> bool:
        # mkfs.ext4, format.com
        return word in self.high_risk_commands or word.split(".", 1)[0] in self.high_risk_commands

    def _is_forced_deletion(self, words: list) -> bool:
        has_deletion = any(
            word in self.deletion_tokens or _strip_edges(word) in self.deletion_tokens
            for word in words
        )
        if not has_deletion:
            return False
        return any(
            word in self.force_tokens or self._short_flag.match(word)
            for word in words
        )


def _strip_edges(word: str) -> str:
    """Trim non-alphanumeric characters from both ends of a token."""
    start, end = 0, len(word)
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]


_default_classifier = CommandSafetyClassifier()


def classify_command(command: str, policy: PolicyConfig) -> SafetyVerdict:
    """Classify `command` under `policy` with the shared classifier."""
    return _default_classifier.classify(command, policy)
