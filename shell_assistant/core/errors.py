"""
Shared exception base for shell_assistant.

Each module defines its own error types on top of ShellAssistantError so the
CLI can report any project failure without catching unrelated exceptions.
"""


class ShellAssistantError(Exception):
    """Base class for all errors raised by shell_assistant."""


class ConfigError(ShellAssistantError):
    """Configuration file could not be read or parsed."""
