"""Core utilities for shell_assistant.
This package provides shared helpers (logging, config, errors) used by every module.
"""
from .logger import get_logger, configure  # noqa: F401
from .errors import ShellAssistantError  # noqa: F401
