"""
Shell Executor

Runs an already authorized command in a single shell subprocess, or reports
what would run in dry-run mode. No safety checks happen here; the
confirmation gate has decided before this is called.
"""

import logging
import subprocess
import sys
from typing import List, Optional

from ...core.errors import ShellAssistantError

logger = logging.getLogger(__name__)


class ExecError(ShellAssistantError):
    """The command could not be started or exited with a failure status."""

    def __init__(self, returncode: Optional[int], stderr: str):
        self.stderr = stderr
        self.returncode = returncode
        if returncode is None:
            message = stderr
        else:
            message = f"exit status {returncode}: {stderr.strip()}" if stderr.strip() else f"exit status {returncode}"
        super().__init__(message)


class ShellExecutor:
    """Executes commands through the platform shell."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    @staticmethod
    def shell_argv(command: str) -> List[str]:
        if sys.platform.startswith("win"):
            return ["powershell.exe", "-Command", command]
        return ["sh", "-c", command]

    def run(self, command: str, dry_run: bool = False) -> str:
        """
        Execute `command` and return its standard output.

        Args:
            command: Shell command to run
            dry_run: Only report the command, do not spawn anything

        Returns:
            Captured standard output, or a dry-run marker

        Raises:
            ExecError: Spawn failure, timeout or non-zero exit status
        """
        if dry_run:
            return f"Dry run: {command}"

        logger.info("Executing: %s", command)
        try:
            result = subprocess.run(
                self.shell_argv(command),
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecError(None, f"Command timed out after {self.timeout}s") from e
        except OSError as e:
            raise ExecError(None, f"Failed to start shell: {e}") from e

        if result.returncode != 0:
            logger.debug("Command failed with exit status %s", result.returncode)
            raise ExecError(result.returncode, result.stderr)
        return result.stdout


_default_executor = ShellExecutor()


def execute_command(command: str, dry_run: bool = False) -> str:
    """Run `command` with the shared executor."""
    return _default_executor.run(command, dry_run)
