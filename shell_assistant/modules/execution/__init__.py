"""
Execution Module
Runs confirmed commands in the platform shell or copies them to the clipboard
"""
from .clipboard import ClipboardError, copy_to_clipboard
from .executor import ExecError, ShellExecutor, execute_command

__all__ = ['ExecError', 'ShellExecutor', 'execute_command', 'ClipboardError', 'copy_to_clipboard']
