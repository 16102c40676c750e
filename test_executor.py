#!/usr/bin/env python3
"""Tests for the shell executor and clipboard helper."""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from unittest import mock

import pytest

from shell_assistant.modules.execution import ExecError, ShellExecutor, execute_command
from shell_assistant.modules.execution import clipboard
from shell_assistant.modules.execution.clipboard import ClipboardError, copy_to_clipboard

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="uses sh -c")


def test_dry_run_does_not_spawn():
    with mock.patch("subprocess.run") as run:
        assert execute_command("rm -rf /", dry_run=True) == "Dry run: rm -rf /"
    run.assert_not_called()


@posix_only
def test_shell_argv():
    assert ShellExecutor.shell_argv("ls -la") == ["sh", "-c", "ls -la"]


@posix_only
def test_run_returns_stdout():
    assert ShellExecutor().run("echo hello") == "hello\n"


@posix_only
def test_failure_carries_stderr_and_status():
    with pytest.raises(ExecError) as excinfo:
        ShellExecutor().run("echo oops >&2; exit 3")
    assert excinfo.value.returncode == 3
    assert "oops" in excinfo.value.stderr
    assert "exit status 3" in str(excinfo.value)


@posix_only
def test_timeout_is_exec_error():
    with pytest.raises(ExecError) as excinfo:
        ShellExecutor(timeout=0.2).run("sleep 5")
    assert excinfo.value.returncode is None


def test_clipboard_uses_first_available_tool(monkeypatch):
    runs = []
    monkeypatch.setattr(clipboard, "CLIPBOARD_TOOLS", [["missing-tool"], ["fake-copy"]])
    monkeypatch.setattr(clipboard.shutil, "which", lambda name: "/usr/bin/fake-copy" if name == "fake-copy" else None)
    monkeypatch.setattr(clipboard.subprocess, "run", lambda argv, **kwargs: runs.append((argv, kwargs["input"])))

    assert copy_to_clipboard("ls -la") == "fake-copy"
    assert runs == [(["fake-copy"], "ls -la")]


def test_clipboard_without_tools(monkeypatch):
    monkeypatch.setattr(clipboard.shutil, "which", lambda name: None)
    with pytest.raises(ClipboardError):
        copy_to_clipboard("ls")


def test_exec_error_carries_status_then_stderr():
    error = ExecError(2, "ls: cannot access 'missing': No such file or directory\n")
    assert error.returncode == 2
    assert error.stderr.startswith("ls: cannot access")
    assert str(error) == "exit status 2: ls: cannot access 'missing': No such file or directory"
    assert str(ExecError(None, "Failed to start shell")) == "Failed to start shell"
