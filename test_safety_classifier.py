#!/usr/bin/env python3
"""Tests for the command safety classifier."""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import pytest

from shell_assistant.modules.safety import (
    CommandSafetyClassifier,
    PolicyConfig,
    SafetyLevel,
    SafetyVerdict,
    classify_command,
)

OPEN = PolicyConfig()
STRICT = PolicyConfig(compliance_mode=True)


def test_levels_are_ordered():
    assert SafetyLevel.SAFE < SafetyLevel.WARNING < SafetyLevel.DANGEROUS < SafetyLevel.BLOCKED
    assert max([SafetyLevel.WARNING, SafetyLevel.BLOCKED, SafetyLevel.SAFE]) is SafetyLevel.BLOCKED


@pytest.mark.parametrize("command", ["ls -la", "pwd", "cat README.md", "git status", "Get-ChildItem"])
def test_listing_and_reading_tools_are_safe(command):
    assert classify_command(command, OPEN).level is SafetyLevel.SAFE
    assert classify_command(command, STRICT).level is SafetyLevel.SAFE


def test_rm_rf_root_under_compliance_is_dangerous():
    verdict = classify_command("rm -rf /", STRICT)
    assert verdict.level is SafetyLevel.DANGEROUS
    assert "rm" in verdict.reason


def test_high_risk_command_is_warning_without_compliance():
    assert classify_command("rm -rf /tmp/build", OPEN).level is SafetyLevel.WARNING
    assert classify_command("sudo apt update", OPEN).level is SafetyLevel.WARNING
    assert classify_command("Remove-Item -Recurse C:\\temp", OPEN).level is SafetyLevel.WARNING


def test_high_risk_token_anywhere_in_command():
    verdict = classify_command("find . -name '*.pyc' | xargs rm", OPEN)
    assert verdict.level is SafetyLevel.WARNING
    assert verdict.reason == "Command 'rm' can be destructive"


def test_dotted_filesystem_tools_are_high_risk():
    assert classify_command("mkfs.ext4 /dev/sdb1", OPEN).level is SafetyLevel.WARNING


def test_safe_prefix_does_not_launder_chained_commands():
    assert classify_command("ls && rm notes.txt", OPEN).level is SafetyLevel.WARNING
    assert classify_command("cat a.txt > b.txt", OPEN).level is SafetyLevel.WARNING


def test_dangerous_flag_pattern():
    verdict = classify_command("cp -rf src/ dest/", OPEN)
    assert verdict.level is SafetyLevel.DANGEROUS
    assert "-rf" in verdict.reason


def test_forced_deletion_heuristic():
    verdict = classify_command("docker system prune -f", OPEN)
    assert verdict.level is SafetyLevel.DANGEROUS
    assert verdict.reason == "Recursive or forced deletion can be dangerous"


def test_overwrite_redirection_is_warning_but_append_is_not():
    assert classify_command("echo hello > out.txt", OPEN).level is SafetyLevel.WARNING
    assert classify_command("echo hello >> out.txt", OPEN).level is SafetyLevel.SAFE


def test_plain_command_is_safe():
    verdict = classify_command("echo hello", OPEN)
    assert verdict == SafetyVerdict(SafetyLevel.SAFE)
    assert verdict.is_safe


def test_blocklist_blocks_case_insensitively():
    policy = PolicyConfig(blocked_patterns=frozenset(["format"]))
    assert classify_command("format c:", policy).level is SafetyLevel.BLOCKED
    assert classify_command("FORMAT C:", policy).level is SafetyLevel.BLOCKED


def test_allowlist_blocks_everything_else():
    policy = PolicyConfig(allowed_patterns=frozenset(["git ", "ls"]))
    assert classify_command("git log --oneline", policy).level is SafetyLevel.SAFE
    assert classify_command("ls -la", policy).level is SafetyLevel.SAFE

    verdict = classify_command("curl example.com", policy)
    assert verdict.is_blocked
    assert verdict.reason == "Command is not on the allowlist"


def test_empty_allowlist_is_a_no_op():
    policy = PolicyConfig(allowed_patterns=frozenset())
    assert classify_command("echo hi", policy).level is SafetyLevel.SAFE


def test_blocklist_dominates_allowlist():
    policy = PolicyConfig(
        allowed_patterns=frozenset(["rm"]),
        blocked_patterns=frozenset(["rm -rf"]),
    )
    assert classify_command("rm -rf build", policy).level is SafetyLevel.BLOCKED


@pytest.mark.parametrize("command", [
    "rm notes.txt",
    "echo data > file.txt",
    "chmod 777 script.sh",
    "kill 1234",
])
def test_compliance_mode_never_relaxes_a_warning(command):
    assert classify_command(command, OPEN).level is SafetyLevel.WARNING
    assert classify_command(command, STRICT).level >= SafetyLevel.DANGEROUS


@pytest.mark.parametrize("command", ["", "   ", "rm -rf /", "ls", "echo $(whoami) > x"])
def test_classification_is_deterministic_and_total(command):
    classifier = CommandSafetyClassifier()
    policy = PolicyConfig(blocked_patterns=frozenset(["shutdown"]), compliance_mode=True)
    first = classifier.classify(command, policy)
    for _ in range(3):
        assert classifier.classify(command, policy) == first
    assert isinstance(first.level, SafetyLevel)
