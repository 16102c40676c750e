#!/usr/bin/env python3
"""Tests for the confirmation gate state machine."""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import itertools

import pytest

from shell_assistant.modules.confirmation import ConfirmationGate, GateState, UserAction, resolve
from shell_assistant.modules.confirmation.gate import GateStateError
from shell_assistant.modules.safety import SafetyLevel, SafetyVerdict

SAFE = SafetyVerdict(SafetyLevel.SAFE)
WARNING = SafetyVerdict(SafetyLevel.WARNING, "Command 'rm' can be destructive")
DANGEROUS = SafetyVerdict(SafetyLevel.DANGEROUS, "Command 'rm' can be destructive")
BLOCKED = SafetyVerdict(SafetyLevel.BLOCKED, "Command matches blocked pattern 'format'")


def test_forced_safe_command_executes_without_prompt():
    gate = ConfirmationGate(SAFE, force=True)
    assert gate.state is GateState.EXECUTING
    assert not gate.requires_prompt


def test_safe_run_executes():
    assert resolve(SAFE, False, UserAction.RUN) is GateState.EXECUTING


@pytest.mark.parametrize("verdict", [WARNING, DANGEROUS])
def test_unsafe_run_requires_confirmation(verdict):
    gate = ConfirmationGate(verdict)
    assert gate.choose(UserAction.RUN) is GateState.CONFIRMING
    assert gate.confirm(True) is GateState.EXECUTING


@pytest.mark.parametrize("verdict", [WARNING, DANGEROUS])
def test_declined_or_missing_confirmation_aborts(verdict):
    assert resolve(verdict, False, UserAction.RUN, confirm=False) is GateState.ABORTED
    assert resolve(verdict, False, UserAction.RUN) is GateState.ABORTED


def test_confirmation_callable_only_asked_when_needed():
    asked = []

    def confirm():
        asked.append(True)
        return True

    assert resolve(SAFE, False, UserAction.RUN, confirm) is GateState.EXECUTING
    assert asked == []
    assert resolve(DANGEROUS, False, UserAction.RUN, confirm) is GateState.EXECUTING
    assert asked == [True]


@pytest.mark.parametrize("verdict", [WARNING, DANGEROUS])
def test_force_still_requires_confirmation_for_unsafe_levels(verdict):
    asked = []

    def decline():
        asked.append(True)
        return False

    assert resolve(verdict, True, UserAction.RUN, decline) is GateState.ABORTED
    assert asked == [True]
    assert resolve(verdict, True, UserAction.RUN) is GateState.ABORTED

    gate = ConfirmationGate(verdict, force=True)
    assert gate.requires_prompt
    assert gate.choose(UserAction.RUN) is GateState.CONFIRMING


@pytest.mark.parametrize("verdict", [SAFE, WARNING, DANGEROUS, BLOCKED])
def test_copy_and_abort(verdict):
    assert resolve(verdict, False, UserAction.COPY) is GateState.COPYING
    assert resolve(verdict, False, UserAction.ABORT) is GateState.ABORTED


def test_blocked_never_executes():
    for force, action, confirm in itertools.product(
        (False, True), list(UserAction), (None, False, True, lambda: True),
    ):
        assert resolve(BLOCKED, force, action, confirm) is not GateState.EXECUTING


def test_blocked_confirmation_cannot_override():
    gate = ConfirmationGate(BLOCKED)
    gate.state = GateState.CONFIRMING
    assert gate.confirm(True) is GateState.ABORTED


def test_rm_rf_root_aborts_without_confirmation():
    assert resolve(DANGEROUS, False, UserAction.RUN, confirm=None) is GateState.ABORTED


def test_terminal_states_are_entered_once():
    gate = ConfirmationGate(SAFE)
    gate.choose(UserAction.ABORT)
    assert gate.state.is_terminal
    with pytest.raises(GateStateError):
        gate.choose(UserAction.RUN)
    with pytest.raises(GateStateError):
        gate.confirm(True)
