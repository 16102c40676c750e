"""
Confirmation Gate

State machine between the safety verdict, the user's choice and execution.

    PROMPTING --COPY--> COPYING
    PROMPTING --ABORT--> ABORTED
    PROMPTING --RUN (safe)--> EXECUTING
    PROMPTING --RUN (blocked)--> ABORTED
    PROMPTING --RUN (warning/dangerous)--> CONFIRMING --yes--> EXECUTING
                                                     --no---> ABORTED

A forced safe command starts directly in EXECUTING. Force never skips the
second confirmation of a warning or dangerous command. A blocked command can
never reach EXECUTING. Terminal states are entered once; the gate does not
return to PROMPTING.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Union

from ...core.errors import ShellAssistantError
from ..safety.classifier import SafetyLevel, SafetyVerdict

logger = logging.getLogger(__name__)


class UserAction(Enum):
    RUN = "run"
    COPY = "copy"
    ABORT = "abort"


class GateState(Enum):
    PROMPTING = "prompting"
    CONFIRMING = "confirming"
    EXECUTING = "executing"
    COPYING = "copying"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (GateState.EXECUTING, GateState.COPYING, GateState.ABORTED)


class GateStateError(ShellAssistantError):
    """A transition was requested that the current state does not allow."""


class ConfirmationGate:
    """Decides whether a classified command may proceed to execution."""

    def __init__(self, verdict: SafetyVerdict, force: bool = False):
        self.verdict = verdict
        self.force = force
        if force and verdict.level is SafetyLevel.SAFE:
            self.state = GateState.EXECUTING
        else:
            self.state = GateState.PROMPTING

    @property
    def requires_prompt(self) -> bool:
        return self.state is GateState.PROMPTING

    def choose(self, action: UserAction) -> GateState:
        self._expect(GateState.PROMPTING)
        level = self.verdict.level

        if action is UserAction.COPY:
            return self._enter(GateState.COPYING)
        if action is UserAction.ABORT:
            return self._enter(GateState.ABORTED)

        if level is SafetyLevel.SAFE:
            return self._enter(GateState.EXECUTING)
        if level is SafetyLevel.BLOCKED:
            logger.warning("Refusing to run command blocked by policy: %s", self.verdict.reason)
            return self._enter(GateState.ABORTED)
        return self._enter(GateState.CONFIRMING)

    def confirm(self, affirmed: bool) -> GateState:
        self._expect(GateState.CONFIRMING)
        if affirmed and self.verdict.level is not SafetyLevel.BLOCKED:
            return self._enter(GateState.EXECUTING)
        return self._enter(GateState.ABORTED)

    def _expect(self, state: GateState) -> None:
        if self.state is not state:
            raise GateStateError(f"Cannot transition from {self.state.value}; expected {state.value}")

    def _enter(self, state: GateState) -> GateState:
        logger.debug("Gate %s -> %s (level=%s)", self.state.value, state.value, self.verdict.level.value)
        self.state = state
        return state


def resolve(verdict: SafetyVerdict, force: bool, action: UserAction,
            confirm: Optional[Union[bool, Callable[[], bool]]] = None) -> GateState:
    """
    Run the gate to a terminal state in one call.

    Args:
        verdict: Classifier output for the command
        force: Run safe commands without prompting; unsafe ones are still confirmed
        action: The user's choice
        confirm: Secondary confirmation, a bool or a callable asked only when
            confirmation is required. Missing means declined.

    Returns:
        EXECUTING, COPYING or ABORTED
    """
    gate = ConfirmationGate(verdict, force)
    if not gate.requires_prompt:
        return gate.state

    state = gate.choose(action)
    if state is GateState.CONFIRMING:
        affirmed = confirm() if callable(confirm) else bool(confirm)
        state = gate.confirm(affirmed)
    return state
