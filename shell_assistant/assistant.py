"""
Request pipeline.

One user request runs sequentially: prompt -> provider chain -> parser ->
safety classifier -> confirmation gate -> executor (or copy/abort) ->
persistence sinks. Interaction with the user is injected as callables so the
pipeline itself does no terminal I/O.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .core.errors import ShellAssistantError
from .modules.command_generation import GeneratedCommand, construct_prompt, generate_command
from .modules.confirmation import ConfirmationGate, GateState, UserAction
from .modules.execution import ExecError, ShellExecutor, copy_to_clipboard
from .modules.history.records import RequestRecord
from .modules.providers.chain import ProviderChain
from .modules.safety import CommandSafetyClassifier, PolicyConfig, SafetyVerdict

logger = logging.getLogger(__name__)

ActionChooser = Callable[[GeneratedCommand, SafetyVerdict], UserAction]
Confirmer = Callable[[GeneratedCommand, SafetyVerdict], bool]


class OfflineModeError(ShellAssistantError):
    """An online provider was about to be used while offline mode is on."""


@dataclass
class RequestOutcome:
    input: str
    generated: GeneratedCommand
    verdict: SafetyVerdict
    state: GateState
    output: Optional[str] = None
    exit_status: Optional[int] = None

    @property
    def executed(self) -> bool:
        return self.state is GateState.EXECUTING


class ShellAssistant:
    """Ties the command-generation and safety-gating pipeline together."""

    def __init__(self, chain: ProviderChain, policy: PolicyConfig,
                 executor: Optional[ShellExecutor] = None,
                 classifier: Optional[CommandSafetyClassifier] = None,
                 sinks: Iterable = (), offline: bool = False,
                 copier: Callable[[str], object] = copy_to_clipboard,
                 prompt_builder: Callable[[str], str] = construct_prompt):
        self.chain = chain
        self.policy = policy
        self.executor = executor or ShellExecutor()
        self.classifier = classifier or CommandSafetyClassifier()
        self.sinks = list(sinks)
        self.offline = offline
        self.copier = copier
        self.prompt_builder = prompt_builder

    def generate(self, user_input: str) -> GeneratedCommand:
        """Build the prompt and ask the provider chain for a command."""
        if self.offline and self.chain.is_online():
            raise OfflineModeError(
                f"Cannot use online LLM backend '{self.chain.name()}' in offline mode"
            )
        prompt = self.prompt_builder(user_input)
        logger.debug("Prompt: %s", prompt)
        return generate_command(self.chain, prompt)

    def classify(self, command: str) -> SafetyVerdict:
        return self.classifier.classify(command, self.policy)

    def process(self, user_input: str, choose_action: ActionChooser, confirm: Confirmer,
                force: bool = False, dry_run: bool = False) -> RequestOutcome:
        """
        Handle one request from natural language to a terminal gate state.

        Raises:
            LLMError, ParseError, OfflineModeError: nothing was generated
            ExecError, ClipboardError: after the request has been recorded
        """
        generated = self.generate(user_input)
        return self.handle_generated(user_input, generated, choose_action, confirm, force, dry_run)

    def handle_generated(self, user_input: str, generated: GeneratedCommand,
                         choose_action: ActionChooser, confirm: Confirmer,
                         force: bool = False, dry_run: bool = False) -> RequestOutcome:
        verdict = self.classify(generated.command)
        logger.info("Safety verdict for %r: %s", generated.command, verdict.level.value)

        gate = ConfirmationGate(verdict, force)
        if gate.requires_prompt:
            state = gate.choose(choose_action(generated, verdict))
            if state is GateState.CONFIRMING:
                state = gate.confirm(confirm(generated, verdict))
        else:
            state = gate.state

        outcome = RequestOutcome(user_input, generated, verdict, state)

        if state is GateState.EXECUTING:
            try:
                outcome.output = self.executor.run(generated.command, dry_run=dry_run)
                outcome.exit_status = None if dry_run else 0
            except ExecError as e:
                outcome.exit_status = e.returncode
                self._record(outcome, notes=f"execution failed: {e}", executed=True)
                raise
        elif state is GateState.COPYING:
            try:
                self.copier(generated.command)
            except ShellAssistantError as e:
                self._record(outcome, notes=f"copy failed: {e}")
                raise

        if dry_run and outcome.executed:
            self._record(outcome, notes="dry run", executed=False)
        else:
            self._record(outcome)
        return outcome

    def _record(self, outcome: RequestOutcome, notes: Optional[str] = None,
                executed: Optional[bool] = None) -> None:
        record = RequestRecord(
            input=outcome.input,
            command=outcome.generated.command,
            explanation=outcome.generated.explanation,
            verdict=outcome.verdict,
            executed=outcome.executed if executed is None else executed,
            exit_status=outcome.exit_status,
            backend=self.chain.name(),
            action=outcome.state.value,
            notes=notes,
        )
        for sink in self.sinks:
            try:
                sink.record(record)
            except Exception as e:
                logger.error("History sink %r failed: %s", sink, e)
