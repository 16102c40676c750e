"""
shell_assistant: natural-language requests to shell commands, gated by a
safety classifier and an explicit confirmation step.
"""
from .assistant import OfflineModeError, RequestOutcome, ShellAssistant
from .modules.command_generation import GeneratedCommand, ParseError, construct_prompt, generate_command, parse_response
from .modules.confirmation import ConfirmationGate, GateState, UserAction, resolve
from .modules.execution import ExecError, ShellExecutor, execute_command
from .modules.providers import LLMError, ProviderChain, build_provider_chain
from .modules.safety import CommandSafetyClassifier, PolicyConfig, SafetyLevel, SafetyVerdict, classify_command

__version__ = "0.1.0"

__all__ = [
    'ShellAssistant', 'RequestOutcome', 'OfflineModeError',
    'generate_command', 'construct_prompt', 'parse_response', 'GeneratedCommand', 'ParseError',
    'classify_command', 'CommandSafetyClassifier', 'PolicyConfig', 'SafetyLevel', 'SafetyVerdict',
    'resolve', 'ConfirmationGate', 'GateState', 'UserAction',
    'execute_command', 'ShellExecutor', 'ExecError',
    'ProviderChain', 'build_provider_chain', 'LLMError',
]
