"""
AI Handler for Command Generation
Generates a single shell command from a prompt through the provider chain
"""
import logging

from ..providers.chain import ProviderChain
from .response_parser import GeneratedCommand, parse_response

logger = logging.getLogger(__name__)


def generate_command(chain: ProviderChain, prompt: str) -> GeneratedCommand:
    """
    Generate a shell command for an already constructed prompt.

    The chain handles provider fallback; the raw text it returns is parsed
    into a command and explanation.

    Args:
        chain (ProviderChain): Providers configured for this session
        prompt (str): Prompt built by construct_prompt()

    Returns:
        GeneratedCommand: The parsed command and explanation

    Raises:
        LLMError: Every provider in the chain failed
        ParseError: The model output contained no usable command

    Example:
        >>> chain = build_provider_chain(AppConfig())
        >>> result = generate_command(chain, construct_prompt("list all files"))
        >>> result.command
        'ls -la'
    """
    raw = chain.generate_with_fallback(prompt)
    logger.debug("Raw LLM output: %r", raw)
    return parse_response(raw)
