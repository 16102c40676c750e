"""
Command Generation Module
Handles prompt construction, model calls and parsing of the model's answer
"""
from .ai_handler import generate_command
from .prompts import construct_prompt
from .response_parser import GeneratedCommand, ParseError, parse_response

__all__ = ['generate_command', 'construct_prompt', 'GeneratedCommand', 'ParseError', 'parse_response']
