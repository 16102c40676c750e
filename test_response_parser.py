#!/usr/bin/env python3
"""Tests for parsing raw model output into commands."""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import pytest

from shell_assistant.modules.command_generation import GeneratedCommand, ParseError, parse_response
from shell_assistant.modules.command_generation.response_parser import NO_EXPLANATION


def test_strict_json():
    result = parse_response('{"command": "ls -la", "explanation": "lists files"}')
    assert result == GeneratedCommand("ls -la", "lists files")


def test_serialized_command_parses_back_unchanged():
    original = GeneratedCommand("ls -la", "lists files")
    assert parse_response(original.to_json()) == original


def test_json_embedded_in_prose():
    raw = 'Sure! Here you go: {"command": "df -h", "explanation": "shows disk usage"} Hope that helps.'
    assert parse_response(raw) == GeneratedCommand("df -h", "shows disk usage")


def test_json_inside_markdown_fence():
    raw = '```json\n{"command": "uptime", "explanation": "system uptime"}\n```'
    assert parse_response(raw) == GeneratedCommand("uptime", "system uptime")


def test_labelled_lines():
    assert parse_response("Command: ls\nExplanation: lists files") == GeneratedCommand("ls", "lists files")


def test_first_label_wins():
    raw = "Command: ls\nCommand: pwd\nExplanation: first\nExplanation: second"
    assert parse_response(raw) == GeneratedCommand("ls", "first")


def test_fenced_block_yields_command():
    raw = "```bash\ndu -sh *\n```\nExplanation: size of each entry"
    assert parse_response(raw) == GeneratedCommand("du -sh *", "size of each entry")


def test_command_label_preferred_over_later_fence():
    raw = "Command: whoami\n```\nid\n```"
    result = parse_response(raw)
    assert result.command == "whoami"
    assert result.explanation == NO_EXPLANATION


def test_first_line_fallback():
    result = parse_response("ls -la\nLists all files\nincluding hidden ones")
    assert result == GeneratedCommand("ls -la", "Lists all files\nincluding hidden ones")


def test_single_line_gets_placeholder_explanation():
    assert parse_response("pwd") == GeneratedCommand("pwd", NO_EXPLANATION)


def test_empty_json_explanation_gets_placeholder():
    result = parse_response('{"command": "pwd", "explanation": ""}')
    assert result.explanation == NO_EXPLANATION


@pytest.mark.parametrize("raw", ["", "   \n\t  "])
def test_empty_output_is_an_error(raw):
    with pytest.raises(ParseError) as excinfo:
        parse_response(raw)
    assert excinfo.value.raw == raw or excinfo.value.raw == ""


def test_empty_json_command_is_an_error():
    raw = '{"command": "  ", "explanation": "nothing"}'
    with pytest.raises(ParseError) as excinfo:
        parse_response(raw)
    assert excinfo.value.raw == raw
    assert raw in str(excinfo.value)


def test_shell_syntax_is_left_untouched():
    raw = '{"command": "echo $HOME && rm -rf $(mktemp -d)", "explanation": "x"}'
    assert parse_response(raw).command == "echo $HOME && rm -rf $(mktemp -d)"


def test_fence_without_language_tag_yields_command():
    assert parse_response("```pwd\n```") == GeneratedCommand("pwd", NO_EXPLANATION)
    assert parse_response("```sh\nwhoami\n```").command == "whoami"


def test_empty_command_label_is_not_a_command():
    raw = "Command:\nExplanation: lists files"
    with pytest.raises(ParseError) as excinfo:
        parse_response(raw)
    assert excinfo.value.raw == raw

    result = parse_response("Command:\nls -la\nExplanation: lists files")
    assert result == GeneratedCommand("ls -la", "lists files")
