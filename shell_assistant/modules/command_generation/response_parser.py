"""
Response Parser

Turns raw model text into a GeneratedCommand. Models do not always follow
the JSON instruction, so the parser accepts, in order of preference: a JSON
object, a JSON object embedded in prose, labelled "Command:"/"Explanation:"
lines or a fenced code block, and finally the first line of the text.

The parser only extracts text; it never interprets shell syntax.
"""

import json
from dataclasses import dataclass, asdict
from typing import Optional, Tuple

from ...core.errors import ShellAssistantError

NO_EXPLANATION = "No explanation provided"

COMMAND_LABEL = "Command:"
EXPLANATION_LABEL = "Explanation:"
FENCE = "```"
FENCE_TAGS = frozenset([
    "bash", "sh", "shell", "zsh", "console", "powershell", "pwsh", "ps1", "cmd", "bat", "json", "text",
])


class ParseError(ShellAssistantError):
    """Model output could not be turned into a command."""

    def __init__(self, raw: str, message: str = "Failed to parse LLM response"):
        self.raw = raw
        super().__init__(f"{message}. Raw response: {raw}")


@dataclass(frozen=True)
class GeneratedCommand:
    command: str
    explanation: str

    def to_json(self) -> str:
        return json.dumps(asdict(self))


def parse_response(raw: str) -> GeneratedCommand:
    """
    Parse raw model output into a command and its explanation.

    Args:
        raw: Text returned by the provider

    Returns:
        GeneratedCommand with non-empty command and explanation

    Raises:
        ParseError: raw is empty, or no command could be extracted
    """
    if raw is None or not raw.strip():
        raise ParseError(raw or "", "Empty LLM response")

    structured = _decode_structured(raw)
    if structured is None and '"command"' in raw and '"explanation"' in raw:
        start, end = raw.find("{"), raw.rfind("}")
        if start != -1 and end > start:
            structured = _decode_structured(raw[start:end + 1])

    if structured is not None:
        command, explanation = structured
        if not command:
            raise ParseError(raw, "LLM response contains an empty command")
        return GeneratedCommand(command, explanation or NO_EXPLANATION)

    command, explanation = _extract_from_text(raw)
    if not command:
        raise ParseError(raw)
    return GeneratedCommand(command, explanation or NO_EXPLANATION)


def _decode_structured(text: str) -> Optional[Tuple[str, str]]:
    try:
        payload = json.loads(text)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    command, explanation = payload.get("command"), payload.get("explanation")
    if not isinstance(command, str) or not isinstance(explanation, str):
        return None
    return command.strip(), explanation.strip()


def _extract_from_text(text: str) -> Tuple[Optional[str], Optional[str]]:
    command = None
    explanation = None
    fence_open = False
    fence_is_json = False
    fence_candidate_taken = False

    for line in text.splitlines():
        line = line.strip()

        if line.startswith(FENCE):
            body = line[len(FENCE):].strip()
            if not fence_open and body.endswith(FENCE):
                # one-line fence: ```ls -la```
                inline = body[:-len(FENCE)].strip()
                if inline and command is None:
                    command = inline
                continue
            if fence_open:
                fence_open = False
                continue
            fence_open = True
            fence_is_json = body.lower() == "json"
            fence_candidate_taken = False
            # ```pwd or ```ls -la: anything that is not a language tag is the command
            if body and body.lower() not in FENCE_TAGS and command is None:
                command = body
                fence_candidate_taken = True
            continue

        if fence_open:
            if line and not fence_is_json and not fence_candidate_taken and command is None:
                command = line
                fence_candidate_taken = True
            continue

        if line.startswith(COMMAND_LABEL):
            value = line[len(COMMAND_LABEL):].strip()
            if value and command is None:
                command = value
        elif line.startswith(EXPLANATION_LABEL):
            value = line[len(EXPLANATION_LABEL):].strip()
            if value and explanation is None:
                explanation = value

    if command is not None:
        return command, explanation

    return _first_line_fallback(text, explanation)


def _first_line_fallback(text: str, explanation: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    lines = [
        line.strip() for line in text.splitlines()
        if line.strip() and not line.strip().startswith(FENCE)
    ]
    if explanation is not None:
        lines = [line for line in lines if not line.startswith(EXPLANATION_LABEL)]
    # bare "Command:" labels carry no command
    lines = [line for line in lines if not line.startswith(COMMAND_LABEL)]
    if not lines:
        return None, explanation

    command = lines[0]
    if explanation is None:
        explanation = "\n".join(lines[1:]).strip() or NO_EXPLANATION
    return command, explanation
