"""
Prompts for Command Generation Module
"""
import sys
from typing import Optional

JSON_SHAPE = (
    "{\n"
    "  \"command\": \"the actual shell command\",\n"
    "  \"explanation\": \"brief explanation of what the command does\"\n"
    "}\n\n"
)


def default_shell() -> str:
    return "Windows PowerShell" if sys.platform.startswith("win") else "Unix/Linux bash"


def json_only_instruction() -> str:
    """The model must answer with one JSON object and nothing around it."""
    return (
        "IMPORTANT: Respond with ONLY a valid JSON object containing a single command "
        "(no markdown, no text outside the JSON).\n\n"
    )


def construct_prompt(user_input: str, shell: Optional[str] = None) -> str:
    """Build the prompt asking the model to turn `user_input` into a shell command."""
    shell = shell or default_shell()
    parts = [
        f"You are a shell command assistant. Convert the following natural language query into a {shell} command.\n",
        json_only_instruction(),
        "Your response must be in this JSON format:\n",
        JSON_SHAPE,
        f"The command should be valid for {shell}. Do not include any markdown formatting, just return valid JSON.\n\n",
        f"USER QUERY: {user_input}\n",
    ]
    return ''.join(parts)
