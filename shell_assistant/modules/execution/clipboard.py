"""
Clipboard helper.

Pipes text into the first clipboard tool available on this platform.
"""

import logging
import shutil
import subprocess
import sys

from ...core.errors import ShellAssistantError

logger = logging.getLogger(__name__)

if sys.platform == "darwin":
    CLIPBOARD_TOOLS = [["pbcopy"]]
elif sys.platform.startswith("win"):
    CLIPBOARD_TOOLS = [["clip"]]
else:
    CLIPBOARD_TOOLS = [["wl-copy"], ["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]]


class ClipboardError(ShellAssistantError):
    """No clipboard tool is available or the copy failed."""


def copy_to_clipboard(text: str) -> str:
    """Copy `text` to the system clipboard and return the tool used."""
    for argv in CLIPBOARD_TOOLS:
        if shutil.which(argv[0]) is None:
            continue
        try:
            subprocess.run(argv, input=text, text=True, check=True, capture_output=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as e:
            raise ClipboardError(f"{argv[0]} failed: {e}") from e
        logger.debug("Copied %d characters with %s", len(text), argv[0])
        return argv[0]

    tools = ", ".join(argv[0] for argv in CLIPBOARD_TOOLS)
    raise ClipboardError(f"No clipboard tool found (tried: {tools})")
