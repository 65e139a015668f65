"""
The line protocol spoken between a front-end and the chat CLI over stdin/stdout.

Each user turn is one stdin line. Real newlines inside a message are replaced
by a sentinel so the message stays on a single line; the CLI restores them.
Besides plain text, a line may be ``clear``, ``exit`` or an image command of
the form ``image "<path>" <prompt>``. On stdout the CLI writes ``You: `` when
it is ready for the next line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..exceptions import BridgeError

NEWLINE_SENTINEL = "<<NEWLINE>>"
PROMPT_MARKER = "You:"
EXIT_COMMAND = "exit"
CLEAR_COMMAND = "clear"
IMAGE_COMMAND = "image "


def encode_input(text: str) -> str:
    """Flatten a multi-line message into a single protocol line (without the line ending)."""
    return text.replace("\r\n", NEWLINE_SENTINEL).replace("\n", NEWLINE_SENTINEL).replace("\r", NEWLINE_SENTINEL)


def decode_input(line: str) -> str:
    """Restore the newlines of a protocol line."""
    return line.replace(NEWLINE_SENTINEL, "\n")


def build_image_command(image_path: str, prompt: str) -> str:
    """
    Builds the image command line for ``image_path``.

    Args:
        image_path: Path of the image to attach; it is always quoted.
        prompt: Text sent together with the image.

    Returns:
        The command, not yet newline-encoded.

    Raises:
        BridgeError: If the image path is blank.
    """
    if not image_path or not image_path.strip():
        raise BridgeError("Image path cannot be empty.")
    return f'{IMAGE_COMMAND}"{image_path}" {prompt}'


@dataclass(frozen=True)
class ImageCommand:
    """
    A parsed image command.

    Exactly one of ``path`` (with ``prompt``) or ``error`` is meaningful.
    """

    path: str = ""
    prompt: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_image_command(line: str) -> Optional[ImageCommand]:
    """
    Parses ``image "<path>" <prompt>``.

    Args:
        line: A decoded input line.

    Returns:
        None if the line is not an image command, otherwise the parsed
        command or an error when the path is not enclosed in quotes.
    """
    if len(line) <= len(IMAGE_COMMAND) or not line.startswith(IMAGE_COMMAND):
        return None

    quote_start = line.find('"', len(IMAGE_COMMAND))
    quote_end = line.find('"', quote_start + 1) if quote_start != -1 else -1
    if quote_start == -1 or quote_end == -1:
        return ImageCommand(error="Please enclose the image path in quotes.")

    path = line[quote_start + 1:quote_end]
    prompt = line[quote_end + 1:].lstrip(" \t")
    return ImageCommand(path=path, prompt=prompt)
