"""Line protocol between a front-end and the chat CLI, and a driver for the child process."""

from .driver import ChatProcess
from .framing import FrameEvent, PromptFramer
from .protocol import (
    CLEAR_COMMAND,
    EXIT_COMMAND,
    NEWLINE_SENTINEL,
    PROMPT_MARKER,
    ImageCommand,
    build_image_command,
    decode_input,
    encode_input,
    parse_image_command,
)

__all__ = [
    "ChatProcess",
    "FrameEvent",
    "PromptFramer",
    "CLEAR_COMMAND",
    "EXIT_COMMAND",
    "NEWLINE_SENTINEL",
    "PROMPT_MARKER",
    "ImageCommand",
    "build_image_command",
    "decode_input",
    "encode_input",
    "parse_image_command",
]
