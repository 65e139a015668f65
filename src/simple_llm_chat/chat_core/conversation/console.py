"""Observers that render a turn as it happens."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO

from ..tools.models import ToolCall, ToolResult


class ChatConsole(Protocol):
    """
    Receives progress notifications from the conversation engine.

    Every hook is called synchronously from the turn loop, in transcript order.
    """

    def on_model_start(self) -> None:
        """A request to the model is about to be sent."""
        ...

    def on_content(self, text: str) -> None:
        """A content delta arrived from the stream."""
        ...

    def on_tool_request(self, call: ToolCall) -> None:
        ...

    def on_tool_result(self, call: ToolCall, result: ToolResult) -> None:
        ...

    def on_error(self, message: str) -> None:
        ...


class NullConsole:
    """Discards every notification."""

    def on_model_start(self) -> None:
        pass

    def on_content(self, text: str) -> None:
        pass

    def on_tool_request(self, call: ToolCall) -> None:
        pass

    def on_tool_result(self, call: ToolCall, result: ToolResult) -> None:
        pass

    def on_error(self, message: str) -> None:
        pass


class TerminalConsole:
    """
    Writes the transcript to a text stream the way the interactive client shows it.

    Content deltas are always written. With ``output_only`` the assistant
    prefix and the tool trace are suppressed, leaving just the model's text.
    """

    def __init__(
        self,
        assistant_name: str = "Assistant",
        output_only: bool = False,
        show_tool_output: bool = False,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        self.assistant_name = assistant_name
        self.output_only = output_only
        self.show_tool_output = show_tool_output
        self._out = stream if stream is not None else sys.stdout
        self._err = error_stream if error_stream is not None else sys.stderr

    def _write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def on_model_start(self) -> None:
        if not self.output_only:
            self._write(f"\n{self.assistant_name}: ")

    def on_content(self, text: str) -> None:
        self._write(text)

    def on_tool_request(self, call: ToolCall) -> None:
        if not self.output_only:
            self._write(f"\n[tool request] {call.name} with arguments: {call.arguments}\n")

    def on_tool_result(self, call: ToolCall, result: ToolResult) -> None:
        if self.output_only:
            return
        if self.show_tool_output:
            self._write(f"[tool output]\n{result.text}")
        else:
            self._write(f"[tool output]\nExit Code: {result.exit_code}\n")
        if not result.handled:
            self._write("[warning] tool not fully handled.\n")

    def on_error(self, message: str) -> None:
        self._err.write(message + "\n")
        self._err.flush()
