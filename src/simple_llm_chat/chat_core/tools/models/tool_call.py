"""Data models for tool execution."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolCall:
    """A finalized tool call requested by the model.

    ``arguments`` is the raw JSON string exactly as it was streamed; it is only
    parsed by the invoker. ``id`` may be empty on back-ends that never send one.
    """

    name: str
    arguments: str = ""
    id: str = ""


@dataclass(frozen=True)
class ToolResult:
    """Represents the outcome of executing (or refusing) a tool call.

    Attributes:
        text: Model-readable output, fed back as the tool message content.
        exit_code: 0 on success, non-zero on failure, -1 when the tool could not run at all.
        handled: False only when the tool name was not recognised.
    """

    text: str
    exit_code: int = 0
    handled: bool = True


def format_command_result(label: str, output: str, exit_code: int) -> str:
    """Render the uniform transcript block for an executed tool.

    Args:
        label: Short human readable description of what was run.
        output: Output produced by the tool.
        exit_code: Exit code reported by the tool.

    Returns:
        The formatted block.
    """
    return f"Command: {label}\nExit Code: {exit_code}\nOutput:\n{output}"
