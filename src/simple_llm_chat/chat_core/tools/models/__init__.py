"""Tool-related data models."""

from .models import ToolDefinition, ToolParameter, ToolFunc
from .tool_call import ToolCall, ToolResult, format_command_result

__all__ = ["ToolDefinition", "ToolParameter", "ToolFunc", "ToolCall", "ToolResult", "format_command_result"]
