from .catalog import TOOL_NAMES, build_default_registry
from .execution import ApprovalCallback, ArgumentLookup, ToolArguments, ToolInvoker
from .models import ToolCall, ToolDefinition, ToolParameter, ToolResult, format_command_result
from .registry import ToolRegistry

__all__ = [
    "TOOL_NAMES",
    "build_default_registry",
    "ApprovalCallback",
    "ArgumentLookup",
    "ToolArguments",
    "ToolInvoker",
    "ToolCall",
    "ToolDefinition",
    "ToolParameter",
    "ToolResult",
    "format_command_result",
    "ToolRegistry",
]
